from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.models.common import Level, clean_word_list
from app.utils.normalize import DEFAULT_LEVEL, normalize_locale_codes

MAX_WORDS = 50


class VocabularyRequest(BaseModel):
    words: list[str]
    level: Level = DEFAULT_LEVEL
    nativeLanguageCode: Any = None
    nativeLanguageCodes: Any = None

    @field_validator("words", mode="before")
    @classmethod
    def _clean_words(cls, value: Any) -> list[str]:
        if not isinstance(value, list) or not value:
            raise ValueError("Missing or invalid 'words' array.")
        words = clean_word_list(value)
        if not words:
            raise ValueError("'words' has no usable entries after removing blanks.")
        if len(words) > MAX_WORDS:
            raise ValueError(f"Too many words: send at most {MAX_WORDS} per request.")
        return words

    @property
    def locale_codes(self) -> list[str]:
        return normalize_locale_codes(self.nativeLanguageCode, self.nativeLanguageCodes)


class VocabularyItemOut(BaseModel):
    word: str
    definition: str
    synonyms: list[str]
    examples: list[str]
    collocations: list[str]
    translations: dict[str, Any] = Field(default_factory=dict)
