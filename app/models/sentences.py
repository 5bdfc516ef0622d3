from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.models.common import Level
from app.utils.normalize import DEFAULT_LEVEL


class SentencePairItem(BaseModel):
    word: str = Field(min_length=1)
    sentences: list[str] = Field(min_length=2, max_length=2)


def clean_sentence_items(items: list[Any]) -> list[dict[str, Any]]:
    """Keep only items with a word and exactly two non-blank sentences."""
    cleaned: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        word = str(item.get("word") or "").strip()
        raw_sentences = item.get("sentences")
        if not isinstance(raw_sentences, list):
            continue
        sentences = [str(s if s is not None else "").strip() for s in raw_sentences]
        if word and len(sentences) == 2 and all(sentences):
            cleaned.append({"word": word, "sentences": sentences})
    return cleaned


class SentencesFeedbackRequest(BaseModel):
    items: list[SentencePairItem]
    level: Level = DEFAULT_LEVEL

    @field_validator("items", mode="before")
    @classmethod
    def _clean_items(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list) or not value:
            raise ValueError("Missing 'items' (array).")
        items = clean_sentence_items(value)
        if not items:
            raise ValueError("Each item must have a word and 2 sentences.")
        return items


class SentenceCorrectionOut(BaseModel):
    original: str
    corrected: str
    issues: list[str]
    tips: list[str]


class SentenceResultOut(BaseModel):
    word: str
    sentences: list[SentenceCorrectionOut] = Field(min_length=2, max_length=2)
    overall_tips: list[str]


class SentencesFeedbackOut(BaseModel):
    results: list[SentenceResultOut]
