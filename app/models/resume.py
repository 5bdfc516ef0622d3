from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.common import Level, clean_word_list
from app.utils.normalize import DEFAULT_LEVEL

LEGACY_DRAFT_FIELDS = ("writing1", "writing2", "writing100")


def normalize_drafts(data: dict[str, Any]) -> list[str]:
    """Prefer `drafts`; fall back to the three legacy named fields in order."""
    raw = data.get("drafts")
    if not isinstance(raw, list):
        raw = [data.get(name) for name in LEGACY_DRAFT_FIELDS]
    drafts: list[str] = []
    for item in raw:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            drafts.append(text)
    return drafts


class ResumeScoreRequest(BaseModel):
    drafts: list[str] = Field(default_factory=list)
    newWords: list[str] = Field(default_factory=list)
    sentencesByWord: dict[str, Any] = Field(default_factory=dict)
    level: Level = DEFAULT_LEVEL

    @model_validator(mode="before")
    @classmethod
    def _merge_legacy_drafts(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        merged = {key: value for key, value in data.items() if key not in LEGACY_DRAFT_FIELDS}
        merged["drafts"] = normalize_drafts(data)
        return merged

    @field_validator("newWords", mode="before")
    @classmethod
    def _clean_new_words(cls, value: Any) -> list[str]:
        return clean_word_list(value)

    @field_validator("sentencesByWord", mode="before")
    @classmethod
    def _clean_sentences_by_word(cls, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            return {}
        return {str(key): item for key, item in value.items()}


class ResumeBreakdownOut(BaseModel):
    grammar: int = Field(ge=0, le=25)
    clarity: int = Field(ge=0, le=25)
    vocabulary: int = Field(ge=0, le=25)
    improvement: int = Field(ge=0, le=25)


class ResumeScoreOut(BaseModel):
    summary: str
    score_total: int = Field(ge=0, le=100)
    breakdown: ResumeBreakdownOut
    next_steps: list[str]
