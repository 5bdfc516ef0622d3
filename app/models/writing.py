from typing import Any

from pydantic import BaseModel, field_validator

from app.models.common import Level, clean_optional_text
from app.utils.normalize import DEFAULT_LEVEL

MAX_TEXT_CHARS = 8000


class WritingFeedbackRequest(BaseModel):
    text: str
    level: Level = DEFAULT_LEVEL
    stepName: str = "Writing"

    @field_validator("text", mode="before")
    @classmethod
    def _clean_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Missing or invalid 'text'.")
        text = value.strip()
        if len(text) > MAX_TEXT_CHARS:
            raise ValueError(f"'text' is longer than {MAX_TEXT_CHARS} characters.")
        return text

    @field_validator("stepName", mode="before")
    @classmethod
    def _clean_step_name(cls, value: Any) -> str:
        return clean_optional_text(value) or "Writing"


class WritingFeedbackOut(BaseModel):
    corrected_text: str
    key_issues: list[str]
    rewrite_suggestions: list[str]
    quick_tips: list[str]
