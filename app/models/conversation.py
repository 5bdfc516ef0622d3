from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.models.common import clean_optional_text
from app.utils.normalize import ProficiencyLevel, clamp_text, normalize_level, unique_strings

MAX_HISTORY_MESSAGES = 20
MAX_VOCABULARY = 30
MAX_TOPIC_RESUME_CHARS = 1000

ChatRole = Literal["user", "assistant"]
ContextSource = Literal["lesson", "topic_resume", "none"]


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


def clean_history(items: list[Any]) -> list[dict[str, str]]:
    history: list[dict[str, str]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        content = clean_optional_text(item.get("content"))
        if not content:
            continue
        role = "assistant" if item.get("role") == "assistant" else "user"
        history.append({"role": role, "content": content})
    return history[-MAX_HISTORY_MESSAGES:]


class ConversationRequest(BaseModel):
    level: ProficiencyLevel
    messages: list[ChatMessage]
    vocabulary: list[str] = Field(default_factory=list)
    lessonUrl: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lessonUrl", "lesson_url", "url"),
    )
    topicResume: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _require_level(cls, value: Any) -> ProficiencyLevel:
        if clean_optional_text(value) is None:
            raise ValueError("Missing 'level'.")
        return normalize_level(value)

    @field_validator("messages", mode="before")
    @classmethod
    def _clean_messages(cls, value: Any) -> list[dict[str, str]]:
        if not isinstance(value, list):
            raise ValueError("Missing 'messages' (array).")
        return clean_history(value)

    @field_validator("vocabulary", mode="before")
    @classmethod
    def _clean_vocabulary(cls, value: Any) -> list[str]:
        return unique_strings(value, limit=MAX_VOCABULARY)

    @field_validator("lessonUrl", mode="before")
    @classmethod
    def _clean_lesson_url(cls, value: Any) -> str | None:
        return clean_optional_text(value)

    @field_validator("topicResume", mode="before")
    @classmethod
    def _clean_topic_resume(cls, value: Any) -> str | None:
        text = clean_optional_text(value)
        return clamp_text(text, MAX_TOPIC_RESUME_CHARS) if text else None


class ConversationContextOut(BaseModel):
    ok: bool
    source: ContextSource
    title: str | None = None
    description: str | None = None
    reason: str | None = None


class ConversationReplyOut(BaseModel):
    reply: str
    level: ProficiencyLevel
    context: ConversationContextOut
