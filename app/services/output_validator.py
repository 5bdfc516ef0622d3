import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from app.models.resume import ResumeScoreOut
from app.models.sentences import SentencesFeedbackOut
from app.models.vocabulary import VocabularyItemOut
from app.models.writing import WritingFeedbackOut
from app.services.prompts import ENDPOINTS, EndpointKind

RESPONSE_MODELS: dict[EndpointKind, type[BaseModel]] = {
    "writing_feedback": WritingFeedbackOut,
    "vocabulary": VocabularyItemOut,
    "sentences_feedback": SentencesFeedbackOut,
    "resume_score": ResumeScoreOut,
}


@dataclass(frozen=True)
class ModelReply:
    ok: bool
    raw: str
    value: Any = None
    error: str | None = None


def _fail(raw: str, message: str) -> ModelReply:
    return ModelReply(ok=False, raw=raw, error=message)


def _first_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def _validate_vocabulary(raw: str, items: list[Any], expected_count: int | None) -> ModelReply:
    if expected_count is not None and len(items) != expected_count:
        return _fail(raw, f"Model returned {len(items)} items for {expected_count} words.")
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            return _fail(raw, f"Item {index} is not a JSON object.")
        if item.get("translations") is None:
            item["translations"] = {}
        try:
            VocabularyItemOut.model_validate(item)
        except ValidationError as exc:
            return _fail(raw, f"Item {index} has an invalid shape ({_first_error(exc)}).")
    return ModelReply(ok=True, raw=raw, value=items)


def validate_output(kind: EndpointKind, raw: str, *, expected_count: int | None = None) -> ModelReply:
    """Parse model text strictly; never coerce a bad reply into defaults."""
    shape = ENDPOINTS[kind].shape
    if shape == "text":
        text = (raw or "").strip()
        if not text:
            return _fail(raw, "Model returned an empty reply.")
        return ModelReply(ok=True, raw=raw, value=text)

    try:
        parsed = json.loads((raw or "").strip())
    except json.JSONDecodeError:
        return _fail(raw, "Model did not return valid JSON.")

    if shape == "array":
        if not isinstance(parsed, list):
            return _fail(raw, "Model did not return a valid JSON array.")
        return _validate_vocabulary(raw, parsed, expected_count)

    if not isinstance(parsed, dict):
        return _fail(raw, "Model did not return a JSON object.")
    try:
        RESPONSE_MODELS[kind].model_validate(parsed)
    except ValidationError as exc:
        return _fail(raw, f"Model JSON does not match the expected shape ({_first_error(exc)}).")
    return ModelReply(ok=True, raw=raw, value=parsed)
