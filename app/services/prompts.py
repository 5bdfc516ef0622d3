from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel

from app.models.conversation import ConversationContextOut, ConversationRequest
from app.models.resume import ResumeScoreRequest
from app.models.sentences import SentencesFeedbackRequest
from app.models.vocabulary import VocabularyRequest
from app.models.writing import WritingFeedbackRequest
from app.services.context_fetcher import LessonContext
from app.services.levels import level_label, style_guidance
from app.utils.normalize import ProficiencyLevel
from app.utils.serialize import stable_json

EndpointKind = Literal[
    "writing_feedback",
    "vocabulary",
    "sentences_feedback",
    "resume_score",
    "conversation",
]
OutputShape = Literal["object", "array", "text"]

OPENING_INSTRUCTION = (
    "Start the conversation: greet me briefly and ask one open question about the topic."
)


@dataclass(frozen=True)
class OutputSchema:
    name: str
    schema: dict[str, Any]


@dataclass(frozen=True)
class EndpointSpec:
    role: str
    temperature: float
    shape: OutputShape
    keys: tuple[str, ...] = ()
    schema: OutputSchema | None = None


@dataclass(frozen=True)
class Prompt:
    kind: EndpointKind
    system: str
    user: str | list[dict[str, str]]
    temperature: float
    schema: OutputSchema | None = None


_STRING: dict[str, Any] = {"type": "string"}
_STRING_LIST: dict[str, Any] = {"type": "array", "items": _STRING}
_INTEGER: dict[str, Any] = {"type": "integer"}


def _strict_object(properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


WRITING_FEEDBACK_SCHEMA = OutputSchema(
    name="writing_feedback",
    schema=_strict_object(
        {
            "corrected_text": _STRING,
            "key_issues": _STRING_LIST,
            "rewrite_suggestions": _STRING_LIST,
            "quick_tips": _STRING_LIST,
        }
    ),
)

SENTENCES_FEEDBACK_SCHEMA = OutputSchema(
    name="sentences_feedback",
    schema=_strict_object(
        {
            "results": {
                "type": "array",
                "items": _strict_object(
                    {
                        "word": _STRING,
                        "sentences": {
                            "type": "array",
                            "items": _strict_object(
                                {
                                    "original": _STRING,
                                    "corrected": _STRING,
                                    "issues": _STRING_LIST,
                                    "tips": _STRING_LIST,
                                }
                            ),
                        },
                        "overall_tips": _STRING_LIST,
                    }
                ),
            }
        }
    ),
)

RESUME_SCORE_SCHEMA = OutputSchema(
    name="resume_score",
    schema=_strict_object(
        {
            "summary": _STRING,
            "score_total": _INTEGER,
            "breakdown": _strict_object(
                {
                    "grammar": _INTEGER,
                    "clarity": _INTEGER,
                    "vocabulary": _INTEGER,
                    "improvement": _INTEGER,
                }
            ),
            "next_steps": _STRING_LIST,
        }
    ),
)

ENDPOINTS: dict[EndpointKind, EndpointSpec] = {
    "writing_feedback": EndpointSpec(
        role="an English tutor giving feedback on a learner's writing",
        temperature=0.2,
        shape="object",
        keys=(
            "corrected_text (string)",
            "key_issues (array of strings)",
            "rewrite_suggestions (array of strings)",
            "quick_tips (array of strings)",
        ),
        schema=WRITING_FEEDBACK_SCHEMA,
    ),
    "vocabulary": EndpointSpec(
        role="an English vocabulary coach",
        temperature=0.3,
        shape="array",
        keys=(
            "word (string)",
            "definition (string)",
            "synonyms (array of strings)",
            "examples (array of strings)",
            "collocations (array of strings)",
        ),
    ),
    "sentences_feedback": EndpointSpec(
        role="an English teacher correcting example sentences written with new words",
        temperature=0.2,
        shape="object",
        keys=(
            "results (array with one entry per input item, in the same order; each entry has "
            "word (string), sentences (array of exactly 2 objects with original (string), "
            "corrected (string), issues (array of strings), tips (array of strings)), "
            "overall_tips (array of strings))",
        ),
        schema=SENTENCES_FEEDBACK_SCHEMA,
    ),
    "resume_score": EndpointSpec(
        role="an English tutor and evaluator scoring a learner's study session",
        temperature=0.2,
        shape="object",
        keys=(
            "summary (string)",
            "score_total (integer 0-100)",
            "breakdown (object with grammar, clarity, vocabulary, improvement; each an integer 0-25)",
            "next_steps (array of strings)",
        ),
        schema=RESUME_SCORE_SCHEMA,
    ),
    "conversation": EndpointSpec(
        role="a friendly English conversation partner",
        temperature=0.7,
        shape="text",
    ),
}


def _level_block(level: ProficiencyLevel) -> list[str]:
    return [
        f"Learner level: {level_label(level)}.",
        "Adapt your language to the learner level:",
        style_guidance(level),
    ]


def _json_system(kind: EndpointKind, level: ProficiencyLevel, extra_keys: tuple[str, ...] = ()) -> str:
    spec = ENDPOINTS[kind]
    container = "an array of items, each item an object" if spec.shape == "array" else "an object"
    lines = [
        f"You are {spec.role}.",
        *_level_block(level),
        "",
        f"Return ONLY valid JSON: {container} with keys:",
        *(f"- {key}" for key in spec.keys + extra_keys),
        "Do not wrap the JSON in markdown code fences and do not add any other text.",
    ]
    return "\n".join(lines)


def translation_clause(locale_codes: list[str]) -> str:
    if locale_codes:
        return (
            "translations (object keyed by exactly these locale codes: "
            f"{', '.join(locale_codes)}; each value is the translation of the word)"
        )
    return "translations (empty object {}; no translation was requested)"


def build_writing_feedback_prompt(request: WritingFeedbackRequest) -> Prompt:
    user = f"Step: {request.stepName}\nStudent text:\n{request.text}\n\nReturn the JSON now."
    spec = ENDPOINTS["writing_feedback"]
    return Prompt(
        kind="writing_feedback",
        system=_json_system("writing_feedback", request.level),
        user=user,
        temperature=spec.temperature,
        schema=spec.schema,
    )


def build_vocabulary_prompt(request: VocabularyRequest) -> Prompt:
    locales = request.locale_codes
    clause = translation_clause(locales)
    if locales:
        requirement = f"Translate every word into: {', '.join(locales)}."
    else:
        requirement = "Do not translate; return translations as {}."
    user = (
        "Words (return exactly one item per word, in this order):\n"
        f"{stable_json(request.words)}\n"
        f"{requirement}\n\n"
        "Return the JSON array now."
    )
    return Prompt(
        kind="vocabulary",
        system=_json_system("vocabulary", request.level, (clause,)),
        user=user,
        temperature=ENDPOINTS["vocabulary"].temperature,
    )


def build_sentences_feedback_prompt(request: SentencesFeedbackRequest) -> Prompt:
    items = [item.model_dump() for item in request.items]
    user = (
        "Each item has a target word and two sentences the learner wrote with it.\n"
        f"{stable_json({'items': items})}\n\n"
        "Return the JSON now."
    )
    spec = ENDPOINTS["sentences_feedback"]
    return Prompt(
        kind="sentences_feedback",
        system=_json_system("sentences_feedback", request.level),
        user=user,
        temperature=spec.temperature,
        schema=spec.schema,
    )


def build_resume_score_prompt(request: ResumeScoreRequest) -> Prompt:
    drafts = stable_json(request.drafts) if request.drafts else "(no drafts submitted)"
    user = (
        "Student session data:\n"
        f"- Drafts (in the order they were written):\n{drafts}\n"
        f"- New words: {stable_json(request.newWords)}\n"
        f"- Sentences by word: {stable_json(request.sentencesByWord)}\n\n"
        "Return the JSON now."
    )
    spec = ENDPOINTS["resume_score"]
    return Prompt(
        kind="resume_score",
        system=_json_system("resume_score", request.level),
        user=user,
        temperature=spec.temperature,
        schema=spec.schema,
    )


def resolve_topic(request: ConversationRequest, lesson: LessonContext | None) -> ConversationContextOut:
    """Pick what the conversation is about: lesson metadata, then the caller's summary."""
    reason = lesson.reason if lesson is not None and not lesson.ok else None
    if lesson is not None and lesson.ok:
        return ConversationContextOut(
            ok=True,
            source="lesson",
            title=lesson.title,
            description=lesson.description,
        )
    if request.topicResume:
        return ConversationContextOut(ok=False, source="topic_resume", description=request.topicResume, reason=reason)
    return ConversationContextOut(ok=False, source="none", reason=reason)


def build_conversation_prompt(request: ConversationRequest, topic: ConversationContextOut) -> Prompt:
    lines = [
        f"You are {ENDPOINTS['conversation'].role} helping a learner practise speaking.",
        *_level_block(request.level),
        "",
        "Rules:",
        "- Keep each reply short (2-4 sentences) and ask at most one question per turn.",
        "- If the learner makes a mistake, give a brief, gentle correction before you continue.",
        "- Reply in plain conversational prose. Never reply with JSON, markdown or lists.",
        "",
    ]
    if topic.source == "lesson":
        lines.append(f"Lesson topic: {topic.title or 'untitled lesson'}")
        if topic.description:
            lines.append(f"Lesson summary: {topic.description}")
    elif topic.source == "topic_resume":
        lines.append(f"Topic summary: {topic.description}")
    else:
        lines.append("No lesson topic is available; talk about an everyday topic the learner enjoys.")
    if request.vocabulary:
        lines.append(
            "Target vocabulary (use these words naturally and invite the learner to use them): "
            + ", ".join(request.vocabulary)
        )

    history = [message.model_dump() for message in request.messages]
    if not history:
        history = [{"role": "user", "content": OPENING_INSTRUCTION}]
    return Prompt(
        kind="conversation",
        system="\n".join(lines),
        user=history,
        temperature=ENDPOINTS["conversation"].temperature,
    )


def build_prompt(kind: EndpointKind, request: BaseModel, *, topic: ConversationContextOut | None = None) -> Prompt:
    if kind == "writing_feedback" and isinstance(request, WritingFeedbackRequest):
        return build_writing_feedback_prompt(request)
    if kind == "vocabulary" and isinstance(request, VocabularyRequest):
        return build_vocabulary_prompt(request)
    if kind == "sentences_feedback" and isinstance(request, SentencesFeedbackRequest):
        return build_sentences_feedback_prompt(request)
    if kind == "resume_score" and isinstance(request, ResumeScoreRequest):
        return build_resume_score_prompt(request)
    if kind == "conversation" and isinstance(request, ConversationRequest):
        return build_conversation_prompt(request, topic or resolve_topic(request, None))
    raise TypeError(f"No prompt builder for {kind} with {type(request).__name__}")
