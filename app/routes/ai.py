from fastapi import APIRouter, Depends

from app.config import Settings, get_settings
from app.models.conversation import ConversationReplyOut, ConversationRequest
from app.models.resume import ResumeScoreRequest
from app.models.sentences import SentencesFeedbackRequest
from app.models.vocabulary import VocabularyRequest
from app.models.writing import WritingFeedbackRequest
from app.services.ai_provider import CompletionGateway, get_completion_gateway
from app.services.context_fetcher import LessonContextFetcher, get_lesson_context_fetcher
from app.services.pipeline import run_prompt
from app.services.prompts import (
    build_conversation_prompt,
    build_resume_score_prompt,
    build_sentences_feedback_prompt,
    build_vocabulary_prompt,
    build_writing_feedback_prompt,
    resolve_topic,
)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/writing-feedback")
async def writing_feedback(
    payload: WritingFeedbackRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
    settings: Settings = Depends(get_settings),
):
    return await run_prompt(gateway, settings, build_writing_feedback_prompt(payload))


@router.post("/vocabulary")
async def vocabulary(
    payload: VocabularyRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
    settings: Settings = Depends(get_settings),
):
    prompt = build_vocabulary_prompt(payload)
    return await run_prompt(gateway, settings, prompt, expected_count=len(payload.words))


@router.post("/sentences-feedback")
async def sentences_feedback(
    payload: SentencesFeedbackRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
    settings: Settings = Depends(get_settings),
):
    return await run_prompt(gateway, settings, build_sentences_feedback_prompt(payload))


@router.post("/resume-score")
async def resume_score(
    payload: ResumeScoreRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
    settings: Settings = Depends(get_settings),
):
    return await run_prompt(gateway, settings, build_resume_score_prompt(payload))


@router.post("/conversation", response_model=ConversationReplyOut)
async def conversation(
    payload: ConversationRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
    settings: Settings = Depends(get_settings),
    fetch_context: LessonContextFetcher = Depends(get_lesson_context_fetcher),
):
    # The lesson fetch always settles before the prompt is built.
    lesson = await fetch_context(payload.lessonUrl) if payload.lessonUrl else None
    topic = resolve_topic(payload, lesson)
    reply = await run_prompt(gateway, settings, build_conversation_prompt(payload, topic))
    return ConversationReplyOut(reply=reply, level=payload.level, context=topic)
