from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.ai_provider import CompletionGateway, get_completion_gateway
from app.services.context_fetcher import LessonContext, get_lesson_context_fetcher


class FakeGateway(CompletionGateway):
    provider_name = "fake"

    def __init__(self) -> None:
        self.replies: list[str] = []
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    async def complete(self, *, system, user, model, temperature, schema=None) -> str:
        self.calls.append(
            {"system": system, "user": user, "model": model, "temperature": temperature, "schema": schema}
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


class FakeLessonFetcher:
    def __init__(self) -> None:
        self.result = LessonContext(ok=True, title="Talking about the weather", description="Useful weather words.")
        self.urls: list[str] = []

    async def __call__(self, url: str) -> LessonContext:
        self.urls.append(url)
        return self.result


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def lesson_fetcher() -> FakeLessonFetcher:
    return FakeLessonFetcher()


@pytest.fixture
def client(gateway: FakeGateway, lesson_fetcher: FakeLessonFetcher):
    app.dependency_overrides[get_completion_gateway] = lambda: gateway
    app.dependency_overrides[get_lesson_context_fetcher] = lambda: lesson_fetcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
