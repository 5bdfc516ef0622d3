import asyncio
import json
from functools import lru_cache
from typing import Any
from urllib import error, request

from app.config import get_settings
from app.errors import UpstreamCallError
from app.services.prompts import OutputSchema

ChatHistory = list[dict[str, str]]


def build_messages(system: str, user: str | ChatHistory) -> ChatHistory:
    history = [{"role": "user", "content": user}] if isinstance(user, str) else list(user)
    return [{"role": "system", "content": system}, *history]


class CompletionGateway:
    provider_name = "base"

    async def complete(
        self,
        *,
        system: str,
        user: str | ChatHistory,
        model: str,
        temperature: float,
        schema: OutputSchema | None = None,
    ) -> str:
        raise NotImplementedError


class OpenAiGateway(CompletionGateway):
    """Chat-completions client: one round trip per call, no retries."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        use_response_schema: bool = True,
    ):
        self.api_key = api_key
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.timeout = timeout
        self.use_response_schema = use_response_schema

    def build_payload(
        self,
        *,
        system: str,
        user: str | ChatHistory,
        model: str,
        temperature: float,
        schema: OutputSchema | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "messages": build_messages(system, user),
        }
        if schema is not None and self.use_response_schema:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema.name, "strict": True, "schema": schema.schema},
            }
        return payload

    async def complete(
        self,
        *,
        system: str,
        user: str | ChatHistory,
        model: str,
        temperature: float,
        schema: OutputSchema | None = None,
    ) -> str:
        if not self.api_key:
            raise UpstreamCallError("OPENAI_API_KEY is not configured")
        payload = self.build_payload(system=system, user=user, model=model, temperature=temperature, schema=schema)
        response_data = await self._call_chat_api(payload)
        return _extract_message_text(response_data)

    async def _call_chat_api(self, payload: dict[str, Any]) -> dict[str, Any]:
        def _sync_call() -> dict[str, Any]:
            req = request.Request(
                self.endpoint,
                data=json.dumps(payload).encode("utf-8"),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                method="POST",
            )
            with request.urlopen(req, timeout=self.timeout) as response:
                raw = response.read().decode("utf-8")
            return json.loads(raw)

        try:
            return await asyncio.to_thread(_sync_call)
        except error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="ignore")
            raise UpstreamCallError(f"OpenAI API HTTPError: {exc.code} {body}") from exc
        except Exception as exc:
            raise UpstreamCallError(f"OpenAI API error: {exc}") from exc


def _extract_message_text(response_data: Any) -> str:
    try:
        message = response_data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as exc:
        raise UpstreamCallError(f"Unexpected completion response: {str(response_data)[:300]}") from exc

    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content
    refusal = message.get("refusal") if isinstance(message, dict) else None
    if isinstance(refusal, str) and refusal.strip():
        raise UpstreamCallError(f"Completion refused: {refusal.strip()}")
    raise UpstreamCallError("Completion response has no message content")


@lru_cache(maxsize=1)
def get_completion_gateway() -> CompletionGateway:
    settings = get_settings()
    return OpenAiGateway(
        settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.openai_timeout,
        use_response_schema=settings.use_response_schema,
    )
