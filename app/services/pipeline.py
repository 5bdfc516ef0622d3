from typing import Any

from app.config import Settings
from app.errors import UpstreamCallError, UpstreamFormatError
from app.services.ai_provider import CompletionGateway, build_messages
from app.services.output_validator import validate_output
from app.services.prompts import Prompt
from app.utils.logging import get_logger, safe_snippet
from app.utils.serialize import prompt_fingerprint

log = get_logger("services.pipeline")


async def run_prompt(
    gateway: CompletionGateway,
    settings: Settings,
    prompt: Prompt,
    *,
    expected_count: int | None = None,
) -> Any:
    """Send one prompt upstream and return the validated reply value."""
    log.info(
        "completion kind=%s model=%s provider=%s prompt=%s",
        prompt.kind,
        settings.openai_model,
        gateway.provider_name,
        prompt_fingerprint(build_messages(prompt.system, prompt.user)),
    )
    try:
        raw = await gateway.complete(
            system=prompt.system,
            user=prompt.user,
            model=settings.openai_model,
            temperature=prompt.temperature,
            schema=prompt.schema,
        )
    except UpstreamCallError as exc:
        log.warning("upstream call failed kind=%s: %s", prompt.kind, exc.message)
        raise
    except Exception as exc:
        # Unknown gateway failures surface as a 500 RelayError.
        log.exception("unexpected gateway error kind=%s: %s", prompt.kind, exc)
        raise UpstreamCallError(str(exc)) from exc

    reply = validate_output(prompt.kind, raw, expected_count=expected_count)
    if not reply.ok:
        log.warning("bad upstream output kind=%s: %s raw=%s", prompt.kind, reply.error, safe_snippet(raw))
        raise UpstreamFormatError(reply.error or "Model returned an invalid reply.", raw)
    return reply.value
