from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.errors import ClientInputError, RelayError
from app.routes.ai import router as ai_router
from app.utils.logging import get_logger

log = get_logger("app")


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    if not settings.openai_api_key:
        log.warning("OPENAI_API_KEY is not set; AI endpoints will answer 500 until it is configured.")
    log.info("Relay ready: model=%s response_schema=%s", settings.openai_model, settings.use_response_schema)
    yield


app = FastAPI(title="Language Tutor Relay", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ai_router)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body."
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON."
    if first.get("type") == "missing":
        return f"Missing '{field}'." if field else "Missing request body."
    message = str(first.get("msg") or "Invalid value").removeprefix("Value error, ")
    if first.get("type") == "value_error" or not field:
        return message
    return f"Invalid '{field}': {message}"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    error = ClientInputError(_validation_message(exc))
    return JSONResponse(status_code=error.status_code, content=error.payload())


@app.exception_handler(RelayError)
async def relay_error_handler(_: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


@app.exception_handler(Exception)
async def unexpected_error_handler(_: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


def run() -> None:
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)
