import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_PORT = 10000


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    openai_model: str
    openai_base_url: str
    openai_timeout: float
    use_response_schema: bool
    cors_origins: tuple[str, ...]
    port: int
    log_level: str


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _bool_env(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = tuple(
        item.strip() for item in (os.getenv("CORS_ORIGINS") or "*").split(",") if item.strip()
    )
    return Settings(
        openai_api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        openai_model=(os.getenv("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL,
        openai_base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or "https://api.openai.com/v1",
        openai_timeout=_float_env("OPENAI_TIMEOUT", 60.0),
        use_response_schema=_bool_env("USE_RESPONSE_SCHEMA", True),
        cors_origins=origins or ("*",),
        port=_int_env("PORT", DEFAULT_PORT),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
    )
