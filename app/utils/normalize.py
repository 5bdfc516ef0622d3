import re
from typing import Any, Literal, cast, get_args

ProficiencyLevel = Literal["A1", "A2", "B1", "B2", "C1"]

DEFAULT_LEVEL: ProficiencyLevel = "B2"
KNOWN_LEVELS: tuple[str, ...] = get_args(ProficiencyLevel)

_MULTI_SPACE = re.compile(r"\s+")
_LOCALE_CODE = re.compile(r"^[a-z]{2,3}(-[A-Za-z0-9]{2,8})*$")


def normalize_level(value: Any) -> ProficiencyLevel:
    tag = str(value if value is not None else "").strip().upper()
    if tag in KNOWN_LEVELS:
        return cast(ProficiencyLevel, tag)
    return DEFAULT_LEVEL


def collapse_whitespace(text: str) -> str:
    return _MULTI_SPACE.sub(" ", text or "").strip()


def unique_strings(values: Any, *, limit: int | None = None) -> list[str]:
    """Trim, drop blanks and keep the first spelling of case-insensitive duplicates."""
    if not isinstance(values, (list, tuple)):
        return []
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        out.append(text)
        if limit is not None and len(out) >= limit:
            break
    return out


def normalize_locale_code(value: Any) -> str | None:
    raw = str(value or "").strip().replace("_", "-")
    if not raw:
        return None
    parts = [part for part in raw.split("-") if part]
    if not parts:
        return None
    subtags = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 2 and part.isalpha():
            subtags.append(part.upper())
        elif len(part) == 4 and part.isalpha():
            subtags.append(part.title())
        else:
            subtags.append(part.lower())
    code = "-".join(subtags)
    return code if _LOCALE_CODE.match(code) else None


def normalize_locale_codes(*sources: Any) -> list[str]:
    codes: set[str] = set()
    for source in sources:
        items = source if isinstance(source, (list, tuple)) else [source]
        for item in items:
            if isinstance(item, (dict, list)):
                continue
            code = normalize_locale_code(item)
            if code:
                codes.add(code)
    return sorted(codes)


def clamp_text(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit]
