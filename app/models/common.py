from typing import Annotated, Any

from pydantic import BeforeValidator

from app.utils.normalize import ProficiencyLevel, normalize_level, unique_strings

Level = Annotated[ProficiencyLevel, BeforeValidator(normalize_level)]


def clean_word_list(value: Any) -> list[str]:
    return unique_strings(value)


def clean_optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None
