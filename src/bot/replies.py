"""Reply rendering for the Telegram transport."""

from __future__ import annotations

import json

from pydantic import BaseModel

TELEGRAM_MESSAGE_LIMIT = 4096
_TRUNCATED_SUFFIX = "\n...(truncated)"

USAGE_TEXT = (
    "Commands:\n"
    "/analyze <text> - analyze and store a string\n"
    "/get <text> - show a stored string\n"
    "/delete <text> - delete a stored string\n"
    "/list [key=value ...] - list strings; keys: is_palindrome, min_length, max_length, "
    "word_count, contains_character\n"
    "Any other message is treated as a natural-language filter, "
    'e.g. "single word palindromic strings longer than 3".'
)


def truncate(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    """Cut `text` to fit a single Telegram message."""

    if len(text) <= limit:
        return text
    return text[: limit - len(_TRUNCATED_SUFFIX)] + _TRUNCATED_SUFFIX


def render_model(model: BaseModel) -> str:
    """Render a result model as a pretty-printed JSON document."""

    payload = model.model_dump(mode="json")
    return truncate(json.dumps(payload, ensure_ascii=False, indent=2))


def render_error(message: str) -> str:
    return truncate(f"error: {message}")
