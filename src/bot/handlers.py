"""aiogram message handlers.

Contract: every incoming message produces exactly one reply, either a JSON document, a short
confirmation, or a line starting with `error: `. Rejected requests (bad filters, unknown values,
duplicates) are logged at INFO without a stack trace; unexpected errors are logged with one and the
user only sees a generic error.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Awaitable, Callable
from time import monotonic

from aiogram.filters import CommandObject
from aiogram.types import Message
from pydantic import BaseModel

from src.app import App
from src.bot.replies import USAGE_TEXT, render_error, render_model
from src.filters.schema import FilterConflictError
from src.filters.structured import FilterFieldError
from src.strings.service import (
    StringServiceError,
    create_string,
    delete_string,
    filter_by_natural_language,
    get_string,
    list_strings,
)

logger = logging.getLogger(__name__)

DELETED_REPLY = "deleted"


class CommandUsageError(ValueError):
    """Raised when a command is missing its argument or the argument is malformed."""


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


def _require_value(command: CommandObject) -> str:
    if not command.args:
        raise CommandUsageError(f"/{command.command} requires a value")
    return command.args


def parse_list_args(args: str | None) -> dict[str, str]:
    """Parse `key=value` pairs (shell-style quoting allowed) into a parameter mapping."""

    if not args:
        return {}

    try:
        tokens = shlex.split(args)
    except ValueError as exc:
        raise CommandUsageError(f"cannot parse arguments: {exc}") from exc

    params: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key:
            raise CommandUsageError(f"expected key=value, got {token!r}")
        params[key] = value
    return params


async def _respond(
        message: Message,
        name: str,
        action: Callable[[], Awaitable[BaseModel | None]],
) -> None:
    started = monotonic()

    # noinspection PyBroadException
    try:
        result = await action()
        reply = DELETED_REPLY if result is None else render_model(result)
        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "handled command=%s count=%s latency_ms=%d",
            name,
            getattr(result, "count", None),
            latency_ms,
        )
    except (
            CommandUsageError,
            FilterFieldError,
            FilterConflictError,
            StringServiceError,
    ) as exc:
        reply = render_error(str(exc))
        latency_ms = int((monotonic() - started) * 1000)
        logger.info(
            "rejected command=%s kind=%s reason=%s latency_ms=%d",
            name,
            type(exc).__name__,
            exc,
            latency_ms,
        )
    except Exception:
        # Handler boundary: internal errors must not leak details to the user.
        logger.exception("handler failed command=%s", name)
        reply = render_error("internal error")

    await message.answer(reply)


async def handle_help(message: Message) -> None:
    """Reply with usage text (`/start`, `/help`)."""

    await message.answer(USAGE_TEXT)


async def handle_analyze(message: Message, command: CommandObject, app: App) -> None:
    """`/analyze <text>`: analyze and store a string."""

    async def action() -> BaseModel:
        return await create_string(app.pool, _require_value(command))

    await _respond(message, "analyze", action)


async def handle_get(message: Message, command: CommandObject, app: App) -> None:
    """`/get <text>`: show the stored record for a string."""

    async def action() -> BaseModel:
        return await get_string(app.pool, _require_value(command))

    await _respond(message, "get", action)


async def handle_delete(message: Message, command: CommandObject, app: App) -> None:
    """`/delete <text>`: delete the stored record for a string."""

    async def action() -> None:
        await delete_string(app.pool, _require_value(command))

    await _respond(message, "delete", action)


async def handle_list(message: Message, command: CommandObject, app: App) -> None:
    """`/list [key=value ...]`: list strings matching structured filters."""

    async def action() -> BaseModel:
        return await list_strings(app.pool, parse_list_args(command.args))

    await _respond(message, "list", action)


async def handle_text(message: Message, app: App) -> None:
    """Any other message: natural-language filter (unknown commands get usage text)."""

    raw_text = message.text or message.caption or ""
    if _is_command_text(raw_text):
        await message.answer(USAGE_TEXT)
        return

    async def action() -> BaseModel:
        return await filter_by_natural_language(app.pool, raw_text)

    await _respond(message, "natural_language", action)
