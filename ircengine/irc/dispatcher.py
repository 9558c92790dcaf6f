"""Callback registry and synchronous event dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..constants import IRC_COMMAND_PREFIX, IRC_WILDCARD_COMMAND
from ..logs.logger import logger
from .models import Continuation, Message

Callback = Callable[..., Any]


@dataclass(eq=False, slots=True)
class _Registration:
    # Identity, not equality: the same function may be registered twice.
    callback: Callback


def _keeps(result: object) -> bool:
    """Interpret a callback's return value.

    ``Continuation.REMOVE`` and ``False`` unregister the callback. Everything
    else, including ``None`` from handlers without a return statement, keeps
    it registered.
    """
    if isinstance(result, Continuation):
        return result is Continuation.KEEP
    return result is not False


class EventDispatcher:
    """Ordered callback lists for protocol commands and semantic events.

    Names starting with ``irc_`` address protocol commands (``irc_privmsg``,
    ``irc_001``; ``irc_*`` matches every command). Any other name is a
    semantic event such as ``disconnect`` or ``join``. Lookups are
    case-insensitive.

    Every emit runs the callbacks registered when it started, once each, in
    registration order, passing the owner as first argument. Callbacks that
    asked to be removed are dropped after the pass; callbacks registered
    during the pass first run on the next emit.
    """

    def __init__(self, owner: object = None) -> None:
        self.owner = owner
        self._commands: dict[str, list[_Registration]] = {}
        self._events: dict[str, list[_Registration]] = {}

    def bind(self, owner: object) -> None:
        self.owner = owner

    def register(self, name: str, callback: Callback) -> None:
        table, key = self._resolve(name)
        table.setdefault(key, []).append(_Registration(callback))

    def emit(self, name: str, *args: object) -> None:
        self._run(self._events, name.lower(), args)

    def emit_command(self, message: Message) -> None:
        """Run the command-specific list, then the wildcard list."""
        self._run(self._commands, message.command.lower(), (message,))
        self._run(self._commands, IRC_WILDCARD_COMMAND, (message,))

    def callbacks(self, name: str) -> list[Callback]:
        table, key = self._resolve(name)
        return [r.callback for r in table.get(key, [])]

    def unregister_all(self, name: str) -> None:
        table, key = self._resolve(name)
        table.pop(key, None)

    def clear(self) -> None:
        self._commands.clear()
        self._events.clear()

    def _resolve(self, name: str) -> tuple[dict[str, list[_Registration]], str]:
        lowered = name.lower()
        if lowered.startswith(IRC_COMMAND_PREFIX) and len(lowered) > len(
            IRC_COMMAND_PREFIX
        ):
            return self._commands, lowered[len(IRC_COMMAND_PREFIX) :]
        return self._events, lowered

    def _run(
        self,
        table: dict[str, list[_Registration]],
        key: str,
        args: tuple[object, ...],
    ) -> None:
        snapshot = list(table.get(key, ()))
        if not snapshot:
            return
        dropped: list[_Registration] = []
        for registration in snapshot:
            if not self._invoke(registration, key, args):
                dropped.append(registration)
        if dropped:
            # Rebuild from the live list so registrations made mid-pass survive.
            table[key] = [
                r for r in table.get(key, []) if all(r is not d for d in dropped)
            ]

    def _invoke(
        self, registration: _Registration, key: str, args: tuple[object, ...]
    ) -> bool:
        try:
            result = registration.callback(self.owner, *args)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "dispatch",
                "callback_error",
                level=logging.ERROR,
                event=key,
                callback=getattr(
                    registration.callback, "__qualname__", repr(registration.callback)
                ),
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return True
        return _keeps(result)
