"""Client-side keepalive layered on top of a ``ClientSession``."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..constants import IRC_PING_INTERVAL, IRC_PING_TIMEOUT
from ..logs.logger import logger
from .models import Continuation, Message

if TYPE_CHECKING:  # pragma: no cover
    from .session import ClientSession


class SessionHeartbeat:
    """Periodic PING plus an inactivity timeout, driven by ``loop.call_later``.

    Any line from the server counts as activity. When nothing arrived for
    ``timeout`` seconds the session is disconnected; reconnecting is left to
    the caller.
    """

    def __init__(
        self,
        session: ClientSession,
        interval: float = IRC_PING_INTERVAL,
        timeout: float = IRC_PING_TIMEOUT,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.session = session
        self.interval = interval
        self.timeout = timeout
        self.loop = loop or session.channel.loop
        self.last_activity = 0.0
        self.pings_sent = 0
        self._handle: asyncio.TimerHandle | None = None
        self.running = False
        self._read_registered = False
        self._disconnect_registered = False

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.last_activity = self.loop.time()
        # Callbacks from an earlier start() stay registered until they drop
        # themselves; only add the ones that are gone.
        if not self._read_registered:
            self._read_registered = True
            self.session.register_callback("read", self._on_read)
        if not self._disconnect_registered:
            self._disconnect_registered = True
            self.session.register_callback("disconnect", self._on_disconnect)
        self._schedule()

    def stop(self) -> None:
        # The read callback drops itself on its next call.
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.loop.call_later(self.interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self.running or self.session.channel.closed:
            self.running = False
            return
        idle = self.loop.time() - self.last_activity
        if idle > self.timeout:
            logger.log_event(
                "heartbeat",
                "timeout",
                level=logging.WARNING,
                nick=self.session.nick,
                idle=round(idle, 1),
            )
            self.running = False
            self.session.disconnect(f"Ping timeout: {idle:.0f} seconds")
            return
        if self.session.registered:
            self.pings_sent += 1
            self.session.channel.send_msg(
                None, "PING", f"keepalive-{self.pings_sent}"
            )
        self._schedule()

    def _on_read(self, _session: ClientSession, _msg: Message) -> Continuation:
        if not self.running:
            self._read_registered = False
            return Continuation.REMOVE
        self.last_activity = self.loop.time()
        return Continuation.KEEP

    def _on_disconnect(self, _session: ClientSession, _reason: str) -> Continuation:
        self.stop()
        self._disconnect_registered = False
        return Continuation.REMOVE
