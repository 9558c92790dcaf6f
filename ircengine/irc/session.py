"""High level IRC client session on top of a ``ConnectionChannel``."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..constants import IRC_RANK_MARKERS
from ..errors import ChannelClosedError
from ..logs.logger import logger
from .connection import ConnectionChannel
from .dispatcher import Callback, EventDispatcher
from .models import Message, SessionState
from .numerics import ERR_NICKNAMEINUSE, RPL_ENDOFNAMES, RPL_NAMREPLY, RPL_WELCOME
from .parser import is_channel_name

if TYPE_CHECKING:  # pragma: no cover
    from ..config.model import EngineConfig

_QueuedMessage = tuple[str, str | None, tuple[str, ...]]

# Commands that get their own semantic events instead of ``statmsg``.
_NON_STAT_COMMANDS = frozenset({"privmsg", "notice", "part", "join"})


class ClientSession:  # pylint: disable=too-many-instance-attributes
    """Registration handshake, send queues and channel membership.

    The session owns the channel's dispatcher: every callback registered
    through the session or the channel receives the session as first
    argument. Semantic events emitted here:

    ``registered``, ``join(nick, channel, is_self)``,
    ``part(nick, channel, is_self, message)``, ``quit(nick, message)``,
    ``channel_add(channel, nicks)``, ``channel_remove(channel, nicks)``,
    ``nick_change(old, new, is_self)``, ``nick_collision(nick)``,
    ``publicmsg(target, message)``, ``privatemsg(target, message)``,
    ``statmsg(message)`` and the channel's ``disconnect(reason)``.
    """

    def __init__(
        self, channel: ConnectionChannel, *, config: EngineConfig | None = None
    ) -> None:
        self.channel = channel
        self.config = config
        self.dispatcher: EventDispatcher = channel.dispatcher
        self.dispatcher.bind(self)
        self.debug = bool(config.debug) if config is not None else False
        self.nick: str | None = None
        self.user: str | None = None
        self.real: str | None = None
        self.registered = False
        self.state = SessionState.CONNECTING
        self.server_queue: list[_QueuedMessage] = []
        self.channel_queues: dict[str, list[_QueuedMessage]] = {}
        self.channels: dict[str, set[str]] = {}
        self._names_accumulator: dict[str, list[str]] = {}
        self._handlers_installed = False
        self.dispatcher.register("disconnect", ClientSession._on_disconnect)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        config: EngineConfig | None = None,
    ) -> ClientSession:
        channel = ConnectionChannel.connect(host, port, loop=loop, config=config)
        return cls(channel, config=config)

    @classmethod
    def open(
        cls, config: EngineConfig, *, loop: asyncio.AbstractEventLoop | None = None
    ) -> ClientSession:
        """Connect, register and queue JOINs for the configured channels."""
        session = cls.connect(config.host, config.port, loop=loop, config=config)
        session.register(
            config.nick, config.user, config.real, password=config.password
        )
        for name in config.channels:
            session.send_to_server("JOIN", None, name)
        return session

    # ------------------------------------------------------------------ state
    def _set_state(self, new_state: SessionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "session",
                "state_change",
                level=logging.DEBUG,
                nick=self.nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def current_nick(self) -> str | None:
        return self.nick

    def channel_members(self) -> dict[str, set[str]]:
        """Snapshot of channel → member nicks, both lowercase."""
        return {name: set(members) for name, members in self.channels.items()}

    def channel_list(self) -> list[str]:
        return list(self.channels)

    def is_self(self, nick: str | None) -> bool:
        return bool(nick) and self.nick is not None and nick.lower() == self.nick.lower()

    # ------------------------------------------------------------- callbacks
    def register_callback(self, name: str, callback: Callback) -> None:
        self.dispatcher.register(name, callback)

    def emit(self, name: str, *args: object) -> None:
        self.dispatcher.emit(name, *args)

    # -------------------------------------------------------------- commands
    def register(
        self,
        nick: str,
        user: str | None = None,
        real: str | None = None,
        *,
        password: str | None = None,
    ) -> None:
        """Install the protocol handlers and send NICK and USER.

        Registration commands bypass the server queue: the queue only drains
        once the server welcomed us, which needs these commands first.
        """
        self._ensure_open()
        self._install_handlers()
        if password:
            self.channel.send_msg(None, "PASS", None, password)
        self.channel.send_msg(None, "NICK", None, nick)
        self.channel.send_msg(None, "USER", real or nick, user or nick, "*", "0")
        self.nick = nick
        self.user = user
        self.real = real
        self._set_state(SessionState.AWAITING_WELCOME)
        logger.log_event("session", "register_sent", nick=nick)

    def send_to_server(
        self, command: str, trailing: str | None = None, *params: str
    ) -> None:
        """Send now when registered, otherwise queue until the welcome reply."""
        self._ensure_open()
        if self.registered:
            self.channel.send_msg(None, command, trailing, *params)
        else:
            self.server_queue.append((command, trailing, params))

    def send_to_channel(
        self, channel: str, command: str, trailing: str | None = None, *params: str
    ) -> None:
        """Send now when we are on ``channel``, otherwise queue until we join it."""
        self._ensure_open()
        key = channel.lower()
        own = self.nick.lower() if self.nick else None
        if own is not None and own in self.channels.get(key, ()):
            self.channel.send_msg(None, command, trailing, *params)
        else:
            self.channel_queues.setdefault(key, []).append((command, trailing, params))

    def clear_server_queue(self) -> None:
        self.server_queue = []

    def clear_channel_queue(self, channel: str) -> None:
        self.channel_queues[channel.lower()] = []

    def disconnect(self, reason: str) -> None:
        self.channel.disconnect(reason)

    def _ensure_open(self) -> None:
        if self.channel.closed:
            raise ChannelClosedError(
                f"session for '{self.channel.address}' is disconnected",
                data={"nick": self.nick},
            )

    def _flush(self, queue: list[_QueuedMessage]) -> None:
        for command, trailing, params in queue:
            self.channel.send_msg(None, command, trailing, *params)

    def _install_handlers(self) -> None:
        if self._handlers_installed:
            return
        self._handlers_installed = True
        register = self.dispatcher.register
        register(f"irc_{RPL_WELCOME}", ClientSession._on_welcome)
        register("irc_join", ClientSession._on_join)
        register("irc_part", ClientSession._on_part)
        register("irc_kick", ClientSession._on_kick)
        register("irc_quit", ClientSession._on_quit)
        register("irc_nick", ClientSession._on_nick)
        register(f"irc_{RPL_NAMREPLY}", ClientSession._on_names_reply)
        register(f"irc_{RPL_ENDOFNAMES}", ClientSession._on_end_of_names)
        register(f"irc_{ERR_NICKNAMEINUSE}", ClientSession._on_nick_in_use)
        register("irc_ping", ClientSession._on_ping)
        register("irc_privmsg", ClientSession._on_privmsg)
        register("irc_notice", ClientSession._on_privmsg)
        if self.debug:
            register("irc_*", ClientSession._on_debug)
        register("irc_*", ClientSession._on_any_message)

    # --------------------------------------------------------------- handlers
    # Handlers are registered unbound; the dispatcher passes the session first.
    def _on_welcome(self, msg: Message) -> None:
        if msg.params and msg.params[0] != "*":
            # The welcome carries the nick the server actually assigned.
            self.nick = msg.params[0]
        self.registered = True
        self._set_state(SessionState.REGISTERED)
        queued, self.server_queue = self.server_queue, []
        self._flush(queued)
        logger.log_event(
            "session", "registered", nick=self.nick, flushed=len(queued)
        )
        self.emit("registered")

    def _on_join(self, msg: Message) -> None:
        channel_name = msg.param(0)
        nick = msg.nick
        if not channel_name or not nick:
            return
        key = channel_name.lower()
        self.channels.setdefault(key, set()).add(nick.lower())
        is_self = self.is_self(nick)
        if is_self:
            # Queued messages go out before any join callback can send.
            queued = self.channel_queues.pop(key, [])
            self._flush(queued)
            logger.log_event(
                "session", "joined", nick=self.nick, channel=key, flushed=len(queued)
            )
        self.emit("join", nick, key, is_self)
        self.emit("channel_add", key, [nick])

    def _on_part(self, msg: Message) -> None:
        channel_name = msg.param(0)
        nick = msg.nick
        if not channel_name or not nick:
            return
        key = channel_name.lower()
        is_self = self.is_self(nick)
        self._remove_member(key, nick, drop_channel=is_self)
        if is_self:
            self.channel_queues.pop(key, None)
            logger.log_event("session", "parted", nick=self.nick, channel=key)
        self.emit("part", nick, key, is_self, msg.param(1))
        self.emit("channel_remove", key, [nick])

    def _on_kick(self, msg: Message) -> None:
        channel_name = msg.param(0)
        kicked = msg.param(1)
        if not channel_name or not kicked:
            return
        key = channel_name.lower()
        is_self = self.is_self(kicked)
        self._remove_member(key, kicked, drop_channel=is_self)
        if is_self:
            logger.log_event(
                "session",
                "kicked",
                level=logging.WARNING,
                nick=self.nick,
                channel=key,
                by=msg.nick,
                reason=msg.param(2),
            )
        self.emit("channel_remove", key, [kicked])

    def _on_quit(self, msg: Message) -> None:
        nick = msg.nick
        if not nick:
            return
        lowered = nick.lower()
        affected = [key for key, members in self.channels.items() if lowered in members]
        for key in affected:
            self.channels[key].discard(lowered)
        self.emit("quit", nick, msg.param(0))
        for key in affected:
            self.emit("channel_remove", key, [nick])

    def _on_nick(self, msg: Message) -> None:
        old = msg.nick
        new = msg.param(0)
        if not old or not new:
            return
        is_self = self.is_self(old)
        for members in self.channels.values():
            if old.lower() in members:
                members.discard(old.lower())
                members.add(new.lower())
        if is_self:
            self.nick = new
        self.emit("nick_change", old, new, is_self)

    def _on_names_reply(self, msg: Message) -> None:
        # 353 <me> [=*@] <channel> :<names>
        if msg.trailing is None or len(msg.params) < 3:
            return
        key = msg.params[-2].lower()
        names = [
            name.lstrip(IRC_RANK_MARKERS)
            for name in msg.params[-1].split()
            if name.lstrip(IRC_RANK_MARKERS)
        ]
        self._names_accumulator.setdefault(key, []).extend(names)

    def _on_end_of_names(self, msg: Message) -> None:
        # 366 <me> <channel> :End of NAMES list
        channel_name = msg.param(1)
        if not channel_name:
            return
        key = channel_name.lower()
        names = self._names_accumulator.pop(key, [])
        lowered = {name.lower() for name in names}
        # A NAMES reply for a channel we are not on does not make us a member.
        if key in self.channels or (self.nick and self.nick.lower() in lowered):
            self.channels.setdefault(key, set()).update(lowered)
        self.emit("channel_add", key, names)

    def _on_nick_in_use(self, msg: Message) -> None:
        logger.log_event(
            "session",
            "nick_in_use",
            level=logging.WARNING,
            nick=self.nick,
            wanted=msg.param(1),
        )
        self.emit("nick_collision", msg.param(1))

    def _on_ping(self, msg: Message) -> None:
        # Answer right away; a PING may arrive before the welcome reply.
        self.channel.send_msg(None, "PONG", msg.param(0))

    def _on_privmsg(self, msg: Message) -> None:
        target = msg.param(0)
        if target is None:
            return
        if is_channel_name(target):
            self.emit("publicmsg", target, msg)
        else:
            self.emit("privatemsg", target, msg)

    def _on_any_message(self, msg: Message) -> None:
        if msg.command.lower() not in _NON_STAT_COMMANDS:
            self.emit("statmsg", msg)

    def _on_debug(self, msg: Message) -> None:
        logger.log_event(
            "session",
            "debug_message",
            level=logging.DEBUG,
            nick=self.nick,
            address=self.channel.address,
            prefix=msg.prefix,
            command=msg.command,
            params=",".join(msg.params),
        )

    def _on_disconnect(self, reason: str) -> None:
        self.registered = False
        self.channels.clear()
        self.channel_queues.clear()
        self.server_queue = []
        self._names_accumulator.clear()
        self._set_state(SessionState.DISCONNECTED)

    def _remove_member(self, key: str, nick: str, *, drop_channel: bool) -> None:
        if drop_channel:
            self.channels.pop(key, None)
            return
        members = self.channels.get(key)
        if members is not None:
            members.discard(nick.lower())
