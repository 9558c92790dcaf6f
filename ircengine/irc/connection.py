"""Buffered non-blocking IRC connection driven by the asyncio event loop."""

from __future__ import annotations

import asyncio
import errno
import logging
import socket
from typing import TYPE_CHECKING, Any

from ..constants import IRC_ENCODING, IRC_READ_CHUNK_SIZE
from ..errors import ChannelClosedError, ConnectError
from ..logs.logger import logger
from .dispatcher import Callback, EventDispatcher
from .models import Message, ParseFailure
from .parser import decode_line, encode_line, parse_message, serialize_message

if TYPE_CHECKING:  # pragma: no cover
    from ..config.model import EngineConfig

_CONNECT_PENDING = {0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY}


class ConnectionChannel:
    """One TCP connection to an IRC server.

    The channel never blocks: the socket is non-blocking and all reads and
    writes happen in loop reader/writer callbacks. A writer is registered
    only while there are unsent bytes. After ``disconnect`` the object is
    dead for good; reconnecting means creating a new channel.
    """

    def __init__(
        self,
        sock: socket.socket,
        host: str,
        port: int,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        dispatcher: EventDispatcher | None = None,
        encoding: str = IRC_ENCODING,
        read_chunk_size: int = IRC_READ_CHUNK_SIZE,
    ) -> None:
        self.sock = sock
        self.host = host
        self.port = port
        self.loop = loop or asyncio.get_running_loop()
        self.dispatcher = dispatcher or EventDispatcher()
        if self.dispatcher.owner is None:
            self.dispatcher.bind(self)
        self.encoding = encoding
        self.read_chunk_size = read_chunk_size
        self.heap: dict[str, Any] = {}
        self.read_buffer = bytearray()
        self.write_buffer = bytearray()
        self.closed = False
        self._fd = sock.fileno()
        self._reading = False
        self._writing = False
        self.sock.setblocking(False)

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        config: EngineConfig | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> ConnectionChannel:
        """Open a non-blocking TCP connection and start watching for input.

        Raises:
            ConnectError: The address could not be resolved or the connect
                attempt failed immediately.
        """
        loop = loop or asyncio.get_running_loop()
        logger.log_event("connection", "connect_start", host=host, port=port)
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except OSError as e:
            logger.log_event(
                "connection",
                "connect_failed",
                level=logging.ERROR,
                host=host,
                port=port,
                error=str(e),
            )
            raise ConnectError(host, port, e) from e

        last_error: BaseException | str = "no usable address"
        for family, type_, proto, _canon, address in infos:
            try:
                sock = socket.socket(family, type_, proto)
            except OSError as e:
                last_error = e
                continue
            sock.setblocking(False)
            code = sock.connect_ex(address)
            if code in _CONNECT_PENDING:
                channel = cls.from_socket(
                    sock, host, port, loop=loop, config=config, dispatcher=dispatcher
                )
                logger.log_event(
                    "connection", "connect_pending", level=logging.DEBUG, host=host, port=port
                )
                return channel
            sock.close()
            last_error = OSError(code, errno.errorcode.get(code, "connect failed"))

        logger.log_event(
            "connection",
            "connect_failed",
            level=logging.ERROR,
            host=host,
            port=port,
            error=str(last_error),
        )
        raise ConnectError(host, port, last_error)

    @classmethod
    def from_socket(
        cls,
        sock: socket.socket,
        host: str,
        port: int,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        config: EngineConfig | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> ConnectionChannel:
        """Adopt an already created socket and start watching for input."""
        kwargs: dict[str, Any] = {}
        if config is not None:
            kwargs = {
                "encoding": config.encoding,
                "read_chunk_size": config.read_chunk_size,
            }
        channel = cls(sock, host, port, loop=loop, dispatcher=dispatcher, **kwargs)
        channel._start_reading()
        return channel

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    # ------------------------------------------------------------------ events
    def register_callback(self, name: str, callback: Callback) -> None:
        self.dispatcher.register(name, callback)

    def emit(self, name: str, *args: object) -> None:
        self.dispatcher.emit(name, *args)

    # ----------------------------------------------------------------- sending
    def send(self, message: Message) -> None:
        """Queue a parsed ``Message`` for sending."""
        self.send_msg(
            message.prefix, message.command, message.trailing, *message.middle_params
        )

    def send_msg(
        self, prefix: str | None, command: str, trailing: str | None = None, *params: str
    ) -> None:
        """Serialize a message and append it to the write buffer."""
        self.send_raw(serialize_message(prefix, command, trailing, *params))

    def send_raw(self, line: str) -> None:
        self._ensure_open()
        self.write_buffer += encode_line(line, self.encoding)
        logger.log_event(
            "connection",
            "send_queued",
            level=logging.DEBUG,
            line=line.rstrip("\r\n"),
            buffered=len(self.write_buffer),
        )
        if not self._writing:
            self.loop.add_writer(self._fd, self._on_writable)
            self._writing = True

    # --------------------------------------------------------------- receiving
    def feed(self, data: bytes) -> None:
        """Append received bytes and dispatch every complete line in order."""
        self._ensure_open()
        self.read_buffer += data
        while not self.closed:
            end = self.read_buffer.find(b"\n")
            if end < 0:
                break
            raw = bytes(self.read_buffer[:end])
            del self.read_buffer[: end + 1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
            self._dispatch_line(decode_line(raw, self.encoding))

    def _dispatch_line(self, line: str) -> None:
        message = parse_message(line)
        if isinstance(message, ParseFailure):
            logger.log_event(
                "connection",
                "parse_failed",
                level=logging.DEBUG,
                line=line,
                reason=message.reason,
            )
            return
        self.dispatcher.emit("read", message)
        self.dispatcher.emit_command(message)

    def _on_readable(self) -> None:
        if self.closed:
            return
        try:
            data = self.sock.recv(self.read_chunk_size)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as e:
            self.disconnect(f"Error while reading from IRC server '{self.address}': {e}")
            return
        if not data:
            self.disconnect(f"EOF from IRC server '{self.address}'")
            return
        self.feed(data)

    def _on_writable(self) -> None:
        if self.closed:
            return
        try:
            written = self.sock.send(self.write_buffer)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as e:
            self.disconnect(f"Error while writing to IRC server '{self.address}': {e}")
            return
        if written == 0:
            self.disconnect(
                f"Error while writing to IRC server '{self.address}': connection closed"
            )
            return
        del self.write_buffer[:written]
        if not self.write_buffer:
            self._stop_writing()

    # -------------------------------------------------------------- lifecycle
    def disconnect(self, reason: str) -> None:
        """Tear the connection down and emit ``disconnect`` with ``reason``.

        Calling it again on a closed channel does nothing.
        """
        if self.closed:
            return
        self.closed = True
        logger.log_event(
            "connection",
            "disconnected",
            level=logging.WARNING,
            host=self.host,
            port=self.port,
            reason=reason,
        )
        try:
            self.dispatcher.emit("disconnect", reason)
        finally:
            self._stop_reading()
            self._stop_writing()
            self.read_buffer.clear()
            self.write_buffer.clear()
            try:
                self.sock.close()
            except OSError as e:
                logger.log_event(
                    "connection",
                    "close_error",
                    level=logging.DEBUG,
                    error=str(e),
                )

    def _ensure_open(self) -> None:
        if self.closed:
            raise ChannelClosedError(
                f"connection to '{self.address}' is closed",
                data={"host": self.host, "port": self.port},
            )

    def _start_reading(self) -> None:
        if not self._reading:
            self.loop.add_reader(self._fd, self._on_readable)
            self._reading = True

    def _stop_reading(self) -> None:
        if self._reading:
            self.loop.remove_reader(self._fd)
            self._reading = False

    def _stop_writing(self) -> None:
        if self._writing:
            self.loop.remove_writer(self._fd)
            self._writing = False

    @property
    def writing(self) -> bool:
        """True while a write-readiness registration exists."""
        return self._writing
