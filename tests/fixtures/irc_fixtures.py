"""Shared helpers and sample protocol lines for IRC tests."""

from __future__ import annotations

import asyncio
import socket
from unittest.mock import Mock

from ircengine.irc.connection import ConnectionChannel

SERVER = "irc.example.net"
PORT = 6667

WELCOME = b":irc.example.net 001 tester :Welcome to the Example IRC Network tester\r\n"
SELF_JOIN = b":tester!~tester@host.example JOIN #test\r\n"
NAMES_REPLY = b":irc.example.net 353 tester = #test :tester @alice +bob carol\r\n"
END_OF_NAMES = b":irc.example.net 366 tester #test :End of /NAMES list.\r\n"


def make_mock_socket(fd: int = 42) -> Mock:
    sock = Mock(spec=socket.socket)
    sock.fileno.return_value = fd
    return sock


def make_mock_loop() -> Mock:
    loop = Mock(spec=asyncio.AbstractEventLoop)
    loop.time.return_value = 0.0
    return loop


def make_channel(sock: Mock | None = None, loop: Mock | None = None) -> ConnectionChannel:
    """Channel whose loop and socket are mocks; nothing leaves the process."""
    return ConnectionChannel.from_socket(
        sock or make_mock_socket(), SERVER, PORT, loop=loop or make_mock_loop()
    )


def sent_lines(channel: ConnectionChannel) -> list[str]:
    """Lines waiting in the write buffer, terminators stripped."""
    data = bytes(channel.write_buffer).decode("utf-8")
    return [line for line in data.split("\r\n") if line]
