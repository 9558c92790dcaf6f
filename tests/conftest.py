import pytest

from ircengine.irc.session import ClientSession
from tests.fixtures.irc_fixtures import make_channel, make_mock_loop, make_mock_socket


@pytest.fixture
def mock_socket():
    """Create a mock socket for testing"""
    return make_mock_socket()


@pytest.fixture
def mock_loop():
    """Create a mock event loop recording reader/writer registrations"""
    return make_mock_loop()


@pytest.fixture
def channel(mock_socket, mock_loop):
    return make_channel(mock_socket, mock_loop)


@pytest.fixture
def session(channel):
    return ClientSession(channel)


@pytest.fixture
def events(session):
    """Record every semantic event the session emits, as (name, args) tuples."""
    recorded: list[tuple[str, tuple]] = []
    names = [
        "registered",
        "join",
        "part",
        "quit",
        "channel_add",
        "channel_remove",
        "nick_change",
        "nick_collision",
        "publicmsg",
        "privatemsg",
        "statmsg",
        "disconnect",
    ]
    for name in names:
        session.register_callback(
            name, lambda _s, *args, _name=name: recorded.append((_name, args))
        )
    return recorded
