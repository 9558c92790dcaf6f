from __future__ import annotations

from typing import Any

from ircengine.irc.dispatcher import EventDispatcher
from ircengine.irc.models import Continuation
from ircengine.irc.parser import parse_message


class Owner:
    pass


def test_callbacks_receive_owner_and_args_in_registration_order():
    owner = Owner()
    disp = EventDispatcher(owner)
    calls: list[tuple[str, Any, tuple]] = []

    disp.register("greet", lambda o, *a: calls.append(("first", o, a)))
    disp.register("greet", lambda o, *a: calls.append(("second", o, a)))
    disp.emit("greet", "hello", 1)

    assert calls == [
        ("first", owner, ("hello", 1)),
        ("second", owner, ("hello", 1)),
    ]


def test_event_names_are_case_insensitive():
    disp = EventDispatcher()
    seen: list[str] = []
    disp.register("Disconnect", lambda _o, reason: seen.append(reason))
    disp.emit("DISCONNECT", "bye")
    assert seen == ["bye"]


def test_callback_returning_remove_runs_once_then_is_dropped():
    disp = EventDispatcher()
    calls: list[int] = []

    def once(_o, n):
        calls.append(n)
        return Continuation.REMOVE

    disp.register("tick", once)
    disp.emit("tick", 1)
    disp.emit("tick", 2)
    disp.emit("tick", 3)

    assert calls == [1]
    assert disp.callbacks("tick") == []


def test_callback_returning_false_is_dropped_after_current_pass():
    disp = EventDispatcher()
    calls: list[tuple[str, int]] = []
    budget = {"left": 2}

    def limited(_o, n):
        calls.append(("limited", n))
        budget["left"] -= 1
        return budget["left"] > 0

    def steady(_o, n):
        calls.append(("steady", n))

    disp.register("tick", limited)
    disp.register("tick", steady)
    for n in range(1, 4):
        disp.emit("tick", n)

    # The failing invocation still runs in full, and later callbacks still run.
    assert calls == [
        ("limited", 1),
        ("steady", 1),
        ("limited", 2),
        ("steady", 2),
        ("steady", 3),
    ]


def test_none_and_keep_stay_registered():
    disp = EventDispatcher()
    count = {"none": 0, "keep": 0}

    def returns_none(_o):
        count["none"] += 1

    def returns_keep(_o):
        count["keep"] += 1
        return Continuation.KEEP

    disp.register("e", returns_none)
    disp.register("e", returns_keep)
    disp.emit("e")
    disp.emit("e")
    assert count == {"none": 2, "keep": 2}


def test_callback_registered_during_emit_runs_on_next_emit_only():
    disp = EventDispatcher()
    calls: list[str] = []

    def late(_o):
        calls.append("late")

    def registrar(o):
        calls.append("registrar")
        disp.register("e", late)
        return Continuation.REMOVE

    disp.register("e", registrar)
    disp.emit("e")
    assert calls == ["registrar"]

    disp.emit("e")
    assert calls == ["registrar", "late"]
    assert disp.callbacks("e") == [late]


def test_same_function_registered_twice_is_tracked_per_registration():
    disp = EventDispatcher()
    calls: list[int] = []
    results = iter([Continuation.REMOVE, Continuation.KEEP, Continuation.KEEP])

    def cb(_o):
        calls.append(1)
        return next(results)

    disp.register("e", cb)
    disp.register("e", cb)
    disp.emit("e")
    assert len(disp.callbacks("e")) == 1
    disp.emit("e")
    assert len(calls) == 3


def test_command_callbacks_and_wildcard():
    disp = EventDispatcher()
    order: list[str] = []
    disp.register("irc_PRIVMSG", lambda _o, m: order.append(f"privmsg:{m.trailing}"))
    disp.register("irc_*", lambda _o, m: order.append(f"any:{m.command}"))
    disp.register("privmsg", lambda _o, m: order.append("semantic"))

    disp.emit_command(parse_message(":a!b@c PRIVMSG #x :hi"))
    disp.emit_command(parse_message("PING :srv"))

    assert order == ["privmsg:hi", "any:PRIVMSG", "any:PING"]


def test_numeric_command_registration():
    disp = EventDispatcher()
    seen: list[str] = []
    disp.register("irc_001", lambda _o, m: seen.append(m.params[0]))
    disp.emit_command(parse_message(":srv 001 tester :Welcome"))
    assert seen == ["tester"]


def test_callback_exception_is_logged_and_dispatch_continues(monkeypatch):
    disp = EventDispatcher()
    seen: list[str] = []
    logged: list[str] = []

    from ircengine.logs.logger import logger as engine_logger

    def capture(domain: str, action: str, *args: Any, **kwargs: Any) -> None:
        logged.append(f"{domain}_{action}")

    monkeypatch.setattr(engine_logger, "log_event", capture)

    def boom(_o):
        raise RuntimeError("boom")

    disp.register("e", boom)
    disp.register("e", lambda _o: seen.append("after"))
    disp.emit("e")
    disp.emit("e")

    assert seen == ["after", "after"]
    assert logged == ["dispatch_callback_error", "dispatch_callback_error"]


def test_unregister_all_and_clear():
    disp = EventDispatcher()
    disp.register("a", lambda _o: None)
    disp.register("irc_join", lambda _o, _m: None)
    disp.unregister_all("a")
    assert disp.callbacks("a") == []
    assert len(disp.callbacks("irc_join")) == 1
    disp.clear()
    assert disp.callbacks("irc_join") == []


def test_emit_without_callbacks_is_noop():
    EventDispatcher().emit("nothing", 1, 2)
