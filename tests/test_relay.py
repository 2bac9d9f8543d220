"""Tests for the session-scoped validation relay."""

import pytest
from pydantic import BaseModel, Field

from schema_debugger.errors import RelayError
from schema_debugger.relay import (
    VALIDATION_DATA,
    DebugSession,
    PanelRegistry,
    RelayRecord,
)


class _FakePort:
    """Panel port that records posted messages."""

    def __init__(self) -> None:
        self.messages: list[dict] = []

    def post_message(self, message: dict) -> None:
        self.messages.append(message)


class Login(BaseModel):
    username: str = Field(min_length=3)


def test_forward_without_panel_is_dropped() -> None:
    """Forwarding to a session without a panel returns False."""
    registry = PanelRegistry()

    assert registry.forward("tab-1", RelayRecord(id="form")) is False


def test_connect_forward_disconnect() -> None:
    """Records reach the connected panel until it disconnects."""
    registry = PanelRegistry()
    port = _FakePort()
    registry.connect("tab-1", port)

    assert registry.is_connected("tab-1")
    assert registry.forward("tab-1", RelayRecord(id="form", values={"a": 1}))

    registry.disconnect("tab-1")

    assert not registry.is_connected("tab-1")
    assert registry.forward("tab-1", RelayRecord(id="form")) is False
    assert len(port.messages) == 1
    message = port.messages[0]
    assert message["type"] == VALIDATION_DATA
    assert message["data"]["id"] == "form"
    assert message["data"]["values"] == {"a": 1}
    assert "schema" in message["data"]


def test_connect_rejects_port_without_post_message() -> None:
    with pytest.raises(RelayError):
        PanelRegistry().connect("tab-1", object())


def test_sessions_are_isolated() -> None:
    """A record from one session is not delivered to another session's panel."""
    registry = PanelRegistry()
    port_a, port_b = _FakePort(), _FakePort()
    registry.connect("a", port_a)
    registry.connect("b", port_b)

    DebugSession("a", registry).register_validation("form", None, {}, None)

    assert len(port_a.messages) == 1
    assert port_b.messages == []


def test_register_validation_appends_history_and_notifies() -> None:
    """Registered validations are kept in order and sent to subscribers."""
    session = DebugSession("tab-1", PanelRegistry())
    received: list[RelayRecord] = []
    session.subscribe(received.append)

    first = session.register_validation("login", "schema", {"u": "a"}, {"ok": False})
    second = session.register_validation("login", "schema", {"u": "abc"}, {"ok": True})

    assert session.get_validations() == [first, second]
    assert received == [first, second]
    assert first.timestamp <= second.timestamp


def test_subscribe_replays_existing_history() -> None:
    session = DebugSession("tab-1", PanelRegistry())
    record = session.register_validation("login", None, {}, None)
    received: list[RelayRecord] = []

    session.subscribe(received.append)

    assert received == [record]


def test_failing_subscriber_does_not_block_others() -> None:
    """A subscriber raising an exception is logged and skipped."""
    registry = PanelRegistry()
    port = _FakePort()
    registry.connect("tab-1", port)
    session = DebugSession("tab-1", registry)
    received: list[RelayRecord] = []

    def broken(_record: RelayRecord) -> None:
        raise ValueError("subscriber bug")

    session.subscribe(broken)
    session.subscribe(received.append)
    session.register_validation("login", None, {}, None)

    assert len(received) == 1
    assert len(port.messages) == 1


def test_unsubscribe_stops_delivery() -> None:
    session = DebugSession("tab-1", PanelRegistry())
    received: list[RelayRecord] = []
    session.subscribe(received.append)
    session.unsubscribe(received.append)

    session.register_validation("login", None, {}, None)

    assert received == []


def test_debug_and_register_forwards_result() -> None:
    """Debugging through a session registers the result for the panel."""
    registry = PanelRegistry()
    port = _FakePort()
    registry.connect("tab-1", port)
    session = DebugSession("tab-1", registry)

    result = session.debug_and_register("login", Login, {"username": "ab"})

    assert result.is_valid is False
    record = session.get_validations()[0]
    assert record.result is result
    assert port.messages[0]["data"]["result"]["is_valid"] is False
