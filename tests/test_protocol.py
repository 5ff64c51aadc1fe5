"""Tests for WebSocket message parsing."""

import pytest

from api.protocol import (
    PROTOCOL_VERSION,
    CommandRequest,
    ErrorCode,
    ErrorResponse,
    HelloRequest,
    HelloResponse,
    StartRequest,
    SubscribeRequest,
    TickRequest,
    parse_message,
    to_dict,
)


def test_parse_requests():
    """Each client message type parses into its dataclass."""
    assert parse_message({"type": "hello", "version": PROTOCOL_VERSION}) == HelloRequest()
    assert parse_message({"type": "start", "seed": 42}) == StartRequest(seed=42)
    assert parse_message({"type": "start"}) == StartRequest(seed=None)
    assert parse_message({"type": "command", "command": "HOLD"}) == CommandRequest(command="HOLD")
    assert parse_message({"type": "tick", "elapsed_ms": 16.5}) == TickRequest(elapsed_ms=16.5)
    assert parse_message({"type": "subscribe", "stream": False}) == SubscribeRequest(stream=False)


@pytest.mark.parametrize(
    "message",
    [
        {"type": "reset"},
        {"type": "obs", "data": {}, "accepted": True},
        {"command": "HOLD"},
        {"type": "command"},
        {"type": "tick", "elapsed_ms": 16, "speed": 2},
        {"type": "tick", "elapsed_ms": "abc"},
        {"type": "tick", "elapsed_ms": None},
        {"type": "tick", "elapsed_ms": True},
        {"type": "tick", "elapsed_ms": float("nan")},
        {"type": "subscribe", "frame_ms": "fast"},
        {"type": "subscribe", "stream": "yes"},
        {"type": "start", "seed": "42"},
        {"type": "start", "seed": 4.2},
        {"type": "command", "command": 3},
        {"type": "hello", "version": 1},
        ["hello"],
    ],
)
def test_invalid_messages(message):
    """Unknown types, server-only types, bad fields and mistyped values are rejected."""
    with pytest.raises(ValueError):
        parse_message(message)


def test_to_dict():
    """Responses serialize with their type tag."""
    assert to_dict(HelloResponse()) == {
        "type": "hello",
        "version": PROTOCOL_VERSION,
        "server": "blockfall-core-py",
    }
    error = to_dict(ErrorResponse(code=ErrorCode.INVALID_COMMAND, message="Invalid command: JUMP"))
    assert error["type"] == "error"
    assert error["code"] == "INVALID_COMMAND"
    assert error["details"] is None
