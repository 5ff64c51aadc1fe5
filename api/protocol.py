"""Protocol data classes for WebSocket communication."""

import math
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional, Literal
from enum import Enum

PROTOCOL_VERSION = "b1.0.0"


def _check_type(message: str, name: str, value: Any, expected: type, optional: bool = False) -> None:
    """Raise ValueError unless a field holds the expected JSON type.

    Args:
        message: Message type, for the error text
        name: Field name
        value: Field value as decoded from JSON
        expected: One of str, int or bool
        optional: Whether None is allowed
    """
    if value is None and optional:
        return
    # JSON true/false decode to bool, which is also an int
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ValueError(f"{message}.{name} must be {expected.__name__}, got {type(value).__name__}")


def _check_number(message: str, name: str, value: Any, optional: bool = False) -> None:
    """Raise ValueError unless a field holds a finite JSON number."""
    if value is None and optional:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{message}.{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{message}.{name} must be finite, got {value}")


class MessageType(str, Enum):
    """WebSocket message types."""
    HELLO = "hello"
    START = "start"
    COMMAND = "command"
    TICK = "tick"
    SUBSCRIBE = "subscribe"
    SUBSCRIBE_ACK = "subscribe_ack"
    OBS = "obs"
    ERROR = "error"


@dataclass
class HelloRequest:
    """Client hello message."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION

    def __post_init__(self):
        _check_type("hello", "version", self.version, str)


@dataclass
class HelloResponse:
    """Server hello response."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION
    server: str = "blockfall-core-py"


@dataclass
class StartRequest:
    """Request to start or restart the game."""
    seed: Optional[int] = None
    type: Literal["start"] = "start"

    def __post_init__(self):
        _check_type("start", "seed", self.seed, int, optional=True)


@dataclass
class CommandRequest:
    """Request to apply one player command."""
    command: str  # MOVE_LEFT, MOVE_RIGHT, ROTATE_CW, ROTATE_CCW, SOFT_DROP_ON, ...
    type: Literal["command"] = "command"

    def __post_init__(self):
        _check_type("command", "command", self.command, str)


@dataclass
class TickRequest:
    """Request to advance gravity by elapsed driver time."""
    elapsed_ms: float
    type: Literal["tick"] = "tick"

    def __post_init__(self):
        _check_number("tick", "elapsed_ms", self.elapsed_ms)


@dataclass
class SubscribeRequest:
    """Request to have the server tick the game and stream observations."""
    stream: bool = True
    frame_ms: Optional[float] = None  # Server default when None
    type: Literal["subscribe"] = "subscribe"

    def __post_init__(self):
        _check_type("subscribe", "stream", self.stream, bool)
        _check_number("subscribe", "frame_ms", self.frame_ms, optional=True)


@dataclass
class SubscribeAck:
    """Acknowledgment of a subscribe request."""
    streaming: bool
    frame_ms: float
    type: Literal["subscribe_ack"] = "subscribe_ack"


@dataclass
class ObservationResponse:
    """Game state observation response."""
    data: Dict[str, Any]  # Snapshot dict from GameSnapshot.to_dict()
    accepted: bool
    events: List[str] = field(default_factory=list)
    lines_cleared: int = 0
    type: Literal["obs"] = "obs"


@dataclass
class ErrorResponse:
    """Error response."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
    type: Literal["error"] = "error"


class ErrorCode:
    """Standard error codes."""
    INVALID_MESSAGE = "INVALID_MESSAGE"
    INVALID_COMMAND = "INVALID_COMMAND"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    VERSION_MISMATCH = "VERSION_MISMATCH"


_REQUEST_TYPES = {
    MessageType.HELLO: HelloRequest,
    MessageType.START: StartRequest,
    MessageType.COMMAND: CommandRequest,
    MessageType.TICK: TickRequest,
    MessageType.SUBSCRIBE: SubscribeRequest,
}


def parse_message(data: Dict[str, Any]) -> Any:
    """Parse incoming WebSocket message.

    Args:
        data: JSON message dict

    Returns:
        Parsed message object

    Raises:
        ValueError: If message type or fields are invalid
    """
    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object")

    msg_type = data.get("type")
    try:
        request_cls = _REQUEST_TYPES[MessageType(msg_type)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown message type: {msg_type}") from None

    try:
        return request_cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid fields for {msg_type}: {e}") from None


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dict for JSON serialization.

    Args:
        obj: Dataclass instance

    Returns:
        Dictionary representation
    """
    return asdict(obj)
