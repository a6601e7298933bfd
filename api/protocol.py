"""Protocol data classes for WebSocket communication."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Literal
from enum import Enum

PROTOCOL_VERSION = "t1.0.0"


class MessageType(str, Enum):
    """WebSocket message types."""
    HELLO = "hello"
    START = "start"
    COMMAND = "command"
    STOP = "stop"
    STOPPED = "stopped"
    SNAPSHOT = "snapshot"
    ERROR = "error"


@dataclass
class HelloRequest:
    """Client hello message."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION


@dataclass
class HelloResponse:
    """Server hello response."""
    type: Literal["hello"] = "hello"
    version: str = PROTOCOL_VERSION
    server: str = "tetrisiyum-py"


@dataclass
class StartRequest:
    """Request to start or restart the game."""
    seed: Optional[int] = None
    playback_speed: float = 1.0  # Time multiplier for gravity and progression
    type: Literal["start"] = "start"

    def __post_init__(self):
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if (
            isinstance(self.playback_speed, bool)
            or not isinstance(self.playback_speed, (int, float))
            or self.playback_speed <= 0
        ):
            raise ValueError(f"playback_speed must be a positive number, got {self.playback_speed!r}")


@dataclass
class CommandRequest:
    """Request to apply a gameplay command."""
    command: str  # move_left, move_right, soft_drop, rotate, tick
    type: Literal["command"] = "command"


@dataclass
class StopRequest:
    """Request to halt the periodic drivers."""
    type: Literal["stop"] = "stop"


@dataclass
class StoppedResponse:
    """Acknowledgment that the drivers were halted."""
    type: Literal["stopped"] = "stopped"


@dataclass
class SnapshotResponse:
    """Game snapshot pushed after every command, tick and evaluation."""
    data: Dict[str, Any]  # Snapshot dict from Snapshot.to_dict()
    event: str  # Command name, "tick" or "progression"
    type: Literal["snapshot"] = "snapshot"


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
        if msg_type == MessageType.HELLO:
            return HelloRequest(**data)
        elif msg_type == MessageType.START:
            return StartRequest(**data)
        elif msg_type == MessageType.COMMAND:
            return CommandRequest(**data)
        elif msg_type == MessageType.STOP:
            return StopRequest(**data)
    except TypeError as e:
        raise ValueError(f"Invalid fields for {msg_type}: {e}")

    raise ValueError(f"Unknown message type: {msg_type}")


def to_dict(obj: Any) -> Dict[str, Any]:
    """Convert dataclass to dict for JSON serialization.

    Args:
        obj: Dataclass instance

    Returns:
        Dictionary representation
    """
    return asdict(obj)
