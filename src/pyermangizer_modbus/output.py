"""Host-side projections of a DecodedFrame: detailed and simplified dicts, failure payloads."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .errors import FrameDecodeError
from .types import DecodedFrame, InputType


class OutputFormat(str, Enum):
    DETAILED = "detailed"
    SIMPLIFIED = "simplified"


def _timestamp(timestamp: datetime | None) -> str:
    return (timestamp or datetime.now(timezone.utc)).isoformat()


def detailed(frame: DecodedFrame, timestamp: datetime | None = None) -> dict[str, Any]:
    """Full decode result plus an ISO-8601 capture timestamp."""
    out = frame.to_dict()
    out["timestamp"] = _timestamp(timestamp)
    return out


def simplified(frame: DecodedFrame, timestamp: datetime | None = None) -> dict[str, Any]:
    """
    Flat view keyed by register name.

    Registers with a single `value` (scaled numbers, carrier frequency, measurement
    range, unknown registers) are reduced to it; the others (status flags, error
    and command codes) keep their whole decoded object.
    """
    out: dict[str, Any] = {
        "slave": frame.slave_address,
        "function": frame.function_name,
        "timestamp": _timestamp(timestamp),
    }
    for name, reading in frame.registers.items():
        reg = reading.to_dict()
        out[name] = reg["value"] if "value" in reg else reg
    if frame.error is not None:
        out["error"] = frame.error.to_dict()
    return out


def render(
    frame: DecodedFrame,
    fmt: OutputFormat | str = OutputFormat.DETAILED,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    if OutputFormat(fmt) is OutputFormat.SIMPLIFIED:
        return simplified(frame, timestamp)
    return detailed(frame, timestamp)


def failure_payload(
    error: FrameDecodeError,
    original: Any,
    input_type: InputType | str = InputType.AUTO,
) -> dict[str, Any]:
    """Error report that keeps the undecoded input next to the failure description."""
    if isinstance(original, (bytes, bytearray, memoryview)):
        original = bytes(original).hex().upper()
    elif isinstance(original, tuple):
        original = list(original)
    return {
        "error": str(error),
        "kind": error.kind,
        "input_type": InputType(input_type).value,
        "original_data": original,
    }
