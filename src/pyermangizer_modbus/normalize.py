"""Normalize raw frame payloads (buffer, hex string, byte array) to canonical bytes."""

import re
from typing import Any

from .errors import InputFormatError
from .types import InputType

# Text the host treats as a hex dump: hex digits with optional whitespace anywhere
_HEX_TEXT_PATTERN = re.compile(r"^[0-9a-fA-F\s]+$")

_WHITESPACE = re.compile(r"\s+")


def detect_input_type(payload: Any) -> InputType:
    """
    Guess the encoding of a payload the way the host integration does.

    Bytes-likes are buffers, hex-looking text is a hex string, lists and tuples
    are byte arrays. Anything else is UNKNOWN (decoding it will fail).
    """
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return InputType.BUFFER
    if isinstance(payload, str) and _HEX_TEXT_PATTERN.match(payload):
        return InputType.HEXSTRING
    if isinstance(payload, (list, tuple)):
        return InputType.ARRAY
    return InputType.UNKNOWN


def _from_hex(text: str) -> bytes:
    digits = _WHITESPACE.sub("", text)
    if len(digits) % 2 != 0:
        raise InputFormatError(
            f"Invalid hex string: odd length ({len(digits)} digits)",
            input_type="str",
        )
    try:
        return bytes.fromhex(digits)
    except ValueError:
        raise InputFormatError(f"Invalid hex string: {text!r}", input_type="str") from None


def _from_array(values: list[Any] | tuple[Any, ...]) -> bytes:
    out = bytearray()
    for i, v in enumerate(values):
        # bool is an int subclass but never a byte value
        if isinstance(v, bool) or not isinstance(v, int):
            raise InputFormatError(
                f"Invalid byte array: element {i} is {type(v).__name__}, expected int",
                input_type=type(values).__name__,
            )
        if not 0 <= v <= 0xFF:
            raise InputFormatError(
                f"Invalid byte array: element {i} out of range 0-255: {v}",
                input_type=type(values).__name__,
            )
        out.append(v)
    return bytes(out)


def normalize_frame(data: Any, input_type: InputType | str = InputType.AUTO) -> bytes:
    """
    Convert a frame payload to bytes.

    - bytes / bytearray / memoryview: taken verbatim.
    - str: whitespace stripped, then parsed as hex digit pairs (case-insensitive).
    - list / tuple of int: each element is one byte (0-255, others rejected).

    With an explicit input_type the payload must be of that kind.
    Raises InputFormatError for unsupported types, odd-length or non-hex strings,
    and out-of-range array elements.
    """
    expected = InputType(input_type)
    actual = _kind_of(data)
    if actual is InputType.UNKNOWN:
        raise InputFormatError(
            f"Unsupported type {type(data).__name__}: expected bytes, hex string or list of ints",
            input_type=type(data).__name__,
        )
    if expected not in (InputType.AUTO, actual):
        raise InputFormatError(
            f"Input type mismatch: expected {expected.value}, got {type(data).__name__}",
            input_type=type(data).__name__,
        )

    if actual is InputType.BUFFER:
        return bytes(data)
    if actual is InputType.HEXSTRING:
        return _from_hex(data)
    return _from_array(data)


def _kind_of(data: Any) -> InputType:
    # Unlike detect_input_type, any str is routed to hex parsing so bad text gets a precise error
    if isinstance(data, str):
        return InputType.HEXSTRING
    return detect_input_type(data)
