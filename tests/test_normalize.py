"""Tests for payload normalization and input-type detection."""

import pytest

from pyermangizer_modbus import InputType, detect_input_type, normalize_frame
from pyermangizer_modbus.errors import InputFormatError, InvalidInputError

FRAME = bytes([0x3F, 0x83, 0x02, 0xA1, 0x3D])


@pytest.mark.parametrize(
    "payload",
    [
        FRAME,
        bytearray(FRAME),
        memoryview(FRAME),
        "3f8302a13d",
        "3F8302A13D",
        "3f 83 02 a1 3d",
        " 3f83\n02a1\t3d ",
        [0x3F, 0x83, 0x02, 0xA1, 0x3D],
        (0x3F, 0x83, 0x02, 0xA1, 0x3D),
    ],
)
def test_normalize_frame_encodings_agree(payload: object) -> None:
    assert normalize_frame(payload) == FRAME


def test_normalize_frame_odd_length_raises() -> None:
    with pytest.raises(InputFormatError, match="odd length"):
        normalize_frame("3f030")


def test_normalize_frame_odd_length_counts_digits_after_stripping() -> None:
    with pytest.raises(InputFormatError, match="odd length"):
        normalize_frame("3f 03 0")


@pytest.mark.parametrize("text", ["zz", "3f0g", "0x3f03"])
def test_normalize_frame_non_hex_raises(text: str) -> None:
    with pytest.raises(InputFormatError):
        normalize_frame(text)


@pytest.mark.parametrize("payload", [42, 3.5, None, {"payload": "3f"}, object()])
def test_normalize_frame_unsupported_type_raises(payload: object) -> None:
    with pytest.raises(InputFormatError, match="Unsupported type") as exc_info:
        normalize_frame(payload)
    assert exc_info.value.input_type == type(payload).__name__


@pytest.mark.parametrize("values", [[0, 256], [-1, 3], [1, "2"], [1, 2.0], [True, 3]])
def test_normalize_frame_rejects_bad_array_elements(values: list) -> None:
    with pytest.raises(InputFormatError):
        normalize_frame(values)


def test_normalize_frame_explicit_type_mismatch_raises() -> None:
    with pytest.raises(InputFormatError, match="mismatch"):
        normalize_frame(FRAME, InputType.HEXSTRING)
    with pytest.raises(InputFormatError, match="mismatch"):
        normalize_frame("3f8302a13d", "array")


def test_normalize_frame_explicit_type_matches() -> None:
    assert normalize_frame("3f8302a13d", "hexstring") == FRAME
    assert normalize_frame(list(FRAME), InputType.ARRAY) == FRAME
    assert normalize_frame(FRAME, InputType.BUFFER) == FRAME


def test_invalid_input_error_alias() -> None:
    assert InvalidInputError is InputFormatError


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (FRAME, InputType.BUFFER),
        (bytearray(FRAME), InputType.BUFFER),
        ("3f 83 02 a1 3d", InputType.HEXSTRING),
        ("3F8302", InputType.HEXSTRING),
        ("not hex", InputType.UNKNOWN),
        ("", InputType.UNKNOWN),
        ([63, 131], InputType.ARRAY),
        ((63, 131), InputType.ARRAY),
        (12, InputType.UNKNOWN),
        (None, InputType.UNKNOWN),
    ],
)
def test_detect_input_type(payload: object, expected: InputType) -> None:
    assert detect_input_type(payload) is expected
