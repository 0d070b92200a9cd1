"""Tests for Modbus CRC-16 calculation and verification."""

import random

import pytest

from pyermangizer_modbus import append_crc, crc16, verify_crc
from pyermangizer_modbus.errors import ChecksumError

EXCEPTION_FRAME = bytes.fromhex("3f8302a13d")


def test_crc16_empty() -> None:
    """CRC of no data is the initial value."""
    assert crc16(b"") == 0xFFFF


def test_crc16_check_value() -> None:
    """CRC-16/MODBUS catalogue check value for ASCII '123456789'."""
    assert crc16(b"123456789") == 0x4B37


def test_crc16_known_frame() -> None:
    assert crc16(bytes.fromhex("3f8302")) == 0x3DA1


def test_append_crc_is_little_endian() -> None:
    assert append_crc(bytes.fromhex("3f8302")) == EXCEPTION_FRAME
    assert append_crc(b"123456789")[-2:] == b"\x37\x4b"


def test_verify_crc_accepts_valid_frame() -> None:
    assert verify_crc(EXCEPTION_FRAME) == 0x3DA1


def test_verify_crc_accepts_appended_crc() -> None:
    rng = random.Random(1234)
    for length in range(0, 64, 7):
        body = bytes(rng.randrange(256) for _ in range(length))
        assert verify_crc(append_crc(body)) == crc16(body)


def test_verify_crc_detects_every_single_bit_flip_in_body() -> None:
    frame = bytearray(append_crc(bytes.fromhex("0103040001000200")))
    for i in range(len(frame) - 2):
        for bit in range(8):
            corrupted = bytearray(frame)
            corrupted[i] ^= 1 << bit
            with pytest.raises(ChecksumError):
                verify_crc(bytes(corrupted))


def test_verify_crc_mismatch_reports_both_values() -> None:
    with pytest.raises(ChecksumError) as exc_info:
        verify_crc(bytes.fromhex("3f83023da1"))
    assert exc_info.value.expected == 0x3DA1
    assert exc_info.value.received == 0xA13D
    assert exc_info.value.kind == "checksum"


@pytest.mark.parametrize("frame", [b"", b"\x3f"])
def test_verify_crc_too_short_fails(frame: bytes) -> None:
    with pytest.raises(ChecksumError) as exc_info:
        verify_crc(frame)
    assert exc_info.value.received is None
