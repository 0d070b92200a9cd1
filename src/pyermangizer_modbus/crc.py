"""Modbus RTU CRC-16 (reflected polynomial 0xA001, initial value 0xFFFF)."""

from .errors import ChecksumError

_POLY = 0xA001


def crc16(data: bytes) -> int:
    """Return the Modbus CRC-16 of data. The checksum goes on the wire low byte first."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ _POLY
            else:
                crc >>= 1
    return crc


def append_crc(body: bytes) -> bytes:
    """Return body followed by its CRC-16, little-endian."""
    return bytes(body) + crc16(body).to_bytes(2, "little")


def verify_crc(frame: bytes) -> int:
    """
    Check the trailing two bytes of frame against the CRC-16 of everything before them.

    Returns the verified checksum. Raises ChecksumError on mismatch or when the
    frame is too short to hold a checksum.
    """
    if len(frame) < 2:
        raise ChecksumError(None, None, frame=bytes(frame))
    received = int.from_bytes(frame[-2:], "little")
    computed = crc16(frame[:-2])
    if computed != received:
        raise ChecksumError(computed, received, frame=bytes(frame))
    return computed
