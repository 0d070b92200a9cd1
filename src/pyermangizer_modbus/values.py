"""Per-register value decoding: generic scaling plus the register-specific encodings."""

from types import MappingProxyType
from typing import Callable, Mapping

from .types import (
    CarrierFrequency,
    DecodedValue,
    ErrorCodeValue,
    MeasurementRange,
    RegisterDescriptor,
    ScaledValue,
    StatusCommand,
    StatusFlags,
    UnknownRegisterValue,
)

ERROR_CODES: Mapping[int, str] = MappingProxyType(
    {
        0: "No error",
        1: "Equipment overcurrent, short circuit",
        2: "Overload",
        3: "Low pressure (no pressure sensor)",
        4: "Overpressure",
        5: "Low pressure",
        6: "Overpressure",
        7: "Phase loss (power phase loss)",
        8: "Overheating",
        9: "Insufficient power",
        10: "Software current overload",
        11: "Communication failure",
        12: "Default",
        13: "Motor locked",
        14: "Motor phase loss",
        15: "Motor overspeed",
        16: "Memory failure (FLASH failure)",
    }
)

STATUS_COMMANDS: Mapping[int, str] = MappingProxyType(
    {
        0x00: "invalid",
        0x01: "running",
        0x04: "stop",
        0x11: "error reset",
    }
)

MEASUREMENT_RANGES: Mapping[int, str] = MappingProxyType(
    {
        6: "6 bar",
        10: "10 bar",
        16: "16 bar",
        25: "25 bar",
    }
)

# Carrier frequency register reads 72 ('H') for high; every other code means low
_CARRIER_HIGH = 72

_STATUS_WATER_SHORTAGE = 0x0001
_STATUS_RUNNING = 0x0002


def scaled_value(desc: RegisterDescriptor, raw: int) -> ScaledValue:
    if desc.scale is None:
        return ScaledValue(value=raw, raw_value=raw)
    return ScaledValue(value=round(raw * desc.scale, 3), raw_value=raw)


def _error_code(desc: RegisterDescriptor, raw: int) -> ErrorCodeValue:
    return ErrorCodeValue(code=raw, description=ERROR_CODES.get(raw, "Unknown error"), raw_value=raw)


def _status_flags(desc: RegisterDescriptor, raw: int) -> StatusFlags:
    return StatusFlags(
        water_shortage=bool(raw & _STATUS_WATER_SHORTAGE),
        running=bool(raw & _STATUS_RUNNING),
        raw_value=raw,
    )


def _carrier_frequency(desc: RegisterDescriptor, raw: int) -> CarrierFrequency:
    return CarrierFrequency(value="H" if raw == _CARRIER_HIGH else "L", code=raw, raw_value=raw)


def _status_command(desc: RegisterDescriptor, raw: int) -> StatusCommand:
    return StatusCommand(code=raw, description=STATUS_COMMANDS.get(raw, "Unknown status"), raw_value=raw)


def _measurement_range(desc: RegisterDescriptor, raw: int) -> MeasurementRange:
    return MeasurementRange(value=MEASUREMENT_RANGES.get(raw, f"Unknown ({raw})"), code=raw, raw_value=raw)


ValueDecoder = Callable[[RegisterDescriptor, int], DecodedValue]

# Keyed by register address; addresses not listed use scaled_value
VALUE_DECODERS: Mapping[int, ValueDecoder] = MappingProxyType(
    {
        0x0006: _error_code,
        0x0007: _status_flags,
        0x0014: _carrier_frequency,
        0x0019: _measurement_range,
        0x1001: _status_command,
    }
)


def _check_raw(raw: int) -> None:
    if not 0 <= raw <= 0xFFFF:
        raise ValueError(f"raw register value must be 0-65535, got {raw}")


def decode_value(desc: RegisterDescriptor, raw: int) -> DecodedValue:
    """Decode a raw 16-bit register value according to its descriptor. Never fails for 0-65535."""
    _check_raw(raw)
    decoder = VALUE_DECODERS.get(desc.address, scaled_value)
    return decoder(desc, raw)


def unknown_value(address: int, raw: int) -> UnknownRegisterValue:
    _check_raw(raw)
    return UnknownRegisterValue(address=address, raw_value=raw)
