"""Tests for per-register value decoding rules."""

import pytest

from pyermangizer_modbus import get_default_register_map
from pyermangizer_modbus.types import (
    CarrierFrequency,
    ErrorCodeValue,
    MeasurementRange,
    ScaledValue,
    StatusCommand,
    StatusFlags,
    UnknownRegisterValue,
)
from pyermangizer_modbus.values import ERROR_CODES, VALUE_DECODERS, decode_value, unknown_value


def _decode(address: int, raw: int):
    return decode_value(get_default_register_map().lookup(address), raw)


@pytest.mark.parametrize(
    ("address", "raw", "expected"),
    [
        (0x0001, 500, 50.0),
        (0x0001, 1, 0.1),
        (0x0002, 50, 5.0),
        (0x0003, 234, 234),
        (0x0004, 32, 32),
        (0x0005, 0, 0.0),
        (0x0005, 123, 1.23),
        (0x0011, 240, 2.4),
        (0x0016, 63, 0.63),
        (0x1000, 250, 2.5),
        (0x0013, 65535, 65535),
    ],
)
def test_generic_registers_scale(address: int, raw: int, expected: float) -> None:
    v = _decode(address, raw)
    assert isinstance(v, ScaledValue)
    assert v.value == expected
    assert v.raw_value == raw
    assert v.to_dict() == {"value": expected, "raw_value": raw}


def test_unscaled_register_keeps_integer() -> None:
    v = _decode(0x0003, 234)
    assert isinstance(v.value, int)


def test_scaled_register_rounds_to_three_places() -> None:
    assert _decode(0x0001, 3).value == 0.3
    assert _decode(0x0005, 7).value == 0.07


@pytest.mark.parametrize(
    ("raw", "text"),
    [
        (0, "No error"),
        (1, "Equipment overcurrent, short circuit"),
        (3, "Low pressure (no pressure sensor)"),
        (6, "Overpressure"),
        (16, "Memory failure (FLASH failure)"),
        (17, "Unknown error"),
        (0xFFFF, "Unknown error"),
    ],
)
def test_error_code(raw: int, text: str) -> None:
    v = _decode(0x0006, raw)
    assert isinstance(v, ErrorCodeValue)
    assert v.to_dict() == {"code": raw, "description": text, "raw_value": raw}


def test_error_code_table_is_complete() -> None:
    assert sorted(ERROR_CODES) == list(range(17))


@pytest.mark.parametrize(
    ("raw", "water_shortage", "running"),
    [
        (0, False, False),
        (1, True, False),
        (2, False, True),
        (3, True, True),
        (0xFFFC, False, False),
    ],
)
def test_status_flags(raw: int, water_shortage: bool, running: bool) -> None:
    v = _decode(0x0007, raw)
    assert isinstance(v, StatusFlags)
    assert v.to_dict() == {"water_shortage": water_shortage, "running": running, "raw_value": raw}


@pytest.mark.parametrize(("raw", "letter"), [(72, "H"), (0, "L"), (71, "L"), (73, "L"), (85, "L")])
def test_carrier_frequency(raw: int, letter: str) -> None:
    v = _decode(0x0014, raw)
    assert isinstance(v, CarrierFrequency)
    assert v.to_dict() == {"value": letter, "code": raw, "raw_value": raw}


@pytest.mark.parametrize(
    ("raw", "text"),
    [(0, "invalid"), (1, "running"), (4, "stop"), (0x11, "error reset"), (2, "Unknown status")],
)
def test_status_command(raw: int, text: str) -> None:
    v = _decode(0x1001, raw)
    assert isinstance(v, StatusCommand)
    assert v.to_dict() == {"code": raw, "description": text, "raw_value": raw}


@pytest.mark.parametrize(
    ("raw", "text"),
    [(6, "6 bar"), (10, "10 bar"), (16, "16 bar"), (25, "25 bar"), (40, "Unknown (40)")],
)
def test_measurement_range(raw: int, text: str) -> None:
    v = _decode(0x0019, raw)
    assert isinstance(v, MeasurementRange)
    assert v.to_dict() == {"value": text, "code": raw, "raw_value": raw}


def test_value_decoders_cover_special_registers() -> None:
    assert set(VALUE_DECODERS) == {0x0006, 0x0007, 0x0014, 0x0019, 0x1001}
    with pytest.raises(TypeError):
        VALUE_DECODERS[0x0001] = VALUE_DECODERS[0x0006]  # type: ignore[index]


def test_unknown_value() -> None:
    v = unknown_value(0x0008, 42)
    assert isinstance(v, UnknownRegisterValue)
    assert v.value == 42
    assert v.to_dict() == {
        "value": 42,
        "raw_value": 42,
        "unit": "unknown",
        "description": "Unknown register",
        "address": 0x0008,
    }


@pytest.mark.parametrize("raw", [-1, 0x10000])
def test_decode_value_rejects_non_16_bit(raw: int) -> None:
    with pytest.raises(ValueError):
        _decode(0x0001, raw)
