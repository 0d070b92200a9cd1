"""Core data model: input encodings, register descriptors, decoded register variants, and frames."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Literal, Mapping, Union

from .errors import FrameDecodeError


class InputType(str, Enum):
    """Accepted payload encodings (AUTO picks one from the payload itself)."""

    AUTO = "auto"
    BUFFER = "buffer"
    HEXSTRING = "hexstring"
    ARRAY = "array"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RegisterDescriptor:
    """Static metadata for one holding register of the frequency converter."""

    address: int
    name: str
    unit: str
    description: str
    read_only: bool
    scale: float | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFFFF:
            raise ValueError(f"address must be a 16-bit value, got {self.address}")
        if not self.name:
            raise ValueError(f"register 0x{self.address:04X} has no name")
        if self.scale is not None and self.scale <= 0:
            raise ValueError(f"scale must be > 0, got {self.scale}")


# Decoded register variants. Each carries a `kind` tag and renders its own wire shape.


@dataclass(frozen=True)
class ScaledValue:
    """Generic register: raw value, multiplied by the descriptor scale when it has one."""

    kind: ClassVar[str] = "scaled"

    value: int | float
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "raw_value": self.raw_value}


@dataclass(frozen=True)
class ErrorCodeValue:
    kind: ClassVar[str] = "error_code"

    code: int
    description: str
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "description": self.description, "raw_value": self.raw_value}


@dataclass(frozen=True)
class StatusFlags:
    """Status word: bit 0 is water shortage, bit 1 is running."""

    kind: ClassVar[str] = "status_flags"

    water_shortage: bool
    running: bool
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "water_shortage": self.water_shortage,
            "running": self.running,
            "raw_value": self.raw_value,
        }


@dataclass(frozen=True)
class CarrierFrequency:
    kind: ClassVar[str] = "carrier_frequency"

    value: Literal["H", "L"]
    code: int
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "code": self.code, "raw_value": self.raw_value}


@dataclass(frozen=True)
class StatusCommand:
    kind: ClassVar[str] = "status_command"

    code: int
    description: str
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "description": self.description, "raw_value": self.raw_value}


@dataclass(frozen=True)
class MeasurementRange:
    kind: ClassVar[str] = "measurement_range"

    value: str
    code: int
    raw_value: int

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "code": self.code, "raw_value": self.raw_value}


@dataclass(frozen=True)
class UnknownRegisterValue:
    """Register address not in the catalogue; the raw value is passed through untouched."""

    kind: ClassVar[str] = "unknown"

    address: int
    raw_value: int

    @property
    def value(self) -> int:
        return self.raw_value

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.raw_value,
            "raw_value": self.raw_value,
            "unit": "unknown",
            "description": "Unknown register",
            "address": self.address,
        }


DecodedValue = Union[
    ScaledValue,
    ErrorCodeValue,
    StatusFlags,
    CarrierFrequency,
    StatusCommand,
    MeasurementRange,
    UnknownRegisterValue,
]


@dataclass(frozen=True)
class RegisterReading:
    """One decoded register instance inside a frame."""

    address: int
    decoded: DecodedValue
    descriptor: RegisterDescriptor | None = None
    operation: str | None = None

    @property
    def name(self) -> str:
        if self.descriptor is not None:
            return self.descriptor.name
        return f"unknown_0x{self.address:04x}"

    def to_dict(self) -> dict[str, Any]:
        out = self.decoded.to_dict()
        # Descriptor fields overwrite same-named decoded keys (error/command text stays on self.decoded)
        if self.descriptor is not None:
            out["unit"] = self.descriptor.unit
            out["description"] = self.descriptor.description
            out["address"] = self.address
            out["read_only"] = self.descriptor.read_only
        if self.operation is not None:
            out["operation"] = self.operation
        return out


@dataclass(frozen=True)
class ModbusErrorInfo:
    """Exception response payload (function code 0x83)."""

    code: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "description": self.description, "modbus_error": True}


@dataclass(frozen=True)
class DecodedFrame:
    """Result of decoding one self-contained frame. Registers keep frame order."""

    slave_address: int
    function_code: int
    function_name: str
    raw: bytes
    registers: Mapping[str, RegisterReading] = field(default_factory=dict)
    error: ModbusErrorInfo | None = None

    @property
    def raw_data(self) -> str:
        return self.raw.hex().upper()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "slave_address": self.slave_address,
            "function_code": self.function_code,
            "function_name": self.function_name,
            "raw_data": self.raw_data,
            "registers": {name: reading.to_dict() for name, reading in self.registers.items()},
        }
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of a non-raising decode: exactly one of frame / error is set."""

    input: Any
    frame: DecodedFrame | None = None
    error: FrameDecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> DecodedFrame:
        """Return the frame, or raise the stored decode error."""
        if self.error is not None:
            raise self.error
        assert self.frame is not None
        return self.frame
