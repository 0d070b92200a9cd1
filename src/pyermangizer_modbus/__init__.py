"""pyermangizer-modbus: decode frequency-converter Modbus RTU frames into labelled register values."""

__version__ = "0.1.0"

from .crc import append_crc, crc16, verify_crc
from .decoder import FrameDecoder, decode_frame, try_decode_frame
from .errors import (
    ChecksumError,
    FrameDecodeError,
    FrameTooShortError,
    InputFormatError,
    InvalidInputError,
    PyErmangizerModbusError,
    UnknownRegisterError,
)
from .normalize import detect_input_type, normalize_frame
from .output import OutputFormat, detailed, failure_payload, simplified
from .registermap import RegisterMap, get_default_register_map
from .types import DecodedFrame, DecodeResult, InputType, RegisterDescriptor, RegisterReading

__all__ = [
    "__version__",
    "append_crc",
    "crc16",
    "verify_crc",
    "FrameDecoder",
    "decode_frame",
    "try_decode_frame",
    "ChecksumError",
    "FrameDecodeError",
    "FrameTooShortError",
    "InputFormatError",
    "InvalidInputError",
    "PyErmangizerModbusError",
    "UnknownRegisterError",
    "detect_input_type",
    "normalize_frame",
    "OutputFormat",
    "detailed",
    "failure_payload",
    "simplified",
    "RegisterMap",
    "get_default_register_map",
    "DecodedFrame",
    "DecodeResult",
    "InputType",
    "RegisterDescriptor",
    "RegisterReading",
]
