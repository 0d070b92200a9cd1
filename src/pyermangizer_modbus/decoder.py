"""FrameDecoder: validate one Modbus RTU frame and decode its registers into labelled readings."""

import logging
from types import MappingProxyType
from typing import Any, Mapping

from .crc import verify_crc
from .errors import FrameDecodeError, FrameTooShortError
from .normalize import normalize_frame
from .registermap import RegisterMap, get_default_register_map
from .types import DecodedFrame, DecodeResult, InputType, ModbusErrorInfo, RegisterReading
from .values import decode_value, unknown_value

logger = logging.getLogger(__name__)

READ_HOLDING_REGISTERS = 0x03
WRITE_SINGLE_REGISTER = 0x06
EXCEPTION_RESPONSE = 0x83

FUNCTION_NAMES: Mapping[int, str] = MappingProxyType(
    {
        READ_HOLDING_REGISTERS: "Read Holding Registers",
        WRITE_SINGLE_REGISTER: "Write Single Register",
        EXCEPTION_RESPONSE: "Error Response",
    }
)

EXCEPTION_CODES: Mapping[int, str] = MappingProxyType(
    {
        1: "Illegal Function",
        2: "Illegal Data Address",
        3: "Illegal Data Value",
        4: "Server Device Failure",
    }
)

# Slave address + function code + CRC
MIN_FRAME_LENGTH = 4
# Read Holding Registers response registers start after address, function, byte count
_READ_DATA_OFFSET = 3
# Address, function, register address (2), value (2), CRC (2)
_WRITE_FRAME_LENGTH = 8
# Address, function, exception code, CRC (2)
_EXCEPTION_FRAME_LENGTH = 5
# Register addresses in a read response are implicit and start here
_FIRST_READ_ADDRESS = 0x0001


def function_name(code: int) -> str:
    return FUNCTION_NAMES.get(code, f"Unknown ({code})")


class FrameDecoder:
    """
    Decodes frequency-converter Modbus RTU frames (read response, write echo, exception).

    Stateless apart from the read-only register map, so one instance can be shared
    across threads. With unify_write_unknown=False, write echoes for addresses outside
    the catalogue are dropped instead of reported as unknown_0x.... entries.
    """

    def __init__(self, register_map: RegisterMap | None = None, unify_write_unknown: bool = True) -> None:
        self._register_map = register_map if register_map is not None else get_default_register_map()
        self._unify_write_unknown = unify_write_unknown

    @property
    def register_map(self) -> RegisterMap:
        return self._register_map

    def _reading(self, address: int, raw: int, operation: str | None = None) -> RegisterReading:
        desc = self._register_map.get(address)
        if desc is None:
            logger.debug("Register 0x%04X not in catalogue, raw value %d kept", address, raw)
            return RegisterReading(address=address, decoded=unknown_value(address, raw), operation=operation)
        return RegisterReading(address=address, decoded=decode_value(desc, raw), descriptor=desc, operation=operation)

    def _read_holding_registers(self, frame: bytes) -> dict[str, RegisterReading]:
        byte_count = frame[2]
        available = len(frame) - _READ_DATA_OFFSET - 2
        if byte_count > available:
            raise FrameTooShortError(
                len(frame),
                _READ_DATA_OFFSET + byte_count + 2,
                f"Message too short: byte count {byte_count} exceeds {available} data bytes",
                frame=frame,
            )
        registers: dict[str, RegisterReading] = {}
        for i in range(byte_count // 2):
            offset = _READ_DATA_OFFSET + 2 * i
            raw = int.from_bytes(frame[offset : offset + 2], "big")
            reading = self._reading(_FIRST_READ_ADDRESS + i, raw)
            registers[reading.name] = reading
        return registers

    def _write_single_register(self, frame: bytes) -> dict[str, RegisterReading]:
        if len(frame) < _WRITE_FRAME_LENGTH:
            raise FrameTooShortError(len(frame), _WRITE_FRAME_LENGTH, frame=frame)
        address = int.from_bytes(frame[2:4], "big")
        raw = int.from_bytes(frame[4:6], "big")
        if address not in self._register_map and not self._unify_write_unknown:
            logger.debug("Write echo for unknown register 0x%04X dropped", address)
            return {}
        reading = self._reading(address, raw, operation="write")
        return {reading.name: reading}

    def _exception_response(self, frame: bytes) -> ModbusErrorInfo:
        if len(frame) < _EXCEPTION_FRAME_LENGTH:
            raise FrameTooShortError(len(frame), _EXCEPTION_FRAME_LENGTH, frame=frame)
        code = frame[2]
        text = EXCEPTION_CODES.get(code, "Unknown error")
        return ModbusErrorInfo(code=code, description=f"Modbus Error: {text}")

    def decode(self, data: Any, input_type: InputType | str = InputType.AUTO) -> DecodedFrame:
        """
        Decode one frame given as bytes, a hex string or a list of byte values.

        Raises InputFormatError, FrameTooShortError or ChecksumError; never returns
        a partially decoded frame. Unknown registers and function codes are not errors.
        """
        frame = normalize_frame(data, input_type)
        if len(frame) < MIN_FRAME_LENGTH:
            raise FrameTooShortError(len(frame), MIN_FRAME_LENGTH, frame=frame)
        verify_crc(frame)

        slave_address = frame[0]
        code = frame[1]
        registers: dict[str, RegisterReading] = {}
        error: ModbusErrorInfo | None = None

        if code == READ_HOLDING_REGISTERS:
            registers = self._read_holding_registers(frame)
        elif code == WRITE_SINGLE_REGISTER:
            registers = self._write_single_register(frame)
        elif code == EXCEPTION_RESPONSE:
            error = self._exception_response(frame)
        else:
            logger.debug("Function code %d has no register payload decoder", code)

        logger.debug(
            "Decoded frame slave=%d function=0x%02X registers=%d",
            slave_address,
            code,
            len(registers),
        )
        return DecodedFrame(
            slave_address=slave_address,
            function_code=code,
            function_name=function_name(code),
            raw=frame,
            registers=registers,
            error=error,
        )

    def try_decode(self, data: Any, input_type: InputType | str = InputType.AUTO) -> DecodeResult:
        """Like decode(), but return a DecodeResult carrying either the frame or the failure."""
        try:
            return DecodeResult(input=data, frame=self.decode(data, input_type))
        except FrameDecodeError as e:
            logger.debug("Decode failed (%s): %s", e.kind, e)
            return DecodeResult(input=data, error=e)


_default_decoder: FrameDecoder | None = None


def _get_default_decoder() -> FrameDecoder:
    global _default_decoder
    if _default_decoder is None:
        _default_decoder = FrameDecoder()
    return _default_decoder


def decode_frame(data: Any, input_type: InputType | str = InputType.AUTO) -> DecodedFrame:
    """Decode one frame with the default register catalogue."""
    return _get_default_decoder().decode(data, input_type)


def try_decode_frame(data: Any, input_type: InputType | str = InputType.AUTO) -> DecodeResult:
    return _get_default_decoder().try_decode(data, input_type)
