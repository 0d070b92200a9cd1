"""Clear exceptions for pyermangizer-modbus: malformed input, short frames, CRC mismatches."""


class PyErmangizerModbusError(Exception):
    """Base exception for pyermangizer-modbus."""

    pass


class FrameDecodeError(PyErmangizerModbusError):
    """Base for failures that end a single decode call without a DecodedFrame."""

    kind = "decode"

    def __init__(self, message: str, *, frame: bytes | None = None) -> None:
        self.frame = frame
        super().__init__(message)


class InputFormatError(FrameDecodeError):
    """Raised when the payload is not a buffer, an even-length hex string, or a byte array."""

    kind = "input_format"

    def __init__(self, message: str, *, input_type: str | None = None) -> None:
        self.input_type = input_type
        super().__init__(message)


# Older name kept for callers that follow the device documentation wording.
InvalidInputError = InputFormatError


class FrameTooShortError(FrameDecodeError):
    """Raised when a frame has fewer bytes than its header or function code requires."""

    kind = "frame_too_short"

    def __init__(
        self,
        length: int,
        required: int,
        message: str | None = None,
        *,
        frame: bytes | None = None,
    ) -> None:
        self.length = length
        self.required = required
        super().__init__(
            message or f"Message too short: {length} bytes, need at least {required}",
            frame=frame,
        )


class ChecksumError(FrameDecodeError):
    """Raised when the trailing CRC-16 does not match the frame body."""

    kind = "checksum"

    def __init__(
        self,
        expected: int | None,
        received: int | None,
        message: str | None = None,
        *,
        frame: bytes | None = None,
    ) -> None:
        self.expected = expected
        self.received = received
        if message is None:
            if received is None:
                message = "CRC check failed: frame too short to carry a checksum"
            else:
                message = f"CRC check failed: computed 0x{expected:04X}, received 0x{received:04X}"
        super().__init__(message, frame=frame)


class UnknownRegisterError(PyErmangizerModbusError):
    """Raised by explicit register lookups when the address is not in the catalogue."""

    def __init__(self, address: int, message: str | None = None) -> None:
        self.address = address
        self._msg = message or f"Unknown register: 0x{address:04X}"
        super().__init__(self._msg)
