#!/usr/bin/env python3
"""Example: decode one captured frame and print the detailed and simplified views."""

import json
import sys

from pyermangizer_modbus import FrameDecoder, detailed, simplified
from pyermangizer_modbus.errors import ChecksumError, FrameTooShortError, InputFormatError


def main() -> None:
    # Read Holding Registers response from slave 63 (default address), 22 registers
    captured = (
        "3f032c01f4000100ea0020000000000001000000000001001e000a001e004c"
        "0014000a00f00000000600550000003f38ee"
    )
    if len(sys.argv) > 1:
        captured = sys.argv[1]

    decoder = FrameDecoder()
    try:
        frame = decoder.decode(captured)
    except InputFormatError as e:
        print(f"Bad input: {e}", file=sys.stderr)
        sys.exit(1)
    except FrameTooShortError as e:
        print(f"Frame too short: {e}", file=sys.stderr)
        sys.exit(1)
    except ChecksumError as e:
        print(f"CRC mismatch: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(detailed(frame), indent=2, ensure_ascii=False))
    print(json.dumps(simplified(frame), indent=2, ensure_ascii=False))

    # Typed access to the decoded values
    freq = frame.registers.get("output_frequency")
    if freq is not None:
        print(f"output_frequency = {freq.decoded.to_dict()['value']} Hz")


if __name__ == "__main__":
    main()
