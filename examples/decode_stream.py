#!/usr/bin/env python3
"""Example: decode hex frames from stdin, one per line; failures are reported and skipped."""

import json
import sys

from pyermangizer_modbus import FrameDecoder, failure_payload, simplified


def main() -> None:
    decoder = FrameDecoder()
    try:
        for line in sys.stdin:
            line = line.strip()
            if not line:
                continue
            result = decoder.try_decode(line)
            if result.ok:
                print(json.dumps(simplified(result.unwrap()), ensure_ascii=False))
            else:
                assert result.error is not None
                print(json.dumps(failure_payload(result.error, line, "hexstring")), file=sys.stderr)
    except KeyboardInterrupt:
        print("\nStopped.")


if __name__ == "__main__":
    main()
