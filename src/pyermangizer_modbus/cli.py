#!/usr/bin/env python3
"""Command-line host for pyermangizer-modbus using Typer."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .crc import append_crc, crc16
from .decoder import FrameDecoder
from .errors import FrameDecodeError, InputFormatError, UnknownRegisterError
from .normalize import detect_input_type, normalize_frame
from .output import OutputFormat, failure_payload, render
from .registermap import get_default_register_map
from .types import InputType, RegisterDescriptor

app = typer.Typer(
    name="pyermangizer",
    help="Decode Ermangizer frequency-converter Modbus RTU frames into labelled register values.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

InputTypeOption = Annotated[
    str,
    typer.Option(
        "--input-type",
        "-i",
        help="Payload encoding: auto, hexstring, array, buffer",
        envvar="PYERMANGIZER_INPUT_TYPE",
    ),
]
FormatOption = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format: detailed, simplified", envvar="PYERMANGIZER_FORMAT"),
]
ProfileOption = Annotated[
    str,
    typer.Option("--profile", help="Register catalogue profile", envvar="PYERMANGIZER_PROFILE"),
]
LegacyWritesOption = Annotated[
    bool,
    typer.Option(
        "--legacy-writes",
        help="Drop write echoes for registers outside the catalogue instead of reporting them as unknown",
        envvar="PYERMANGIZER_LEGACY_WRITES",
    ),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]

_INPUT_TYPES = tuple(t.value for t in InputType if t is not InputType.UNKNOWN)
_FORMATS = tuple(f.value for f in OutputFormat)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_decoder(profile: str, legacy_writes: bool) -> FrameDecoder:
    """Create a FrameDecoder for the given register profile."""
    return FrameDecoder(
        register_map=get_default_register_map(profile.lower()),
        unify_write_unknown=not legacy_writes,
    )


def validate_choices(input_type: str, output_format: str) -> None:
    if input_type not in _INPUT_TYPES:
        typer.echo(f"Error: Invalid input type '{input_type}'. Must be one of: {', '.join(_INPUT_TYPES)}.", err=True)
        raise typer.Exit(2)
    if output_format not in _FORMATS:
        typer.echo(f"Error: Invalid format '{output_format}'. Must be one of: {', '.join(_FORMATS)}.", err=True)
        raise typer.Exit(2)


def parse_text_payload(text: str, input_type: str = "auto") -> str | list[Any]:
    """
    Turn command-line text into a decoder payload.

    JSON arrays ("[63, 131, 2]") become lists of ints; everything else is passed on
    as a hex string. Raises InputFormatError for malformed JSON arrays.
    """
    s = text.strip()
    if input_type == InputType.ARRAY.value or (input_type == InputType.AUTO.value and s.startswith("[")):
        try:
            values = json.loads(s)
        except json.JSONDecodeError as e:
            raise InputFormatError(f"Invalid byte array: {e.msg}", input_type="str") from None
        if not isinstance(values, list):
            raise InputFormatError("Invalid byte array: expected a JSON list", input_type=type(values).__name__)
        return values
    return s


def parse_address(value: str) -> int:
    """Parse a register address given in decimal or 0x hex."""
    v = value.strip()
    num = int(v, 16) if v.lower().startswith("0x") else int(v)
    if not (0 <= num <= 0xFFFF):
        raise ValueError(f"Register address out of range 0-65535: {num}")
    return num


def format_scale(desc: RegisterDescriptor) -> str:
    return "-" if desc.scale is None else f"{desc.scale:g}"


def descriptor_dict(desc: RegisterDescriptor) -> dict[str, Any]:
    return {
        "address": f"0x{desc.address:04X}",
        "name": desc.name,
        "unit": desc.unit,
        "description": desc.description,
        "read_only": desc.read_only,
        "scale": desc.scale,
    }


def echo_json(data: Any, indent: int | None = 2) -> None:
    typer.echo(json.dumps(data, indent=indent, ensure_ascii=False))


# ============================================================================
# Commands
# ============================================================================


@app.command()
def decode(
    data: Annotated[
        Optional[str],
        typer.Argument(help="Frame as hex (e.g. 3f8302a13d) or JSON byte array (e.g. [63,131,2,161,61])"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", help="Read the frame as raw bytes from a binary file (buffer input)"),
    ] = None,
    input_type: InputTypeOption = "auto",
    output_format: FormatOption = "detailed",
    profile: ProfileOption = "ermangizer",
    legacy_writes: LegacyWritesOption = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Decode a single frame and print it as JSON.

    On a decode failure the error is printed together with the original input,
    then the command exits with 2 (bad input) or 3 (short frame / CRC mismatch).
    """
    setup_logging(verbose)
    validate_choices(input_type, output_format)

    if (data is None) == (file is None):
        typer.echo("Error: Pass exactly one of DATA or --file", err=True)
        raise typer.Exit(2)
    if input_type == InputType.BUFFER.value and file is None:
        typer.echo("Error: --input-type buffer requires --file", err=True)
        raise typer.Exit(2)

    try:
        decoder = create_decoder(profile, legacy_writes)
        payload: Any
        if file is not None:
            if not file.is_file():
                typer.echo(f"Error: File not found: {file}", err=True)
                raise typer.Exit(2)
            payload = file.read_bytes()
        else:
            payload = parse_text_payload(data or "", input_type)

        detected = detect_input_type(payload) if input_type == InputType.AUTO.value else InputType(input_type)
        result = decoder.try_decode(payload, input_type)
        if not result.ok:
            assert result.error is not None
            echo_json(failure_payload(result.error, payload, detected))
            raise typer.Exit(2 if isinstance(result.error, InputFormatError) else 3)

        assert result.frame is not None
        echo_json(render(result.frame, output_format))
    except InputFormatError as e:
        echo_json(failure_payload(e, data, input_type))
        raise typer.Exit(2)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def batch(
    file: Annotated[
        Optional[Path],
        typer.Option("--file", help="Text file with one frame per line (default: stdin)"),
    ] = None,
    output_format: FormatOption = "simplified",
    profile: ProfileOption = "ermangizer",
    legacy_writes: LegacyWritesOption = False,
    verbose: VerboseOption = False,
) -> None:
    """
    Decode frames line by line and print NDJSON, one object per input line.

    Lines may be hex or JSON byte arrays; blank lines are skipped. Lines that fail
    to decode produce an error object carrying the original line, and processing
    continues. Exits 3 if any line failed.
    """
    setup_logging(verbose)
    validate_choices(InputType.AUTO.value, output_format)

    if file is not None:
        if not file.is_file():
            typer.echo(f"Error: File not found: {file}", err=True)
            raise typer.Exit(2)
        lines = file.read_text(encoding="utf-8").splitlines()
    else:
        lines = typer.get_text_stream("stdin").read().splitlines()

    decoder = create_decoder(profile, legacy_writes)
    failures = 0
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = parse_text_payload(line)
        except InputFormatError as e:
            failures += 1
            echo_json(failure_payload(e, line.strip(), InputType.ARRAY), indent=None)
            continue
        result = decoder.try_decode(payload)
        if result.ok:
            assert result.frame is not None
            echo_json(render(result.frame, output_format), indent=None)
        else:
            assert result.error is not None
            failures += 1
            logger.debug("Line %d failed: %s", lineno, result.error)
            echo_json(failure_payload(result.error, payload, detect_input_type(payload)), indent=None)

    if failures:
        raise typer.Exit(3)


@app.command()
def registers(
    profile: ProfileOption = "ermangizer",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """List the register catalogue: address, name, unit, scale, access."""
    setup_logging(verbose)

    try:
        regmap = get_default_register_map(profile.lower())
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if json_output:
        echo_json([descriptor_dict(d) for d in regmap])
        return
    for d in regmap:
        access = "RO" if d.read_only else "RW"
        typer.echo(f"0x{d.address:04X}  {d.name:<24} {access}  scale={format_scale(d):<5} {d.unit}")


@app.command()
def explain(
    address: Annotated[str, typer.Argument(help="Register address, decimal or hex (e.g. 7, 0x1001)")],
    profile: ProfileOption = "ermangizer",
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Show the catalogue entry for one register address.

    Does not decode anything; uses the embedded register catalogue only.
    """
    setup_logging(verbose)

    try:
        desc = get_default_register_map(profile.lower()).lookup(parse_address(address))
    except UnknownRegisterError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except ValueError as e:
        typer.echo(f"Error: Invalid address: {e}", err=True)
        raise typer.Exit(2)

    info = descriptor_dict(desc)
    if json_output:
        echo_json(info)
    else:
        typer.echo(f"Address:         {info['address']}")
        typer.echo(f"Name:            {info['name']}")
        typer.echo(f"Unit:            {info['unit']}")
        typer.echo(f"Description:     {info['description']}")
        typer.echo(f"Read only:       {str(info['read_only']).lower()}")
        typer.echo(f"Scale:           {format_scale(desc)}")


@app.command()
def crc(
    body: Annotated[str, typer.Argument(help="Frame body as hex, without checksum")],
    append: Annotated[bool, typer.Option("--append", help="Print the body with its CRC appended")] = False,
) -> None:
    """Compute the Modbus CRC-16 of a frame body."""
    try:
        data = normalize_frame(body, InputType.HEXSTRING)
    except InputFormatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    if append:
        typer.echo(append_crc(data).hex().upper())
    else:
        value = crc16(data)
        wire = value.to_bytes(2, "little").hex(" ").upper()
        typer.echo(f"0x{value:04X} (wire order: {wire})")


@app.command()
def info(
    profile: ProfileOption = "ermangizer",
    json_output: JsonOption = False,
) -> None:
    """Show package version, register profile, and catalogue size."""
    info_data: dict[str, Any] = {
        "version": __version__,
        "profile": profile,
    }
    try:
        info_data["registers"] = len(get_default_register_map(profile.lower()))
    except ValueError as e:
        info_data["error"] = str(e)

    if json_output:
        echo_json(info_data)
    else:
        typer.echo(f"pyermangizer-modbus version: {info_data['version']}")
        typer.echo(f"Profile: {info_data['profile']}")
        if "registers" in info_data:
            typer.echo(f"Registers: {info_data['registers']}")
        else:
            typer.echo(f"Registers: ERROR - {info_data['error']}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pyermangizer-modbus {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """pyermangizer - decode frequency-converter Modbus RTU frames."""
    pass


if __name__ == "__main__":
    app()
