"""
srecimg - SREC Image Command-Line Interface
===========================================

This module implements the command-line interface for decoding, inspecting
and patching Motorola S-record files.

Commands
--------
- **info**: Show header, record counts and address range
- **dump**: Hex dump of the flat image
- **extract**: Write the flat image as a raw binary file
- **patch**: Overwrite bytes in the image and write a raw binary file
- **verify**: Check every record checksum

Usage Examples
--------------
Show file information:
    $ srecimg info firmware.s19

Dump 64 bytes from an address:
    $ srecimg dump firmware.s19 -a 0x8000 -n 64

Convert to a flat binary with 0x00 gap filling:
    $ srecimg --fill 0x00 extract firmware.s19 -o firmware.bin

Patch two bytes and write the result:
    $ srecimg patch firmware.s19 0x8010 "EA EA" -o patched.bin

Reject patches that run past the last data record's address:
    $ srecimg --strict-bounds patch firmware.s19 0x8010 EAEA -o patched.bin

Environment variables SREC_IMAGE_FILL_BYTE, SREC_IMAGE_STRICT_BOUNDS and
SREC_IMAGE_VERIFY_CHECKSUMS provide defaults; command-line options win.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from srec_image import __version__
from srec_image.cli.errors import handle_cli_exception
from srec_image.config import ImageConfig
from srec_image.srec import RecordType, SRecFile

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Parameter Types
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the image configuration built from environment
    variables and global options.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: ImageConfig = ImageConfig()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def load(self, srec_file: Path) -> SRecFile:
        logger.debug(f"Loading {srec_file} with {self.config}")
        return SRecFile.from_file(srec_file, self.config)


pass_context = click.make_pass_decorator(Context, ensure=True)


class AddressType(click.ParamType):
    """
    Click parameter type for memory addresses.

    Accepts hex with 0x prefix, or decimal. Range: 0 to max_value.
    """
    name = "address"
    max_value = 0xFFFFFFFF

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, int):
            number = value
        else:
            try:
                number = int(value, 0)
            except ValueError:
                self.fail(f"Invalid {self.name} '{value}' (use 0x prefix for hex)", param, ctx)
        if not 0 <= number <= self.max_value:
            self.fail(
                f"{self.name.capitalize()} {value} is outside 0x0-0x{self.max_value:X}",
                param, ctx,
            )
        return number


class ByteType(AddressType):
    """
    Click parameter type for a single byte value, e.g. the gap fill byte.
    """
    name = "byte"
    max_value = 0xFF


class HexBytesType(click.ParamType):
    """
    Click parameter type for byte strings given as hex, e.g. "EAEA" or "ea ea".
    """
    name = "hexbytes"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> bytes:
        if isinstance(value, bytes):
            return value
        try:
            data = bytes.fromhex(value)
        except ValueError:
            self.fail(f"Invalid hex byte string '{value}'", param, ctx)
        if not data:
            self.fail("No bytes given", param, ctx)
        return data


ADDRESS = AddressType()
BYTE = ByteType()
HEX_BYTES = HexBytesType()

SREC_PATH = click.Path(exists=True, dir_okay=False, path_type=Path)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--fill",
    type=BYTE,
    default=None,
    help="Byte value for gaps between records (default: 0xFF)",
)
@click.option(
    "--strict-bounds/--no-strict-bounds",
    default=None,
    help="Reject patches that end past the last record address",
)
@click.option(
    "--verify-checksums/--no-verify-checksums",
    default=None,
    help="Verify record checksums while parsing",
)
@click.version_option(version=__version__, prog_name="srecimg")
@pass_context
def main(
    ctx: Context,
    verbose: bool,
    fill: Optional[int],
    strict_bounds: Optional[bool],
    verify_checksums: Optional[bool],
) -> None:
    """
    Decode, inspect and patch Motorola S-record files.

    \b
    Commands:
      info      Show header, record counts and address range
      dump      Hex dump of the flat image
      extract   Write the flat image as a raw binary
      patch     Overwrite bytes and write a raw binary
      verify    Check record checksums

    \b
    Examples:
      srecimg info firmware.s19
      srecimg dump firmware.s19 -a 0x8000 -n 64
      srecimg extract firmware.s19 -o firmware.bin
      srecimg patch firmware.s19 0x8010 EAEA -o patched.bin
    """
    ctx.verbose = verbose
    ctx.setup_logging()

    try:
        env = ImageConfig.from_env()
        ctx.config = ImageConfig(
            fill_byte=env.fill_byte if fill is None else fill,
            strict_bounds=env.strict_bounds if strict_bounds is None else strict_bounds,
            verify_checksums=(
                env.verify_checksums if verify_checksums is None else verify_checksums
            ),
        )
    except Exception as e:
        handle_cli_exception(e, verbose)


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument("srec_file", type=SREC_PATH)
@pass_context
def cmd_info(ctx: Context, srec_file: Path) -> None:
    """
    Show information about an SREC file.

    \b
    Example:
      srecimg info firmware.s19
    """
    try:
        srec = ctx.load(srec_file)
        info = srec.get_info()

        click.echo(f"SREC Information: {srec_file}")
        click.echo("=" * 40)
        click.echo(f"Header:        {info['header'] if info['header'] is not None else '(none)'}")
        record_types = ", ".join(
            f"{tag} ({RecordType.from_tag(tag).address_kind().get_description()})"
            for tag in info["record_types"]
        )
        click.echo(f"Record types:  {record_types}")
        click.echo(f"Data records:  {info['data_records']}")
        click.echo(f"Ignored:       {info['ignored_records']}")
        click.echo(f"Start address: {info['start_address']}")
        click.echo(f"End address:   {info['end_address']}")
        click.echo(f"Image size:    {info['image_size']} bytes")
        click.echo(f"Payload:       {info['payload_bytes']} bytes")
        click.echo(f"Entry point:   {info['entry_address'] or '(none)'}")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Dump Command
# =============================================================================

def format_hex_dump(data: bytes, base_address: int, width: int = 16) -> list[str]:
    """
    Format bytes as hex dump lines with an ASCII column.

    Example:
        >>> format_hex_dump(b"Hello", 0x100)
        ['00000100  48 65 6C 6C 6F                                   |Hello|']
    """
    lines = []
    for pos in range(0, len(data), width):
        chunk = data[pos:pos + width]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{base_address + pos:08X}  {hex_part:<{width * 3 - 1}}  |{text}|")
    return lines


@main.command("dump")
@click.argument("srec_file", type=SREC_PATH)
@click.option(
    "-a", "--address",
    type=ADDRESS,
    default=None,
    help="First address to dump (default: image start)",
)
@click.option(
    "-n", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Number of bytes to dump (default: to end of image)",
)
@pass_context
def cmd_dump(
    ctx: Context,
    srec_file: Path,
    address: Optional[int],
    count: Optional[int],
) -> None:
    """
    Hex dump the flat image.

    \b
    Example:
      srecimg dump firmware.s19 -a 0x8000 -n 64
    """
    try:
        image = ctx.load(srec_file).image
        if not len(image):
            logger.debug("Image holds no bytes, nothing to dump")
            return
        start = image.start_address if address is None else address
        if count is None:
            count = max(image.last_address - start + 1, 1)
        data = image.read(start, count)
        for line in format_hex_dump(data, start):
            click.echo(line)

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Extract Command
# =============================================================================

@main.command("extract")
@click.argument("srec_file", type=SREC_PATH)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output binary file path (required)",
)
@pass_context
def cmd_extract(ctx: Context, srec_file: Path, output: Path) -> None:
    """
    Write the flat image of an SREC file as a raw binary.

    The first byte of the output corresponds to the image start address.

    \b
    Example:
      srecimg extract firmware.s19 -o firmware.bin
    """
    try:
        image = ctx.load(srec_file).image
        written = image.save(output)
        click.echo(
            f"Wrote {output} ({written} bytes from 0x{image.start_address:08X})"
        )

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Patch Command
# =============================================================================

@main.command("patch")
@click.argument("srec_file", type=SREC_PATH)
@click.argument("address", type=ADDRESS)
@click.argument("data", type=HEX_BYTES)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Output binary file path (required)",
)
@pass_context
def cmd_patch(
    ctx: Context,
    srec_file: Path,
    address: int,
    data: bytes,
    output: Path,
) -> None:
    """
    Overwrite bytes in the image and write the result as a raw binary.

    ADDRESS is the absolute address of the first byte (0x prefix for hex).
    DATA is the replacement bytes in hex, e.g. "EAEA" or "EA EA".

    \b
    Examples:
      srecimg patch firmware.s19 0x8010 EAEA -o patched.bin
      srecimg --strict-bounds patch firmware.s19 0x8010 EAEA -o patched.bin
    """
    try:
        image = ctx.load(srec_file).image
        image.set_bytes(address, data)
        written = image.save(output)
        click.echo(
            f"Patched {len(data)} bytes at 0x{address:08X}, "
            f"wrote {output} ({written} bytes)"
        )

    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Patch")


# =============================================================================
# Verify Command
# =============================================================================

@main.command("verify")
@click.argument("srec_file", type=SREC_PATH)
@pass_context
def cmd_verify(ctx: Context, srec_file: Path) -> None:
    """
    Verify the checksum of every header, data and start address record.

    \b
    Example:
      srecimg verify firmware.s19
    """
    try:
        srec = ctx.load(srec_file)
        checked = srec.verify_checksums()
        click.echo(f"Checksums OK: {srec_file} ({checked} records)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Verification")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
