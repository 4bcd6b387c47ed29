"""
gbfix - Game Boy ROM Header Fixer Command-Line Interface
========================================================

This module implements the command-line interface for patching and
validating Game Boy cartridge headers.

Commands
--------
- **fix**: Apply header edits and repairs to a ROM image (in place)
- **info**: Show the decoded cartridge header

Operations run in a fixed order regardless of the order given on the
command line: pad, truncate, title, CGB mode, MBC type, RAM size,
validate.

Usage Examples
--------------
Pad to a valid size and repair the header:
    $ gbfix fix -p -V game.gb

Set title and cartridge type, then fix the checksums:
    $ gbfix fix --title GAME -m 0x1B -r 0x03 -V game.gb

Preview the changes without writing:
    $ gbfix fix -p -V --dry-run game.gb

Show the header:
    $ gbfix info game.gb

Exit Codes
----------
0 - Success
1 - ROM image error
2 - Invalid arguments or missing file
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from gbfix import __version__
from gbfix.cli.errors import handle_cli_exception
from gbfix.config import ToolConfig, parse_byte
from gbfix.errors import TitleError
from gbfix.rom import (
    FixOptions,
    ImageBuffer,
    describe_rom_size,
    encode_title,
    fix_file,
    read_header,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Parameter Types
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Holds the configuration (defaults from the environment) and verbosity.
    """

    def __init__(self) -> None:
        self.config: ToolConfig = ToolConfig.from_env()
        self.verbose: bool = self.config.verbose

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


class ByteValue(click.ParamType):
    """
    Click parameter type for single byte values.

    Accepts decimal (255), 0x-prefixed hex (0xFF) or $-prefixed hex ($FF).
    """
    name = "byte"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to a byte value."""
        if isinstance(value, int):
            return value

        try:
            return parse_byte(value)
        except ValueError:
            self.fail(
                f"'{value}' is not a byte value. "
                f"Use 0-255, 0x00-0xFF or $00-$FF",
                param, ctx
            )


BYTE = ByteValue()


def _check_title(ctx: click.Context, param: click.Parameter,
                 value: Optional[str]) -> Optional[str]:
    """Reject titles that cannot be written before any file is touched."""
    if value is None:
        return None
    try:
        encode_title(value)
    except TitleError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)
    return value


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose (debug) output",
)
@click.version_option(__version__, "--version", prog_name="gbfix")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Game Boy ROM header fixer.

    Pad or truncate ROM images, set header fields and repair the
    Nintendo logo, ROM size, cartridge type and checksums.

    \b
    Commands:
      fix   Patch and validate a ROM image in place
      info  Show the cartridge header

    \b
    Examples:
      gbfix fix -p -V game.gb
      gbfix fix --title GAME -m 0x1B -V game.gb
      gbfix info game.gb
    """
    ctx.verbose = verbose or ctx.config.verbose
    ctx.setup_logging()


# =============================================================================
# Fix Command
# =============================================================================

@main.command("fix")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, readable=True, writable=True,
                    path_type=Path),
)
@click.option(
    "-p", "--pad",
    is_flag=True,
    help="Pad the image to a power-of-two size (32KB minimum)",
)
@click.option(
    "--pad-value",
    type=BYTE,
    default=None,
    help="Pad byte (default: 0xFF, or GBFIX_PAD_VALUE)",
)
@click.option(
    "-t", "--truncate",
    is_flag=True,
    help="Truncate the image to a power-of-two size (8MB maximum)",
)
@click.option(
    "--title",
    type=str,
    default=None,
    callback=_check_title,
    help="Cartridge title (1-16 ASCII characters)",
)
@click.option(
    "-c", "--gbc-compatible",
    is_flag=True,
    help="Mark as Colour Game Boy compatible (0x80)",
)
@click.option(
    "-o", "--gbc-only",
    is_flag=True,
    help="Mark as Colour Game Boy only (0xC0)",
)
@click.option(
    "-m", "--mbc-type",
    type=BYTE,
    default=None,
    help="Cartridge (MBC) type byte",
)
@click.option(
    "-r", "--ram-size",
    type=BYTE,
    default=None,
    help="RAM size byte",
)
@click.option(
    "-V", "--validate",
    is_flag=True,
    help="Repair logo, ROM size, cartridge type and checksums",
)
@click.option(
    "-n", "--dry-run",
    is_flag=True,
    help="Process the image but don't write it back",
)
@pass_context
def cmd_fix(
    ctx: Context,
    rom_file: Path,
    pad: bool,
    pad_value: Optional[int],
    truncate: bool,
    title: Optional[str],
    gbc_compatible: bool,
    gbc_only: bool,
    mbc_type: Optional[int],
    ram_size: Optional[int],
    validate: bool,
    dry_run: bool,
) -> None:
    """
    Patch and validate ROM_FILE in place.

    \b
    Examples:
      gbfix fix -p -V game.gb
      gbfix fix --pad --pad-value 0x00 game.gb
      gbfix fix --title GAME -c -m 0x1B -r 0x03 -V game.gb
      gbfix fix -t -V --dry-run game.gb
    """
    if gbc_compatible and gbc_only:
        raise click.UsageError("--gbc-compatible and --gbc-only cannot be used together")

    options = FixOptions(
        pad=pad,
        pad_value=ctx.config.default_pad_value if pad_value is None else pad_value,
        truncate=truncate,
        title=title,
        gbc_compatible=gbc_compatible,
        gbc_only=gbc_only,
        mbc_type=mbc_type,
        ram_size=ram_size,
        validate=validate,
        dry_run=dry_run or ctx.config.dry_run,
    )

    if not options.has_operations():
        raise click.UsageError("No operation requested. See 'gbfix fix --help'.")

    try:
        result = fix_file(rom_file, options)

        if result.validation is not None:
            report = result.validation
            if report.changed:
                fields = len(report.changes) + (1 if report.logo_bytes_changed else 0)
                click.echo(f"Header repaired ({fields} fields changed)")
            else:
                click.echo("Header is valid")

        if result.written:
            click.echo(f"Wrote {rom_file} ({result.final_size} bytes)")
        else:
            click.echo(f"Dry run: {rom_file} not written ({result.final_size} bytes)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Image")


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
)
@pass_context
def cmd_info(ctx: Context, rom_file: Path) -> None:
    """
    Show the cartridge header of ROM_FILE.

    \b
    Example:
      gbfix info game.gb
    """
    try:
        info = read_header(ImageBuffer.from_file(rom_file))

        def status(ok: bool) -> str:
            return "OK" if ok else "INVALID"

        cgb = info.cgb_mode.get_description() if info.cgb_mode else "DMG"

        click.echo(f"ROM Header: {rom_file}")
        click.echo("=" * 40)
        click.echo(f"Entry point:    {info.entry_point.hex(' ').upper()}")
        click.echo(f"Title:          {info.title}")
        click.echo(f"CGB flag:       0x{info.cgb_flag:02X} ({cgb})")
        click.echo(f"Licensee:       {info.new_licensee_code or '-'} / 0x{info.old_licensee_code:02X}")
        click.echo(f"SGB flag:       0x{info.sgb_flag:02X}")
        click.echo(f"Cartridge type: 0x{info.cartridge_type:02X} ({info.cartridge_description})")
        click.echo(f"ROM size:       0x{info.rom_size:02X} ({describe_rom_size(info.rom_size)})")
        click.echo(f"RAM size:       0x{info.ram_size:02X}")
        click.echo(f"Destination:    0x{info.destination_code:02X}")
        click.echo(f"Version:        {info.version}")
        click.echo(f"Image size:     {info.image_size} bytes")
        click.echo()
        click.echo("Checks:")
        click.echo(f"  Nintendo logo:   {status(info.logo_valid)}")
        click.echo(f"  ROM size byte:   {status(info.rom_size_valid)}")
        click.echo(f"  Cartridge type:  {status(info.cartridge_type_valid)}")
        click.echo(
            f"  Complement:      {status(info.header_checksum_valid)} "
            f"(0x{info.header_checksum:02X}, calculated 0x{info.expected_header_checksum:02X})"
        )
        click.echo(
            f"  Checksum:        {status(info.global_checksum_valid)} "
            f"(0x{info.global_checksum:04X}, calculated 0x{info.expected_global_checksum:04X})"
        )

    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Image")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
