"""
propimg - Propeller Application Image Command-Line Interface
=============================================================

This module implements the command-line interface for inspecting and
editing Propeller Application images (.binary and .eeprom files).

Commands
--------
- **info**: Show header fields, region sizes and checksum
- **validate**: Validate an image
- **checksum**: Show or fix the checksum
- **clock**: Change the clock mode and/or frequency
- **convert**: Convert between binary and EEPROM images

Usage Examples
--------------
Show image information:
    $ propimg info blink.binary

Validate an image:
    $ propimg validate blink.eeprom

Fix a stale checksum in place:
    $ propimg checksum --fix blink.binary

Retarget an image to the internal oscillator:
    $ propimg clock blink.binary --mode RCFAST --frequency 12000000 -o slow.binary

Build an EEPROM image:
    $ propimg convert blink.binary -o blink.eeprom

Copyright (c) 2026 The propeller-image Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click

from propeller_image import __version__
from propeller_image.cli.errors import ExitCode, handle_cli_exception
from propeller_image.config import ToolConfig
from propeller_image.errors import ImageError, UnknownClockModeError
from propeller_image.image import (
    ClockMode,
    PropellerImage,
    convert,
    list_clock_modes,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Clock Mode Parameter Type
# =============================================================================

class ClockModeChoice(click.ParamType):
    """
    Click parameter type for clock mode selection.

    Accepts a Spin name (XTAL1+PLL16X, xtal1_pll16x) or a numeric code
    (0x6F, 111).
    """
    name = "clock_mode"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> ClockMode:
        """Convert string to ClockMode."""
        if isinstance(value, ClockMode):
            return value

        text = str(value).strip()
        try:
            code = int(text, 0)
        except ValueError:
            code = None

        if code is not None:
            try:
                return ClockMode.from_code(code)
            except UnknownClockModeError as e:
                self.fail(str(e), param, ctx)

        try:
            return ClockMode.from_text(text)
        except ValueError:
            self.fail(
                f"Invalid clock mode '{value}'. "
                f"Choose from: {', '.join(list_clock_modes())}",
                param, ctx
            )


CLOCK_MODE = ClockModeChoice()


# =============================================================================
# Helpers
# =============================================================================

def load_image(path: Path) -> PropellerImage:
    """Read an image file."""
    return PropellerImage(path.read_bytes(), path.name)


def save_image(image: PropellerImage, path: Path) -> int:
    """Write an image file, returning the number of bytes written."""
    data = image.data()
    path.write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return len(data)


def _field(getter: Callable[[], int], fmt: str = "{}") -> str:
    """Format a header-derived value, or describe why it is unavailable."""
    try:
        return fmt.format(getter())
    except ImageError as e:
        return f"invalid ({e})"


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="propimg")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """
    Propeller Application Image tool.

    Inspect, validate, retarget and convert Propeller images
    (.binary and .eeprom).

    \b
    Commands:
      info      Show image information
      validate  Validate an image
      checksum  Show or fix the checksum
      clock     Change clock mode and/or frequency
      convert   Convert between binary and EEPROM

    \b
    Examples:
      propimg info blink.binary
      propimg checksum --fix blink.binary
      propimg convert blink.binary -o blink.eeprom
    """
    config = ToolConfig.from_env()
    if verbose:
        config.log_level = "DEBUG"
    logging.basicConfig(level=config.logging_level(), format="%(levelname)s: %(message)s")

    ctx.obj = config
    ctx.meta["verbose"] = verbose


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def cmd_info(ctx: click.Context, image_file: Path) -> None:
    """
    Show detailed information about an image.

    \b
    Example:
      propimg info blink.binary
    """
    try:
        image = load_image(image_file)

        click.echo(f"Image Information: {image.file_name()}")
        click.echo("=" * 40)
        click.echo(f"Type:             {image.image_type_text()}")
        click.echo(f"Size:             {image.image_size()} bytes")
        click.echo(f"Clock Frequency:  {_field(image.clock_frequency, '{} Hz')}")
        click.echo(f"Clock Mode:       {_field(image.clock_mode, '0x{:02X}')} "
                   f"({_field(image.clock_mode_text)})")
        click.echo()
        click.echo("Header:")
        click.echo(f"  Start of Code:        {_field(image.start_of_code, '0x{:04X}')}")
        click.echo(f"  Start of Variables:   {_field(image.start_of_variables, '0x{:04X}')}")
        click.echo(f"  Start of Stack Space: {_field(image.start_of_stack_space, '0x{:04X}')}")
        click.echo(f"  Program Pointer:      {_field(image.program_pointer, '0x{:04X}')}")
        click.echo(f"  Stack Pointer:        {_field(image.stack_pointer, '0x{:04X}')}")
        click.echo()
        click.echo("Regions:")
        click.echo(f"  Program:    {_field(image.program_size, '{} bytes')}")
        click.echo(f"  Variables:  {_field(image.variable_size, '{} bytes')}")
        click.echo(f"  Stack:      {_field(image.stack_size, '{} bytes')}")

        analysis = image.analyze_checksum()
        click.echo()
        if analysis.is_valid:
            click.echo(f"Checksum:         0x{analysis.stored_checksum:02X} (valid)")
        else:
            click.echo(f"Checksum:         {analysis.message}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.meta.get("verbose", False))


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def cmd_validate(ctx: click.Context, image_file: Path) -> None:
    """
    Validate an image: header, region sizes and checksum.

    Exits with status 0 if the image is valid, 1 otherwise.

    \b
    Example:
      propimg validate blink.eeprom
    """
    try:
        image = load_image(image_file)
        image.validate()
        click.echo(f"{image_file}: valid {image.image_type_text()} image")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.meta.get("verbose", False), error_type="Validation")


# =============================================================================
# Checksum Command
# =============================================================================

@main.command("checksum")
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--fix",
    is_flag=True,
    help="Recalculate and store the checksum",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file for --fix (default: overwrite input)",
)
@click.pass_context
def cmd_checksum(
    ctx: click.Context,
    image_file: Path,
    fix: bool,
    output: Optional[Path],
) -> None:
    """
    Show the stored and expected checksum, optionally fixing it.

    \b
    Examples:
      propimg checksum blink.binary
      propimg checksum --fix blink.binary -o fixed.binary
    """
    try:
        image = load_image(image_file)
        analysis = image.analyze_checksum()

        click.echo(f"Stored:     0x{analysis.stored_checksum:02X}")
        click.echo(f"Expected:   0x{analysis.calculated_checksum:02X}")
        click.echo(f"Range:      0..{analysis.range_end}"
                   f"{' + call frame' if analysis.includes_call_frame else ''}")

        if not fix:
            click.echo(f"Status:     {'valid' if analysis.is_valid else 'MISMATCH'}")
            if not analysis.is_valid:
                sys.exit(ExitCode.IMAGE_ERROR)
            return

        if not image.recalculate_checksum():
            click.echo("Error: Image too short to hold a checksum", err=True)
            sys.exit(ExitCode.IMAGE_ERROR)

        target = output or image_file
        save_image(image, target)
        click.echo(f"Checksum set to 0x{image.checksum():02X}, wrote {target}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.meta.get("verbose", False))


# =============================================================================
# Clock Command
# =============================================================================

@main.command("clock")
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-m", "--mode",
    type=CLOCK_MODE,
    help="New clock mode, by name (XTAL1+PLL16X) or code (0x6F)",
)
@click.option(
    "-f", "--frequency",
    type=click.IntRange(0, 0xFFFFFFFF),
    help="New clock frequency in Hz",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: overwrite input)",
)
@click.pass_context
def cmd_clock(
    ctx: click.Context,
    image_file: Path,
    mode: Optional[ClockMode],
    frequency: Optional[int],
    output: Optional[Path],
) -> None:
    """
    Change the clock mode and/or clock frequency of an image.

    The checksum is recalculated afterwards unless PROPIMG_RECALCULATE=0.

    \b
    Examples:
      propimg clock blink.binary --mode RCFAST --frequency 12000000 -o slow.binary
      propimg clock blink.eeprom -m XTAL1+PLL16X -f 80000000
    """
    config: ToolConfig = ctx.obj
    try:
        if mode is None and frequency is None:
            raise click.BadParameter("Nothing to change: give --mode and/or --frequency")

        image = load_image(image_file)

        if mode is not None and not image.set_clock_mode(mode):
            raise UnknownClockModeError(int(mode))
        if frequency is not None:
            image.set_clock_frequency(frequency)

        if config.recalculate_after_edit:
            image.recalculate_checksum()

        target = output or image_file
        save_image(image, target)
        click.echo(
            f"Clock set to {image.clock_mode_text()} at {image.clock_frequency()} Hz, "
            f"wrote {target}"
        )

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.meta.get("verbose", False))


# =============================================================================
# Convert Command
# =============================================================================

@main.command("convert")
@click.argument(
    "image_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: input name with .binary/.eeprom suffix)",
)
@click.pass_context
def cmd_convert(ctx: click.Context, image_file: Path, output: Optional[Path]) -> None:
    """
    Convert a binary image to an EEPROM image, or the reverse.

    The direction follows the input: binary images become EEPROM images,
    EEPROM images become binary images.

    \b
    Examples:
      propimg convert blink.binary -o blink.eeprom
      propimg convert blink.eeprom
    """
    config: ToolConfig = ctx.obj
    try:
        image = load_image(image_file)
        result = convert(image)

        target = output or config.output_path_for(image_file, result.image_type())
        written = save_image(result, target)
        click.echo(
            f"Converted {image.image_type_text()} to {result.image_type_text()}: "
            f"{target} ({written} bytes)"
        )

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.meta.get("verbose", False))


if __name__ == "__main__":
    main()
