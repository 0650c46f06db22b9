"""
Propeller Image - Application Image Toolkit for the Parallax Propeller
======================================================================

This package models the Propeller Application image, the container that
holds a compiled application for the Parallax P8X32A microcontroller.
An image is held as an in-memory byte buffer with structured access to
its header, checksum, region sizes and clock configuration.

Main Components
---------------
- **image**: The image model, layout, clock modes, checksum and conversion
- **config**: Tool configuration
- **cli**: The `propimg` command-line tool

Quick Start
-----------
Inspect an image:
    >>> from propeller_image import PropellerImage
    >>> image = PropellerImage(Path("blink.binary").read_bytes(), "blink.binary")
    >>> print(image.image_type_text(), image.clock_mode_text())
    Program XTAL1+PLL16X

Retarget an image to a different clock:
    >>> image.set_clock_mode(ClockMode.RCFAST)
    True
    >>> image.set_clock_frequency(12_000_000)
    >>> image.recalculate_checksum()
    True

Or use the command-line tool:
    $ propimg info blink.binary
    $ propimg clock blink.binary --mode RCFAST --frequency 12000000 -o slow.binary
    $ propimg convert blink.binary -o blink.eeprom

Reference Documentation
-----------------------
- Propeller Manual v1.2 (Parallax Inc.)

Version History
---------------
1.0.0 - Initial release with image model, conversion and propimg tool
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from propeller_image.errors import (
    PropellerError,
    ImageError,
    OutOfRangeError,
    InvalidHeaderError,
    ChecksumMismatchError,
    UnknownClockModeError,
)

from propeller_image.image import (
    PropellerImage,
    ImageType,
    ClockMode,
    ChecksumAnalysis,
    EEPROM_SIZE,
    HEADER_SIZE,
    START_OF_CODE,
    convert,
    to_binary,
    to_eeprom,
)

from propeller_image.config import ToolConfig

__all__ = [
    # Version info
    "__version__",
    # Image model
    "PropellerImage",
    "ImageType",
    "ClockMode",
    "ChecksumAnalysis",
    "EEPROM_SIZE",
    "HEADER_SIZE",
    "START_OF_CODE",
    # Conversion
    "convert",
    "to_binary",
    "to_eeprom",
    # Exception hierarchy
    "PropellerError",
    "ImageError",
    "OutOfRangeError",
    "InvalidHeaderError",
    "ChecksumMismatchError",
    "UnknownClockModeError",
    # Configuration
    "ToolConfig",
]
