"""
Propeller Application Image Handling
====================================

This package models the Propeller Application image: the binary container
that holds a compiled Spin/PASM application for the Parallax P8X32A.

This package provides:
- **PropellerImage**: In-memory image with header, checksum and clock access
- **ImageType / layout constants**: The fixed header layout
- **ClockMode**: The recognized clock mode settings
- **Checksum utilities**: Additive checksum over the per-type range
- **Conversion**: Binary to EEPROM and back

Quick Start
-----------
    >>> from propeller_image.image import PropellerImage, ClockMode
    >>> image = PropellerImage(data, "blink.binary")
    >>> image.is_valid()
    True
    >>> image.set_clock_mode(ClockMode.RCFAST)
    True
    >>> image.recalculate_checksum()
    True
"""

# Layout constants and enums
from propeller_image.image.layout import (
    ImageType,
    EEPROM_SIZE,
    HEADER_SIZE,
    START_OF_CODE,
    INITIAL_CALL_FRAME,
    OFFSET_CLOCK_FREQUENCY,
    OFFSET_CLOCK_MODE,
    OFFSET_CHECKSUM,
    OFFSET_START_OF_CODE,
    OFFSET_START_OF_VARIABLES,
    OFFSET_START_OF_STACK_SPACE,
    OFFSET_PROGRAM_POINTER,
    OFFSET_STACK_POINTER,
)

# Clock modes
from propeller_image.image.clock import (
    ClockMode,
    UNKNOWN_CLOCK_MODE,
    list_clock_modes,
)

# Checksum utilities
from propeller_image.image.checksum import (
    ChecksumAnalysis,
    CALL_FRAME_SUM,
    additive_sum,
    analyze_checksum,
    calculate_checksum,
    checksum_range_end,
    verify_checksum,
)

# Image model
from propeller_image.image.model import PropellerImage

# Conversion
from propeller_image.image.convert import (
    convert,
    to_binary,
    to_eeprom,
)

__all__ = [
    # Layout
    "ImageType",
    "EEPROM_SIZE",
    "HEADER_SIZE",
    "START_OF_CODE",
    "INITIAL_CALL_FRAME",
    "OFFSET_CLOCK_FREQUENCY",
    "OFFSET_CLOCK_MODE",
    "OFFSET_CHECKSUM",
    "OFFSET_START_OF_CODE",
    "OFFSET_START_OF_VARIABLES",
    "OFFSET_START_OF_STACK_SPACE",
    "OFFSET_PROGRAM_POINTER",
    "OFFSET_STACK_POINTER",
    # Clock modes
    "ClockMode",
    "UNKNOWN_CLOCK_MODE",
    "list_clock_modes",
    # Checksum
    "ChecksumAnalysis",
    "CALL_FRAME_SUM",
    "additive_sum",
    "analyze_checksum",
    "calculate_checksum",
    "checksum_range_end",
    "verify_checksum",
    # Model
    "PropellerImage",
    # Conversion
    "convert",
    "to_binary",
    "to_eeprom",
]
