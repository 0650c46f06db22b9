"""
Propeller Application Image Layout
==================================

This module defines the fixed layout of a Propeller Application image.

Image Structure
---------------
The image consists of data blocks for initialization, program, variables,
and data/stack space. The first block, initialization, describes the
application's startup parameters, including the position of the other
blocks within the image:

    Offset  Size    Description
    ------  ----    -----------
    0       long    Clock frequency (Hz)
    4       byte    Clock mode
    5       byte    Checksum
    6       word    Start of code pointer (always $0010)
    8       word    Start of variables pointer
    10      word    Start of stack space pointer
    12      word    Current program pointer (first public method)
    14      word    Current stack pointer (first usable stack location)

All multi-byte fields are little-endian.

Image Types
-----------
- **Binary** (`.binary`): program data only, bytes 0 through end of code
- **EEPROM** (`.eeprom`): complete 32 KB EEPROM image

Reference
---------
- Propeller Manual v1.2, "Memory Organization"
"""

from enum import IntEnum
from typing import Final


# =============================================================================
# Header Offsets
# =============================================================================

OFFSET_CLOCK_FREQUENCY: Final[int] = 0
OFFSET_CLOCK_MODE: Final[int] = 4
OFFSET_CHECKSUM: Final[int] = 5
OFFSET_START_OF_CODE: Final[int] = 6
OFFSET_START_OF_VARIABLES: Final[int] = 8
OFFSET_START_OF_STACK_SPACE: Final[int] = 10
OFFSET_PROGRAM_POINTER: Final[int] = 12
OFFSET_STACK_POINTER: Final[int] = 14

# Full initialization block
HEADER_SIZE: Final[int] = 16

# Start of code is always immediately after the header
START_OF_CODE: Final[int] = 0x0010

# Hub RAM / boot EEPROM capacity
EEPROM_SIZE: Final[int] = 32768

# Field widths
BYTE: Final[int] = 1
WORD: Final[int] = 2
LONG: Final[int] = 4

# The chip builds this call frame just below the stack space before starting
# the interpreter. A .binary image does not contain it, but its checksum
# accounts for it.
INITIAL_CALL_FRAME: Final[bytes] = bytes([0xFF, 0xFF, 0xF9, 0xFF, 0xFF, 0xFF, 0xF9, 0xFF])


# =============================================================================
# Enumeration Types
# =============================================================================

class ImageType(IntEnum):
    """
    Propeller image types.

    The type is derived from the buffer: a 32 KB buffer is an EEPROM image,
    a smaller buffer with a valid start-of-code pointer is a binary image,
    anything else is invalid.
    """
    INVALID = 0     # Not a valid image
    BINARY = 1      # Program data-only image (usually `.binary`)
    EEPROM = 2      # Complete EEPROM image (usually `.eeprom`)

    def get_description(self) -> str:
        """Get the short human-readable label for this type."""
        descriptions = {
            ImageType.INVALID: "Invalid",
            ImageType.BINARY: "Program",
            ImageType.EEPROM: "EEPROM",
        }
        return descriptions[self]
