"""
Propeller Application Image Model
=================================

This module provides PropellerImage, an in-memory model of a Propeller
Application image. The image is held as a byte buffer; header fields,
region sizes and the checksum are decoded from it on demand.

What Gets Downloaded
--------------------
A loader does not transmit the entire application image. It sends only
long 0 through the end of code (up to the start of variables); the chip
itself writes zeros to the rest of RAM, up to 32 KB, and inserts the
initial call frame in the proper location. This clears all global
variables and all stack and free space. `download_data()` returns exactly
that part of the image.

Example
-------
    >>> image = PropellerImage(Path("blink.binary").read_bytes(), "blink.binary")
    >>> image.image_type_text()
    'Program'
    >>> image.set_clock_mode(ClockMode.XTAL1_PLL16X)
    True
    >>> image.set_clock_frequency(80_000_000)
    >>> image.recalculate_checksum()
    True

Copyright (c) 2026 The propeller-image Contributors
"""

from typing import Optional, Union
import logging

from propeller_image.errors import (
    ChecksumMismatchError,
    ImageError,
    InvalidHeaderError,
    OutOfRangeError,
)
from propeller_image.image.checksum import (
    ChecksumAnalysis,
    analyze_checksum,
    calculate_checksum,
    verify_checksum,
)
from propeller_image.image.clock import ClockMode
from propeller_image.image.layout import (
    BYTE,
    EEPROM_SIZE,
    HEADER_SIZE,
    LONG,
    OFFSET_CHECKSUM,
    OFFSET_CLOCK_FREQUENCY,
    OFFSET_CLOCK_MODE,
    OFFSET_PROGRAM_POINTER,
    OFFSET_STACK_POINTER,
    OFFSET_START_OF_CODE,
    OFFSET_START_OF_STACK_SPACE,
    OFFSET_START_OF_VARIABLES,
    START_OF_CODE,
    WORD,
    ImageType,
)

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


class PropellerImage:
    """
    A Propeller Application image held in memory.

    The image owns a private copy of the buffer it is given. All mutation
    goes through `set_data()` and the write primitives, and every read or
    write is bounds-checked against the current buffer.

    Writes never update the checksum. Call `recalculate_checksum()` after
    editing the image.

    PropellerImage is not safe for concurrent mutation; callers sharing an
    instance between threads must synchronize externally.

    Attributes:
        filename: Caller-supplied origin label (not used for validation)
    """

    def __init__(self, data: BytesLike = b"", filename: str = ""):
        """
        Initialize the image.

        Args:
            data: Raw image bytes (copied)
            filename: Origin label, usually the file the image came from
        """
        self._image = bytearray(data)
        self.filename = filename
        self._type: Optional[ImageType] = None

    def __len__(self) -> int:
        return len(self._image)

    def __repr__(self) -> str:
        return (
            f"PropellerImage(filename={self.filename!r}, "
            f"type={self.image_type().name}, size={len(self._image)})"
        )

    # =========================================================================
    # Raw Data
    # =========================================================================

    def data(self) -> bytes:
        """Get a copy of the image bytes."""
        return bytes(self._image)

    def set_data(self, data: BytesLike) -> None:
        """Replace the whole image buffer."""
        self._image = bytearray(data)
        self._type = None
        logger.debug(f"Image data replaced ({len(self._image)} bytes)")

    # =========================================================================
    # Image Information
    # =========================================================================

    def file_name(self) -> str:
        """Get the origin label supplied at construction."""
        return self.filename

    def image_type(self) -> ImageType:
        """
        Classify the image.

        - EEPROM: exactly 32768 bytes
        - BINARY: smaller, with the start-of-code pointer at $0010
        - INVALID: anything else
        """
        if self._type is None:
            self._type = self._classify()
        return self._type

    def _classify(self) -> ImageType:
        size = len(self._image)
        if size == EEPROM_SIZE:
            return ImageType.EEPROM
        if size > EEPROM_SIZE:
            logger.debug(f"Image classified invalid: {size} bytes exceeds {EEPROM_SIZE}")
            return ImageType.INVALID
        if size < OFFSET_START_OF_CODE + WORD:
            logger.debug(f"Image classified invalid: too short ({size} bytes)")
            return ImageType.INVALID
        if self.start_of_code() != START_OF_CODE:
            logger.debug(
                f"Image classified invalid: start of code is "
                f"0x{self.start_of_code():04X}, expected 0x{START_OF_CODE:04X}"
            )
            return ImageType.INVALID
        return ImageType.BINARY

    def image_type_text(self) -> str:
        """Get "Program", "EEPROM" or "Invalid"."""
        return self.image_type().get_description()

    def image_size(self) -> int:
        return len(self._image)

    def start_of_code(self) -> int:
        return self.read_word(OFFSET_START_OF_CODE)

    def start_of_variables(self) -> int:
        return self.read_word(OFFSET_START_OF_VARIABLES)

    def start_of_stack_space(self) -> int:
        return self.read_word(OFFSET_START_OF_STACK_SPACE)

    def program_pointer(self) -> int:
        """Get the current program pointer (first public method)."""
        return self.read_word(OFFSET_PROGRAM_POINTER)

    def stack_pointer(self) -> int:
        """Get the current stack pointer (first run-time usable stack location)."""
        return self.read_word(OFFSET_STACK_POINTER)

    def program_size(self) -> int:
        """
        Get the size of the code region.

        Raises:
            OutOfRangeError: If the header is truncated
            InvalidHeaderError: If variables start before code
        """
        size = self.start_of_variables() - self.start_of_code()
        if size < 0:
            raise InvalidHeaderError(
                f"start of variables (0x{self.start_of_variables():04X}) precedes "
                f"start of code (0x{self.start_of_code():04X})"
            )
        return size

    def variable_size(self) -> int:
        """
        Get the size of the global variable region.

        Raises:
            OutOfRangeError: If the header is truncated
            InvalidHeaderError: If stack space starts before variables
        """
        size = self.start_of_stack_space() - self.start_of_variables()
        if size < 0:
            raise InvalidHeaderError(
                f"start of stack space (0x{self.start_of_stack_space():04X}) precedes "
                f"start of variables (0x{self.start_of_variables():04X})"
            )
        return size

    def stack_size(self) -> int:
        """
        Get the size of the stack region held in the buffer.

        Raises:
            OutOfRangeError: If the header is truncated
            InvalidHeaderError: If stack space starts past the end of the image
        """
        size = len(self._image) - self.start_of_stack_space()
        if size < 0:
            raise InvalidHeaderError(
                f"start of stack space (0x{self.start_of_stack_space():04X}) lies "
                f"beyond the end of a {len(self._image)}-byte image"
            )
        return size

    # =========================================================================
    # Validation
    # =========================================================================

    def checksum(self) -> int:
        """Get the checksum byte stored in the image (not recalculated)."""
        return self.read_byte(OFFSET_CHECKSUM)

    def checksum_is_valid(self) -> bool:
        """Check that the checksummed range sums to zero."""
        return verify_checksum(self._image, self.image_type())

    def analyze_checksum(self) -> ChecksumAnalysis:
        """Get stored and expected checksum values with an explanation."""
        return analyze_checksum(self._image, self.image_type())

    def recalculate_checksum(self) -> bool:
        """
        Store a checksum that makes the image sum to zero.

        Returns:
            True on success, False if the image cannot hold a checksum byte
        """
        if len(self._image) <= OFFSET_CHECKSUM:
            logger.debug(f"Cannot recalculate checksum: image is {len(self._image)} bytes")
            return False

        value = calculate_checksum(self._image, self.image_type())
        self._image[OFFSET_CHECKSUM] = value
        logger.debug(f"Checksum recalculated: 0x{value:02X}")
        return True

    def validate(self) -> None:
        """
        Validate the image, raising on the first problem found.

        Checks that the header is complete, start of code is $0010, the
        regions are ordered and fit, and the checksum is correct.

        For binary images only the code is held in the buffer; variables
        and stack live in hub RAM that the chip zero-fills, so the stack
        space is measured against the 32 KB of hub RAM instead.

        Raises:
            OutOfRangeError: If the image is shorter than the header
            InvalidHeaderError: If the header is malformed
            ChecksumMismatchError: If the checksum is wrong
        """
        size = len(self._image)
        if size < HEADER_SIZE:
            raise OutOfRangeError(0, HEADER_SIZE, size, f"image too short for header ({size} bytes)")

        if self.start_of_code() != START_OF_CODE:
            raise InvalidHeaderError(
                f"start of code is 0x{self.start_of_code():04X}, expected 0x{START_OF_CODE:04X}"
            )

        image_type = self.image_type()
        if image_type == ImageType.INVALID:
            raise InvalidHeaderError(f"image of {size} bytes exceeds {EEPROM_SIZE} bytes")

        self.program_size()
        self.variable_size()
        if image_type == ImageType.EEPROM:
            self.stack_size()
        else:
            if self.start_of_variables() > size:
                raise InvalidHeaderError(
                    f"code ends at 0x{self.start_of_variables():04X} but image "
                    f"has only {size} bytes"
                )
            if self.start_of_stack_space() > EEPROM_SIZE:
                raise InvalidHeaderError(
                    f"start of stack space (0x{self.start_of_stack_space():04X}) "
                    f"lies beyond hub RAM"
                )

        analysis = self.analyze_checksum()
        if not analysis.is_valid:
            raise ChecksumMismatchError(analysis.stored_checksum, analysis.calculated_checksum)

    def is_valid(self) -> bool:
        """Check the header, region sizes and checksum."""
        try:
            self.validate()
        except ImageError as e:
            logger.debug(f"Image '{self.filename}' is not valid: {e}")
            return False
        return True

    def download_data(self) -> bytes:
        """
        Get the part of the image a loader transmits: long 0 through end of code.

        Raises:
            OutOfRangeError: If the header is truncated
            InvalidHeaderError: If the code region is malformed
        """
        if self.start_of_code() != START_OF_CODE:
            raise InvalidHeaderError(
                f"start of code is 0x{self.start_of_code():04X}, expected 0x{START_OF_CODE:04X}"
            )
        end = self.start_of_variables()
        self.program_size()
        if end > len(self._image):
            raise InvalidHeaderError(
                f"code ends at 0x{end:04X} but image has only {len(self._image)} bytes"
            )
        return bytes(self._image[:end])

    # =========================================================================
    # Low-Level Access
    # =========================================================================

    def _check_range(self, pos: int, width: int) -> None:
        if pos < 0 or pos + width > len(self._image):
            raise OutOfRangeError(pos, width, len(self._image))

    def _read(self, pos: int, width: int) -> int:
        self._check_range(pos, width)
        return int.from_bytes(self._image[pos:pos + width], "little")

    def _write(self, pos: int, width: int, value: int) -> None:
        self._check_range(pos, width)
        if not 0 <= value < (1 << (8 * width)):
            raise ValueError(f"Value {value} does not fit in {width} byte(s)")
        self._image[pos:pos + width] = value.to_bytes(width, "little")
        # Header pointer writes can change the classification
        self._type = None

    def read_byte(self, pos: int) -> int:
        return self._read(pos, BYTE)

    def read_word(self, pos: int) -> int:
        return self._read(pos, WORD)

    def read_long(self, pos: int) -> int:
        return self._read(pos, LONG)

    def write_byte(self, pos: int, value: int) -> None:
        self._write(pos, BYTE, value)

    def write_word(self, pos: int, value: int) -> None:
        self._write(pos, WORD, value)

    def write_long(self, pos: int, value: int) -> None:
        self._write(pos, LONG, value)

    # =========================================================================
    # Clock Settings
    # =========================================================================

    def clock_frequency(self) -> int:
        """Get the clock frequency of the image, in Hz."""
        return self.read_long(OFFSET_CLOCK_FREQUENCY)

    def set_clock_frequency(self, frequency: int) -> None:
        """Assign a new clock frequency (Hz). The checksum is left stale."""
        self.write_long(OFFSET_CLOCK_FREQUENCY, frequency)
        logger.debug(f"Clock frequency set to {frequency} Hz")

    def clock_mode(self) -> int:
        """Get the raw clock mode byte."""
        return self.read_byte(OFFSET_CLOCK_MODE)

    def clock_mode_text(self, value: Optional[int] = None) -> str:
        """
        Get the name of a clock mode.

        Args:
            value: Clock mode byte, or None for the image's current mode

        Returns:
            Spin name such as "XTAL1+PLL16X", or "UNKNOWN"
        """
        if value is None:
            value = self.clock_mode()
        return ClockMode.name_of(value)

    def set_clock_mode(self, value: int) -> bool:
        """
        Assign a new clock mode. The checksum is left stale.

        Returns:
            True on success, False if the mode is not recognized
            (the image is left unchanged)
        """
        if not ClockMode.is_known(value):
            logger.debug(f"Rejected unknown clock mode 0x{value:02X}")
            return False

        self.write_byte(OFFSET_CLOCK_MODE, value)
        logger.debug(f"Clock mode set to {ClockMode.name_of(value)}")
        return True
