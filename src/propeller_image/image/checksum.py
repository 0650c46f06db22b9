"""
Propeller Image Checksum Calculations
=====================================

The checksum byte (offset 5) is chosen so that the additive sum of all
checksummed bytes is 0 modulo 256. The byte itself is part of the sum.

Checksummed Range
-----------------
The range is fixed per image type:

- **EEPROM**: all 32768 bytes. The boot ROM verifies the whole of hub RAM
  after copying the EEPROM into it.
- **Binary**: bytes 0 through end of code (the start-of-variables pointer),
  plus the initial call frame. The loader only transmits the code; the chip
  zero-fills the rest of RAM and writes the call frame `FF FF F9 FF` twice
  below the stack space before verifying. Those 8 bytes add 0xEC to the sum.
- **Invalid**: the whole buffer, without the call frame.

A well-formed `.binary` file ends exactly at the start of variables, so its
range is simply the whole file.

Copyright (c) 2026 The propeller-image Contributors
"""

from dataclasses import dataclass

from propeller_image.image.layout import (
    HEADER_SIZE,
    INITIAL_CALL_FRAME,
    OFFSET_CHECKSUM,
    OFFSET_START_OF_VARIABLES,
    WORD,
    ImageType,
)


# Contribution of the implicit call frame to a binary image checksum
CALL_FRAME_SUM = sum(INITIAL_CALL_FRAME) & 0xFF


@dataclass
class ChecksumAnalysis:
    """
    Result of analyzing an image checksum.

    Attributes:
        is_valid: True if the checksummed range sums to zero
        stored_checksum: The checksum byte stored at offset 5
        calculated_checksum: The checksum byte that would make the image valid
        range_end: Exclusive end of the checksummed range
        includes_call_frame: True if the implicit call frame was summed
        message: Human-readable explanation of the analysis
    """
    is_valid: bool
    stored_checksum: int
    calculated_checksum: int
    range_end: int = 0
    includes_call_frame: bool = False
    message: str = ""


def additive_sum(data: bytes, start: int = 0, end: int | None = None) -> int:
    """
    Sum bytes modulo 256.

    Example:
        >>> additive_sum(bytes([0xFF, 0x02]))
        1
    """
    if end is None:
        end = len(data)
    return sum(data[start:end]) & 0xFF


def checksum_range_end(data: bytes, image_type: ImageType) -> int:
    """
    Get the exclusive end of the checksummed range.

    For binary images this is the start-of-variables pointer, falling back
    to the buffer length when the pointer is unreadable, points into the
    header, or points past the end of the buffer.
    """
    if image_type != ImageType.BINARY:
        return len(data)

    if len(data) < OFFSET_START_OF_VARIABLES + WORD:
        return len(data)

    end_of_code = int.from_bytes(
        data[OFFSET_START_OF_VARIABLES:OFFSET_START_OF_VARIABLES + WORD], "little"
    )
    if HEADER_SIZE <= end_of_code <= len(data):
        return end_of_code
    return len(data)


def checksum_bias(image_type: ImageType) -> int:
    """Get the sum of bytes the chip adds outside the buffer (call frame)."""
    return CALL_FRAME_SUM if image_type == ImageType.BINARY else 0


def range_sum(data: bytes, image_type: ImageType) -> int:
    """Sum the checksummed range of an image, including any implicit bytes."""
    end = checksum_range_end(data, image_type)
    return (additive_sum(data, 0, end) + checksum_bias(image_type)) & 0xFF


def calculate_checksum(data: bytes, image_type: ImageType) -> int:
    """
    Calculate the checksum byte that makes the image sum to zero.

    The current value of the checksum byte is ignored.

    Raises:
        ValueError: If the buffer is too short to hold the checksum byte
    """
    if len(data) <= OFFSET_CHECKSUM:
        raise ValueError(
            f"Image too short: need at least {OFFSET_CHECKSUM + 1} bytes, got {len(data)}"
        )

    without_checksum = (range_sum(data, image_type) - data[OFFSET_CHECKSUM]) & 0xFF
    return (-without_checksum) & 0xFF


def verify_checksum(data: bytes, image_type: ImageType) -> bool:
    """
    Verify an image checksum.

    Returns:
        True if the checksummed range sums to zero, False otherwise
        (including buffers too short to hold the checksum byte)
    """
    if len(data) <= OFFSET_CHECKSUM:
        return False
    return range_sum(data, image_type) == 0


def analyze_checksum(data: bytes, image_type: ImageType) -> ChecksumAnalysis:
    """
    Analyze an image checksum.

    Example:
        >>> analysis = analyze_checksum(image_bytes, ImageType.BINARY)
        >>> if not analysis.is_valid:
        ...     print(analysis.message)
    """
    if len(data) <= OFFSET_CHECKSUM:
        return ChecksumAnalysis(
            is_valid=False,
            stored_checksum=0,
            calculated_checksum=0,
            message=f"Image too short (need {OFFSET_CHECKSUM + 1} bytes)",
        )

    stored = data[OFFSET_CHECKSUM]
    calculated = calculate_checksum(data, image_type)
    end = checksum_range_end(data, image_type)
    frame = image_type == ImageType.BINARY

    if stored == calculated:
        message = "Checksum valid"
    else:
        message = f"Checksum mismatch: stored 0x{stored:02X}, calculated 0x{calculated:02X}"

    return ChecksumAnalysis(
        is_valid=stored == calculated,
        stored_checksum=stored,
        calculated_checksum=calculated,
        range_end=end,
        includes_call_frame=frame,
        message=message,
    )
