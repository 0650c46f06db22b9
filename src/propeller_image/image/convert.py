"""
Binary / EEPROM Image Conversion
================================

Converts between the two image variants:

- **to_eeprom**: lays a binary image out the way the chip does after a
  download. Code is copied, the rest of the 32 KB is zero, and the
  initial call frame is written just below the stack space.
- **to_binary**: keeps long 0 through end of code of an EEPROM image.

Both conversions return a new image with a recalculated checksum and
leave the source image untouched.

Copyright (c) 2026 The propeller-image Contributors
"""

import logging

from propeller_image.errors import InvalidHeaderError
from propeller_image.image.layout import (
    EEPROM_SIZE,
    INITIAL_CALL_FRAME,
    ImageType,
)
from propeller_image.image.model import PropellerImage

logger = logging.getLogger(__name__)


def _require_type(image: PropellerImage, expected: ImageType) -> None:
    actual = image.image_type()
    if actual != expected:
        raise InvalidHeaderError(
            f"expected {expected.get_description()} image, got {actual.get_description()}"
        )


def to_eeprom(image: PropellerImage) -> PropellerImage:
    """
    Convert a binary image to a full EEPROM image.

    Args:
        image: A binary image with a well-formed header

    Returns:
        A new 32 KB EEPROM image with a valid checksum

    Raises:
        OutOfRangeError: If the header is truncated
        InvalidHeaderError: If the image is not a binary image, or the stack
            space pointer leaves no room for the call frame
    """
    _require_type(image, ImageType.BINARY)

    code = image.download_data()
    stack_space = image.start_of_stack_space()
    frame_start = stack_space - len(INITIAL_CALL_FRAME)

    # The frame must sit above the code, inside hub RAM
    if frame_start < len(code) or stack_space > EEPROM_SIZE:
        raise InvalidHeaderError(
            f"start of stack space (0x{stack_space:04X}) leaves no room for "
            f"the initial call frame"
        )

    eeprom = bytearray(EEPROM_SIZE)
    eeprom[:len(code)] = code
    eeprom[frame_start:stack_space] = INITIAL_CALL_FRAME

    result = PropellerImage(eeprom, image.file_name())
    result.recalculate_checksum()
    logger.info(
        f"Converted '{image.file_name()}' to EEPROM "
        f"({len(code)} bytes of code, call frame at 0x{frame_start:04X})"
    )
    return result


def to_binary(image: PropellerImage) -> PropellerImage:
    """
    Convert an EEPROM image to a binary image.

    Args:
        image: A 32 KB EEPROM image with a well-formed header

    Returns:
        A new binary image holding long 0 through end of code, with a
        checksum recalculated for the binary convention

    Raises:
        OutOfRangeError: If the header is truncated
        InvalidHeaderError: If the image is not an EEPROM image or its
            code region is malformed
    """
    _require_type(image, ImageType.EEPROM)

    code = image.download_data()
    result = PropellerImage(code, image.file_name())
    result.recalculate_checksum()
    logger.info(f"Converted '{image.file_name()}' to binary ({len(code)} bytes)")
    return result


def convert(image: PropellerImage) -> PropellerImage:
    """
    Convert an image to the other variant.

    Raises:
        InvalidHeaderError: If the image is neither binary nor EEPROM
    """
    image_type = image.image_type()
    if image_type == ImageType.BINARY:
        return to_eeprom(image)
    if image_type == ImageType.EEPROM:
        return to_binary(image)
    raise InvalidHeaderError(f"cannot convert invalid image '{image.file_name()}'")
