"""
Propeller Image Error Hierarchy
===============================

This module defines the exception hierarchy for the Propeller image toolkit.
All exceptions inherit from PropellerError, allowing callers to catch all
toolkit errors with a single except clause if desired.

Exception Hierarchy
-------------------
PropellerError (base)
└── ImageError (application image handling)
    ├── OutOfRangeError - read/write past the end of the buffer
    ├── InvalidHeaderError - bad start-of-code or negative region size
    ├── ChecksumMismatchError - additive checksum does not reduce to zero
    └── UnknownClockModeError - clock mode byte outside the recognized set

Every error is recoverable. The image model never retries internally and
leaves the buffer untouched when a write fails.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PropellerError(Exception):
    """
    Base exception for all Propeller image toolkit errors.

        try:
            image.validate()
        except PropellerError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Image Exceptions
# =============================================================================

class ImageError(PropellerError):
    """Base exception for application image errors."""
    pass


class OutOfRangeError(ImageError):
    """
    Field access outside the image buffer.

    Raised when `pos + width` exceeds the current image size, or when the
    position is negative. Short (malformed) buffers surface this error from
    every header accessor instead of reading garbage.

    Attributes:
        pos: Requested byte offset
        width: Field width in bytes (1, 2 or 4)
        size: Image size at the time of the access
    """

    def __init__(self, pos: int, width: int, size: int, message: str = ""):
        self.pos = pos
        self.width = width
        self.size = size
        if not message:
            message = (
                f"{width}-byte access at offset {pos} is out of range "
                f"for a {size}-byte image"
            )
        super().__init__(message)


class InvalidHeaderError(ImageError):
    """
    The image header does not describe a well-formed application.

    Raised when:
    - Start-of-code pointer is not $0010
    - Start of variables precedes start of code
    - Start of stack space precedes start of variables
    - Start of stack space lies beyond the end of the image
    """
    pass


class ChecksumMismatchError(ImageError):
    """
    Additive checksum does not reduce to zero.

    Attributes:
        stored: Checksum byte currently at offset 5
        expected: Checksum byte that would make the image valid
    """

    def __init__(self, stored: int, expected: int, message: str = ""):
        self.stored = stored
        self.expected = expected
        if not message:
            message = (
                f"checksum mismatch: stored 0x{stored:02X}, "
                f"expected 0x{expected:02X}"
            )
        super().__init__(message)


class UnknownClockModeError(ImageError):
    """
    Clock mode byte is not one of the recognized P8X32A settings.

    Attributes:
        value: The offending clock mode byte
        hint: Optional suggestion shown after the message
    """

    def __init__(self, value: int, hint: Optional[str] = None):
        self.value = value
        self.hint = hint
        message = f"unknown clock mode 0x{value:02X}"
        if hint:
            message = f"{message}\nhint: {hint}"
        super().__init__(message)
