"""
Shared fixtures for the Propeller image tests.

Provides a builder for small, well-formed binary images:

    Offset  Value
    ------  -----
    0       clock frequency (default 80 MHz)
    4       clock mode (default XTAL1+PLL16X, $6F)
    5       checksum (valid unless fix_checksum=False)
    6       $0010
    8       $0010 + len(code)         start of variables
    10      start of variables + variables
    12      $0018                     program pointer
    14      start of stack space + 8  stack pointer
    16      code bytes
"""

import struct

import pytest

from propeller_image.image import PropellerImage


def build_binary(
    code: bytes = bytes(range(1, 33)),
    variables: int = 8,
    clock_frequency: int = 80_000_000,
    clock_mode: int = 0x6F,
    fix_checksum: bool = True,
) -> bytes:
    """Build raw binary image bytes ending at the start of variables."""
    start_of_variables = 0x10 + len(code)
    start_of_stack = start_of_variables + variables
    header = struct.pack(
        "<IBBHHHHH",
        clock_frequency,
        clock_mode,
        0,
        0x0010,
        start_of_variables,
        start_of_stack,
        0x0018,
        start_of_stack + 8,
    )
    data = bytearray(header + code)
    if fix_checksum:
        # Binary checksum includes the call frame the chip inserts (0xEC)
        data[5] = (-(sum(data) + 0xEC)) & 0xFF
    return bytes(data)


@pytest.fixture
def make_binary():
    """Fixture: the build_binary() factory."""
    return build_binary


@pytest.fixture
def binary_data() -> bytes:
    """Fixture: raw bytes of a valid 48-byte binary image."""
    return build_binary()


@pytest.fixture
def binary_image(binary_data: bytes) -> PropellerImage:
    """Fixture: a valid binary image."""
    return PropellerImage(binary_data, "test.binary")
