"""
P8X32A Clock Mode Settings
==========================

The clock mode byte (offset 4 of the image header) is copied into the CLK
register at boot. Its bits select the clock source and the PLL multiplier:

    Bit 7:    RESET (always 0 in an image)
    Bit 6:    PLLENA - enable the PLL
    Bit 5:    OSCENA - enable the crystal oscillator
    Bits 4-3: OSCM   - oscillator gain (XINPUT, XTAL1, XTAL2, XTAL3)
    Bits 2-0: CLKSEL - RCFAST, RCSLOW, XINPUT, PLL1X .. PLL16X

Only the combinations below are meaningful. Every other byte value is an
unknown clock mode.

Reference
---------
- Propeller Manual v1.2, "CLK Register" and "_CLKMODE"

Copyright (c) 2026 The propeller-image Contributors
"""

from enum import IntEnum

from propeller_image.errors import UnknownClockModeError


# Returned by ClockMode.name_of() for unrecognized codes
UNKNOWN_CLOCK_MODE = "UNKNOWN"


class ClockMode(IntEnum):
    """Recognized clock mode codes."""
    RCFAST = 0x00
    RCSLOW = 0x01

    XINPUT = 0x22
    XTAL1 = 0x2A
    XTAL2 = 0x32
    XTAL3 = 0x3A

    XINPUT_PLL1X = 0x63
    XINPUT_PLL2X = 0x64
    XINPUT_PLL4X = 0x65
    XINPUT_PLL8X = 0x66
    XINPUT_PLL16X = 0x67

    XTAL1_PLL1X = 0x6B
    XTAL1_PLL2X = 0x6C
    XTAL1_PLL4X = 0x6D
    XTAL1_PLL8X = 0x6E
    XTAL1_PLL16X = 0x6F

    XTAL2_PLL1X = 0x73
    XTAL2_PLL2X = 0x74
    XTAL2_PLL4X = 0x75
    XTAL2_PLL8X = 0x76
    XTAL2_PLL16X = 0x77

    XTAL3_PLL1X = 0x7B
    XTAL3_PLL2X = 0x7C
    XTAL3_PLL4X = 0x7D
    XTAL3_PLL8X = 0x7E
    XTAL3_PLL16X = 0x7F

    @property
    def text(self) -> str:
        """Name in Spin `_CLKMODE` notation, e.g. "XTAL1+PLL16X"."""
        return self.name.replace("_", "+")

    @classmethod
    def is_known(cls, value: int) -> bool:
        """Check if a byte is a recognized clock mode."""
        return value in cls.__members__.values()

    @classmethod
    def from_code(cls, value: int) -> "ClockMode":
        """
        Convert a clock mode byte to a ClockMode.

        Raises:
            UnknownClockModeError: If the byte is not a recognized mode
        """
        try:
            return cls(value)
        except ValueError:
            raise UnknownClockModeError(
                value, hint=f"recognized modes: {', '.join(list_clock_modes())}"
            ) from None

    @classmethod
    def from_text(cls, text: str) -> "ClockMode":
        """
        Look up a clock mode by its Spin name (case-insensitive).

        Accepts both "XTAL1+PLL16X" and "XTAL1_PLL16X".

        Raises:
            ValueError: If the name is not recognized
        """
        key = text.strip().upper().replace("+", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown clock mode name '{text}'") from None

    @classmethod
    def name_of(cls, value: int) -> str:
        """Get the Spin name of a clock mode byte, or UNKNOWN_CLOCK_MODE."""
        if not cls.is_known(value):
            return UNKNOWN_CLOCK_MODE
        return cls(value).text


def list_clock_modes() -> list[str]:
    """Get all recognized clock mode names in code order."""
    return [mode.text for mode in ClockMode]
