"""
Propeller Image Toolkit - Configuration
=======================================

Tool configuration for the command-line interface. Configuration can
come from:
- Default values (defined here)
- Environment variables

The image model itself takes no configuration: the header layout and
the checksummed ranges are fixed by the hardware.

Copyright (c) 2026 The propeller-image Contributors
"""

from dataclasses import dataclass
from pathlib import Path
import logging
import os

from propeller_image.image.layout import ImageType


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ToolConfig:
    """
    Configuration for the propimg tool.

    Attributes:
        log_level: Logging level name (default: "WARNING")
        recalculate_after_edit: Recalculate the checksum after editing
            clock settings (default: True)
        binary_suffix: File suffix for binary images
        eeprom_suffix: File suffix for EEPROM images
    """

    log_level: str = "WARNING"
    recalculate_after_edit: bool = True
    binary_suffix: str = ".binary"
    eeprom_suffix: str = ".eeprom"

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "ToolConfig":
        """
        Create ToolConfig from environment variables.

        Environment variables (all optional):
            PROPIMG_LOG_LEVEL: Logging level name (e.g., "DEBUG")
            PROPIMG_RECALCULATE: "1"/"0" (or true/false) to toggle checksum
                recalculation after edits

        Returns:
            ToolConfig with values from environment variables
        """
        config = cls()

        if level := os.environ.get("PROPIMG_LOG_LEVEL"):
            if level.upper() in _LOG_LEVELS:
                config.log_level = level.upper()

        if recalculate := os.environ.get("PROPIMG_RECALCULATE"):
            value = recalculate.strip().lower()
            if value in _TRUE_VALUES:
                config.recalculate_after_edit = True
            elif value in _FALSE_VALUES:
                config.recalculate_after_edit = False

        return config

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def logging_level(self) -> int:
        """Get the numeric logging level."""
        return getattr(logging, self.log_level, logging.WARNING)

    def suffix_for(self, image_type: ImageType) -> str:
        """Get the file suffix for an image type."""
        if image_type == ImageType.EEPROM:
            return self.eeprom_suffix
        return self.binary_suffix

    def output_path_for(self, path: Path, image_type: ImageType) -> Path:
        """Derive an output path for an image of the given type."""
        return path.with_suffix(self.suffix_for(image_type))
