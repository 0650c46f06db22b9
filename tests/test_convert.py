"""
Image Conversion Unit Tests
===========================

Tests for binary to EEPROM conversion and back.
"""

import logging

import pytest

from propeller_image.errors import InvalidHeaderError
from propeller_image.image import (
    EEPROM_SIZE,
    INITIAL_CALL_FRAME,
    ImageType,
    PropellerImage,
    convert,
    to_binary,
    to_eeprom,
)


@pytest.fixture
def eeprom_image(binary_image) -> PropellerImage:
    """Fixture: the EEPROM layout of the test binary."""
    return to_eeprom(binary_image)


class TestToEeprom:
    """Tests for to_eeprom()."""

    def test_size_and_type(self, eeprom_image):
        assert eeprom_image.image_size() == EEPROM_SIZE
        assert eeprom_image.image_type() == ImageType.EEPROM

    def test_layout(self, eeprom_image, binary_data):
        """Code is copied, the call frame sits below the stack space, the rest is zero."""
        data = eeprom_image.data()
        assert data[:len(binary_data)] == binary_data
        assert data[0x30:0x38] == INITIAL_CALL_FRAME
        assert data[0x38:] == bytes(EEPROM_SIZE - 0x38)

    def test_checksum_preserved(self, eeprom_image, binary_image):
        """A valid binary converts to a valid EEPROM with the same checksum byte."""
        assert eeprom_image.is_valid()
        assert eeprom_image.checksum() == binary_image.checksum()

    def test_keeps_label_and_source(self, binary_image, binary_data):
        result = to_eeprom(binary_image)
        assert result.file_name() == "test.binary"
        assert binary_image.data() == binary_data

    def test_no_room_for_call_frame(self, make_binary):
        image = PropellerImage(make_binary(variables=0))
        with pytest.raises(InvalidHeaderError, match="call frame"):
            to_eeprom(image)

    def test_requires_binary(self, eeprom_image):
        with pytest.raises(InvalidHeaderError, match="expected Program"):
            to_eeprom(eeprom_image)

    def test_logs(self, binary_image, caplog):
        caplog.set_level(logging.INFO, logger="propeller_image.image.convert")
        to_eeprom(binary_image)
        assert "Converted 'test.binary' to EEPROM" in caplog.text


class TestToBinary:
    """Tests for to_binary()."""

    def test_round_trip(self, eeprom_image, binary_data):
        result = to_binary(eeprom_image)
        assert result.image_type() == ImageType.BINARY
        assert result.data() == binary_data

    def test_recalculates_checksum(self, eeprom_image):
        """Data in the variable area does not leak into the binary checksum."""
        eeprom_image.write_long(0x1000, 0x12345678)
        eeprom_image.recalculate_checksum()
        result = to_binary(eeprom_image)
        assert result.is_valid()
        assert result.image_size() == 0x30

    def test_requires_eeprom(self, binary_image):
        with pytest.raises(InvalidHeaderError):
            to_binary(binary_image)

    def test_malformed_header(self):
        with pytest.raises(InvalidHeaderError):
            to_binary(PropellerImage(bytes(EEPROM_SIZE)))


class TestConvert:
    """Tests for convert()."""

    def test_direction_follows_input(self, binary_image):
        eeprom = convert(binary_image)
        assert eeprom.image_type() == ImageType.EEPROM
        assert convert(eeprom).image_type() == ImageType.BINARY

    def test_invalid(self):
        with pytest.raises(InvalidHeaderError, match="cannot convert"):
            convert(PropellerImage(b"junk"))
