"""Tests for the CGGTTS checksum."""

import pytest

from pycggtts.core.exceptions import NonAsciiError
from pycggtts.utils.crc import calc_crc, ensure_ascii, format_crc, parse_crc


class TestCalcCrc:
    """Test checksum computation."""

    def test_glonass_track_line(self):
        """Known checksum of a GLONASS track line."""
        line = (
            "R24 FF 57000 000600  780 347 394 +1186342 +0 163 +0 40 2 141 "
            "+22 23 -1 23 -1 29 +2 0 L3P"
        )
        assert calc_crc(line) == 0x0F

    def test_gps_melting_pot_line(self):
        """Known checksum of a GPS combined-satellites track line."""
        line = (
            "G99 99 59509 002200 0780 099 0099 +9999999999 +99999 "
            "+9999989831   -724    35 999 9999 +999 9999 +999 00 00 L1C"
        )
        assert calc_crc(line) == 0x71

    def test_track_line_with_separator(self):
        """The space preceding CK is part of the checksummed content."""
        line = (
            "E03 FF 60258 001000  780 139  548      723788     14        -302    -14"
            "    2  76  325  -36   32   -3   20   20   3  0  0  E1 "
        )
        assert calc_crc(line) == 0x74

    def test_line_terminators_excluded(self):
        """CR and LF never contribute to the checksum."""
        assert calc_crc("ABC\r\n") == calc_crc("ABC")
        assert calc_crc("A\nB\nC") == calc_crc("ABC")

    def test_modulo_256(self):
        """Sum wraps around at 256."""
        assert calc_crc("\x7f\x7f\x02") == 0
        assert calc_crc("") == 0

    def test_bytes_input(self):
        """Bytes are accepted as well as text."""
        assert calc_crc(b"ABC") == calc_crc("ABC") == (65 + 66 + 67)

    def test_non_ascii_rejected(self):
        """Non-ASCII content raises NonAsciiError."""
        with pytest.raises(NonAsciiError):
            calc_crc("LAB = Besançon")
        with pytest.raises(NonAsciiError):
            calc_crc(b"\xe9")


class TestCrcFormatting:
    """Test checksum text conversion."""

    def test_format_two_digits(self):
        """Checksums are written as two upper-case hex digits."""
        assert format_crc(0x0F) == "0F"
        assert format_crc(0xC7) == "C7"
        assert format_crc(0) == "00"

    def test_parse_hex(self):
        """Upper and lower case hex are accepted."""
        assert parse_crc("C7") == 0xC7
        assert parse_crc("c7") == 0xC7
        assert parse_crc(" 0F ") == 0x0F

    def test_parse_invalid(self):
        """Non-hexadecimal checksums are rejected."""
        for text in ("", "G1", "123", "0x1"):
            with pytest.raises(ValueError):
                parse_crc(text)

    def test_ensure_ascii(self):
        """ensure_ascii returns bytes for ASCII text."""
        assert ensure_ascii("CK") == b"CK"
