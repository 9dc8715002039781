"""Tests for constellation and satellite identifiers."""

import pytest

from pycggtts.utils.gnss import SV, Constellation


class TestConstellation:
    """Tests for Constellation enum."""

    def test_letters(self):
        """Constellations are identified by their RINEX letter."""
        assert Constellation.GPS == "G"
        assert Constellation.GLONASS == "R"
        assert Constellation.GALILEO == "E"
        assert Constellation.BEIDOU == "C"

    def test_from_str_letter_and_name(self):
        """Letters, names and short names are accepted."""
        assert Constellation.from_str("e") == Constellation.GALILEO
        assert Constellation.from_str("GAL") == Constellation.GALILEO
        assert Constellation.from_str("galileo") == Constellation.GALILEO
        assert Constellation.from_str("BDS") == Constellation.BEIDOU

    def test_from_str_invalid(self):
        """Unknown constellations raise ValueError."""
        with pytest.raises(ValueError):
            Constellation.from_str("X")
        with pytest.raises(ValueError):
            Constellation.from_str("")

    def test_short_name(self):
        """Short names are used in delay lines."""
        assert Constellation.GPS.short_name == "GPS"
        assert Constellation.GALILEO.short_name == "GAL"


class TestSV:
    """Tests for SV identity."""

    def test_parse(self):
        """SV tokens parse into constellation and PRN."""
        sv = SV.parse("E08")
        assert sv.constellation == Constellation.GALILEO
        assert sv.prn == 8

    def test_str_two_digits(self):
        """PRN is written with two digits."""
        assert str(SV(Constellation.GPS, 3)) == "G03"
        assert str(SV.parse("R24")) == "R24"

    def test_melting_pot(self):
        """PRN 99 denotes combined satellites."""
        assert SV.parse("G99").is_melting_pot
        assert not SV.parse("G08").is_melting_pot

    def test_invalid(self):
        """Malformed SV tokens raise ValueError."""
        for text in ("G", "X01", "G1a", "G100"):
            with pytest.raises(ValueError):
                SV.parse(text)

    def test_ordering(self):
        """SVs sort by constellation then PRN."""
        svs = [SV.parse("G08"), SV.parse("E03"), SV.parse("G03")]
        assert [str(s) for s in sorted(svs)] == ["E03", "G03", "G08"]
