"""
GNSS constellation and satellite identification.

CGGTTS identifies the tracked vehicle with a constellation letter followed
by a two-digit PRN (e.g. 'G03', 'R24', 'E08'). PRN 99 denotes a combination
of several satellites ("melting pot") of the same constellation.

Usage:
    from pycggtts.utils.gnss import Constellation, SV

    sv = SV.parse("E08")
    assert sv.constellation == Constellation.GALILEO
    assert str(sv) == "E08"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# GNSS Constellation Definitions
# =============================================================================

class Constellation(str, Enum):
    """GNSS satellite constellations."""

    GPS = "G"        # US Global Positioning System
    GLONASS = "R"    # Russian GLONASS
    GALILEO = "E"    # European Galileo
    BEIDOU = "C"     # Chinese BeiDou
    QZSS = "J"       # Japanese QZSS
    SBAS = "S"       # SBAS (WAAS, EGNOS, MSAS, GAGAN)
    IRNSS = "I"      # Indian IRNSS/NavIC
    MIXED = "M"      # Multi-constellation

    @property
    def short_name(self) -> str:
        """Three-letter name used in header delay lines (e.g. 'GAL')."""
        return _SHORT_NAMES[self]

    @classmethod
    def from_str(cls, text: str) -> "Constellation":
        """Parse a constellation from its letter or its name.

        Accepts 'G', 'GPS', 'gal', 'Galileo', ...

        Raises:
            ValueError: If text does not name a known constellation
        """
        text = text.strip()
        if not text:
            raise ValueError("empty constellation")
        if len(text) == 1:
            return cls(text.upper())
        upper = text.upper()
        for constellation in cls:
            if upper in (constellation.name, constellation.short_name):
                return constellation
        raise ValueError(f"unknown constellation: {text!r}")


_SHORT_NAMES = {
    Constellation.GPS: "GPS",
    Constellation.GLONASS: "GLO",
    Constellation.GALILEO: "GAL",
    Constellation.BEIDOU: "BDS",
    Constellation.QZSS: "QZS",
    Constellation.SBAS: "SBS",
    Constellation.IRNSS: "IRN",
    Constellation.MIXED: "MIX",
}


# =============================================================================
# Space Vehicle
# =============================================================================

@dataclass(frozen=True, order=True)
class SV:
    """Space vehicle: constellation and PRN number."""

    constellation: Constellation
    prn: int

    MELTING_POT_PRN = 99

    def __post_init__(self):
        if not 0 <= self.prn <= 99:
            raise ValueError(f"PRN out of range: {self.prn}")

    @classmethod
    def parse(cls, text: str) -> "SV":
        """Parse SV string to constellation and number.

        Args:
            text: SV string (e.g., 'G01', 'R05', 'E 8')

        Raises:
            ValueError: If the string is not a valid SV
        """
        text = text.strip()
        if len(text) < 2:
            raise ValueError(f"invalid SV: {text!r}")
        constellation = Constellation(text[0].upper())
        prn_str = text[1:].strip()
        if not prn_str.isdigit():
            raise ValueError(f"invalid SV: {text!r}")
        return cls(constellation, int(prn_str))

    @property
    def is_melting_pot(self) -> bool:
        """True for combined-satellite tracks (PRN 99)."""
        return self.prn == self.MELTING_POT_PRN

    def __str__(self) -> str:
        return f"{self.constellation.value}{self.prn:02d}"
