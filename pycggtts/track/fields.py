"""
Numeric columns of a track line.

Every scaled column is described once here (scale, width, saturation and
signedness); the track reader and writer both go through this table.

Saturation keeps the column layout when a value does not fit: unsigned
columns clamp into [0, M], signed columns into [-M/10, M] (one digit is
reserved for the sign).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pycggtts.core.exceptions import FormattingError


def round_half_away(value: float) -> int:
    """Round to nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ScaledField:
    """Description of one scaled integer column.

    Attributes:
        name: Column label
        scale: Multiplier from stored value to wire integer
        width: Column width (right aligned)
        saturation: Largest representable wire integer
        signed: Whether negative values are representable
    """

    name: str
    scale: float
    width: int
    saturation: int
    signed: bool

    def parse(self, token: str) -> float:
        """Convert a wire integer into the stored value.

        Raises:
            ValueError: If token is not an integer
        """
        value = int(token)
        if self.scale == 1.0:
            return float(value)
        return value / self.scale

    def to_wire(self, value: float) -> int:
        """Scale, round and saturate value."""
        if math.isnan(value):
            raise FormattingError(f"{self.name} is NaN")
        scaled = value * self.scale
        if math.isinf(scaled):
            scaled = math.copysign(self.saturation, scaled)
        integer = round_half_away(scaled)
        if integer < 0:
            if not self.signed:
                return 0
            return max(integer, -(self.saturation // 10))
        return min(integer, self.saturation)

    def format(self, value: float) -> str:
        """Right-aligned, saturated wire representation of value."""
        return f"{self.to_wire(value):>{self.width}}"


# Scale factors
DEGREES = 10.0      # 0.1 degree
NANOS = 1e10        # 0.1 ns
PICOS_S = 1e13      # 0.1 ps/s

TRKL = ScaledField("TRKL", 1.0, 4, 9_999, False)
ELV = ScaledField("ELV", DEGREES, 3, 999, False)
AZTH = ScaledField("AZTH", DEGREES, 4, 9_999, False)
REFSV = ScaledField("REFSV", NANOS, 11, 99_999_999_999, True)
SRSV = ScaledField("SRSV", PICOS_S, 6, 999_999, True)
REFSYS = ScaledField("REFSYS", NANOS, 11, 99_999_999_999, True)
SRSYS = ScaledField("SRSYS", PICOS_S, 6, 999_999, True)
DSG = ScaledField("DSG", NANOS, 4, 9_999, False)
IOE = ScaledField("IOE", 1.0, 3, 999, False)
MDTR = ScaledField("MDTR", NANOS, 4, 9_999, False)
SMDT = ScaledField("SMDT", PICOS_S, 4, 9_999, True)
MDIO = ScaledField("MDIO", NANOS, 4, 9_999, False)
SMDI = ScaledField("SMDI", PICOS_S, 4, 9_999, True)
MSIO = ScaledField("MSIO", NANOS, 4, 9_999, False)
# narrower than its saturation, as found in published files
SMSI = ScaledField("SMSI", PICOS_S, 4, 999_999, True)
ISG = ScaledField("ISG", NANOS, 3, 9_999, False)


# Column labels and units written after the header
LABELS_WITH_IONO = (
    "SAT CL  MJD  STTIME TRKL ELV AZTH   REFSV      SRSV     REFSYS    SRSYS "
    "DSG IOE MDTR SMDT MDIO SMDI MSIO SMSI ISG FR HC FRC CK"
)
UNITS_WITH_IONO = (
    "             hhmmss  s  .1dg .1dg    .1ns     .1ps/s     .1ns    .1ps/s "
    ".1ns     .1ns.1ps/s.1ns.1ps/s.1ns.1ps/s.1ns"
)
LABELS_WITHOUT_IONO = (
    "SAT CL  MJD  STTIME TRKL ELV AZTH   REFSV      SRSV     REFSYS    SRSYS  "
    "DSG IOE MDTR SMDT MDIO SMDI FR HC FRC CK"
)
UNITS_WITHOUT_IONO = (
    "             hhmmss  s  .1dg .1dg    .1ns     .1ps/s     .1ns    .1ps/s "
    ".1ns     .1ns.1ps/s.1ns.1ps/s"
)
