"""
CGGTTS track model.

A track is the reduction of one satellite observed during one
common-view period: clock offsets and their slopes at the track
midpoint, modeled delays and, for dual frequency stations, measured
ionospheric delays.

Time quantities (REFSV, REFSYS, DSG, MDTR, MDIO, MSIO, ISG) are stored in
seconds, rates (SRSV, SRSYS, SMDT, SMDI, SMSI) in s/s, angles in degrees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum

from pycggtts.utils.dates import ensure_utc, mjd_day
from pycggtts.utils.gnss import SV, Constellation


BIPM_TRACKING_DURATION = timedelta(seconds=780)


class CommonViewClass(str, Enum):
    """Track class (CL field)."""

    SINGLE_CHANNEL = "99"
    MULTI_CHANNEL = "FF"

    @classmethod
    def from_str(cls, text: str) -> "CommonViewClass":
        """Parse a CL token ('99' or 'FF', case-insensitive).

        Raises:
            ValueError: On any other token
        """
        return cls(text.strip().upper())


@dataclass(frozen=True)
class GlonassChannel:
    """GLONASS FDMA frequency channel (FR field, hexadecimal on the wire).

    ``channel`` is None when not applicable (non GLONASS tracks), which
    is written as 0.
    """

    channel: int | None = None

    def __post_init__(self):
        if self.channel is not None and not 1 <= self.channel <= 0xFF:
            raise ValueError(f"invalid GLONASS channel: {self.channel}")

    @classmethod
    def unknown(cls) -> "GlonassChannel":
        return cls(None)

    @classmethod
    def number(cls, channel: int) -> "GlonassChannel":
        return cls(channel)

    @classmethod
    def parse(cls, text: str) -> "GlonassChannel":
        """Parse a hexadecimal FR token. 0 means not applicable.

        Raises:
            ValueError: If text is not a channel number
        """
        value = int(text.strip(), 16)
        if value == 0:
            return cls.unknown()
        return cls.number(value)

    @property
    def is_unknown(self) -> bool:
        return self.channel is None

    def __str__(self) -> str:
        return f"{self.channel or 0:X}"


@dataclass(frozen=True)
class TrackData:
    """Clock and tropospheric fields of a track.

    Attributes:
        refsv: Local clock minus satellite clock at midpoint (s)
        srsv: Slope of refsv (s/s)
        refsys: Local clock minus GNSS system time at midpoint (s)
        srsys: Slope of refsys (s/s)
        dsg: Root mean square of the refsys fit residuals (s)
        ioe: Issue of ephemeris
        mdtr: Modeled tropospheric delay (s)
        smdt: Slope of mdtr (s/s)
        mdio: Modeled ionospheric delay (s)
        smdi: Slope of mdio (s/s)
    """

    refsv: float = 0.0
    srsv: float = 0.0
    refsys: float = 0.0
    srsys: float = 0.0
    dsg: float = 0.0
    ioe: int = 0
    mdtr: float = 0.0
    smdt: float = 0.0
    mdio: float = 0.0
    smdi: float = 0.0

    def __post_init__(self):
        if not 0 <= self.ioe <= 999:
            raise ValueError(f"IOE out of range: {self.ioe}")
        for name in ("refsv", "srsv", "refsys", "srsys", "dsg", "mdtr", "smdt", "mdio", "smdi"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} is not finite")


@dataclass(frozen=True)
class IonosphericData:
    """Measured ionospheric delay (dual frequency stations only).

    Attributes:
        msio: Measured ionospheric delay (s)
        smsi: Slope of msio (s/s)
        isg: Root mean square of the msio fit residuals (s)
    """

    msio: float = 0.0
    smsi: float = 0.0
    isg: float = 0.0

    def __post_init__(self):
        for name in ("msio", "smsi", "isg"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} is not finite")


@dataclass(frozen=True)
class Track:
    """A CGGTTS track.

    Attributes:
        sv: Tracked satellite (PRN 99 for combinations)
        cv_class: Single or multi channel (CL field)
        epoch: Track start time, UTC
        duration: Tracking duration
        elevation_deg: Elevation at midpoint (degrees)
        azimuth_deg: Azimuth at midpoint (degrees)
        frc: Carrier code mnemonic (FRC), e.g. 'L1C', 'E5a'
        data: Clock and tropospheric fields
        iono: Ionospheric fields, dual frequency only
        fdma_channel: GLONASS frequency channel (FR)
        hc: Receiver hardware channel (HC)
    """

    sv: SV
    cv_class: CommonViewClass
    epoch: datetime
    duration: timedelta
    elevation_deg: float
    azimuth_deg: float
    frc: str
    data: TrackData = field(default_factory=TrackData)
    iono: IonosphericData | None = None
    fdma_channel: GlonassChannel = field(default_factory=GlonassChannel.unknown)
    hc: int = 0

    def __post_init__(self):
        object.__setattr__(self, "epoch", ensure_utc(self.epoch))
        if self.duration <= timedelta(0):
            raise ValueError(f"track duration must be positive: {self.duration}")
        if self.iono is not None and self.cv_class != CommonViewClass.MULTI_CHANNEL:
            raise ValueError("ionospheric data requires a multi channel track")
        if not 0 <= self.hc <= 0xFF:
            raise ValueError(f"invalid hardware channel: {self.hc}")
        if not 1 <= len(self.frc) <= 3 or not self.frc.isascii() or not self.frc.isalnum():
            raise ValueError(f"invalid carrier code: {self.frc!r}")
        if not (math.isfinite(self.elevation_deg) and math.isfinite(self.azimuth_deg)):
            raise ValueError("elevation and azimuth must be finite")

    @property
    def mjd(self) -> int:
        """MJD of the track start."""
        return mjd_day(self.epoch)

    def uses_constellation(self, constellation: Constellation) -> bool:
        return self.sv.constellation == constellation

    def follows_bipm_specs(self) -> bool:
        """True when the tracking duration is the BIPM 780 s."""
        return self.duration == BIPM_TRACKING_DURATION

    def has_ionospheric_data(self) -> bool:
        return self.iono is not None

    @property
    def is_melting_pot(self) -> bool:
        """True for tracks combining several satellites."""
        return self.sv.is_melting_pot

    def with_sv(self, sv: SV) -> "Track":
        return replace(self, sv=sv)

    def with_elevation(self, elevation_deg: float) -> "Track":
        return replace(self, elevation_deg=elevation_deg)

    def with_azimuth(self, azimuth_deg: float) -> "Track":
        return replace(self, azimuth_deg=azimuth_deg)

    def with_carrier_code(self, frc: str) -> "Track":
        return replace(self, frc=frc)

    def with_ionospheric_data(self, iono: IonosphericData | None) -> "Track":
        return replace(self, iono=iono)

    def __str__(self) -> str:
        from pycggtts.track.formatter import format_track

        return format_track(self)
