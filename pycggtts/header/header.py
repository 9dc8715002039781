"""
CGGTTS header model.

The header describes the station: receiver and optional IMS hardware,
antenna phase center coordinates, reference timescale and the delays of
the measurement chain. Headers are immutable; the ``with_*`` builder
methods return modified copies.

Usage:
    from pycggtts.header import Coordinates, Hardware, Header, ReferenceTime

    header = (
        Header()
        .with_station("SY82")
        .with_channels(12)
        .with_receiver_hardware(Hardware("GORGYTIMING", "SYREF25", "18259999", 2018, "v00"))
        .with_apc_coordinates(Coordinates(4314137.334, 452632.813, 4660706.403))
        .with_reference_time(ReferenceTime.custom("REF(SY82)"))
        .with_reference_frame("ITRF")
    )
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date

from pycggtts.header.delay import SystemDelay
from pycggtts.header.hardware import Hardware
from pycggtts.header.reference_time import ReferenceTime
from pycggtts.header.version import Version


@dataclass(frozen=True)
class Coordinates:
    """Antenna phase center ECEF coordinates in meters."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        if not all(math.isfinite(v) for v in (self.x, self.y, self.z)):
            raise ValueError(f"non-finite coordinates: {self.x}, {self.y}, {self.z}")


@dataclass(frozen=True)
class Header:
    """CGGTTS file header.

    Attributes:
        version: File format revision
        release_date: REV DATE field
        station: Laboratory/station name (LAB)
        receiver: GNSS receiver hardware (RCVR)
        nb_channels: Number of receiver channels (CH)
        ims: Ionospheric Measurement System hardware (IMS)
        reference_time: Reference timescale (REF)
        reference_frame: Coordinates reference frame (FRAME)
        apc_coordinates: Antenna phase center coordinates (X, Y, Z)
        comments: Free-form comment (COMMENTS)
        delay: Measurement-chain delays
    """

    version: Version = Version.V2E
    release_date: date = field(default_factory=lambda: Version.V2E.release_date)
    station: str = "LAB"
    receiver: Hardware | None = None
    nb_channels: int = 0
    ims: Hardware | None = None
    reference_time: ReferenceTime = field(default_factory=ReferenceTime.utc)
    reference_frame: str | None = None
    apc_coordinates: Coordinates = field(default_factory=Coordinates)
    comments: str | None = None
    delay: SystemDelay = field(default_factory=SystemDelay)

    def __post_init__(self):
        if not self.station.strip():
            raise ValueError("station name must not be empty")
        if not self.station.isascii():
            raise ValueError(f"station name is not ASCII: {self.station!r}")
        for name in ("station", "comments", "reference_frame"):
            value = getattr(self, name)
            if value is not None and ("\n" in value or "\r" in value):
                raise ValueError(f"header {name} contains a line break")
        if not 0 <= self.nb_channels <= 0xFFFF:
            raise ValueError(f"invalid number of channels: {self.nb_channels}")

    def with_station(self, station: str) -> "Header":
        return replace(self, station=station)

    def with_comment(self, comment: str) -> "Header":
        return replace(self, comments=comment)

    def with_channels(self, nb_channels: int) -> "Header":
        return replace(self, nb_channels=nb_channels)

    def with_receiver_hardware(self, receiver: Hardware) -> "Header":
        return replace(self, receiver=receiver)

    def with_ims_hardware(self, ims: Hardware) -> "Header":
        return replace(self, ims=ims)

    def with_apc_coordinates(self, apc: Coordinates) -> "Header":
        return replace(self, apc_coordinates=apc)

    def with_reference_time(self, reference: ReferenceTime) -> "Header":
        return replace(self, reference_time=reference)

    def with_reference_frame(self, frame: str) -> "Header":
        return replace(self, reference_frame=frame)

    def with_delay(self, delay: SystemDelay) -> "Header":
        return replace(self, delay=delay)
