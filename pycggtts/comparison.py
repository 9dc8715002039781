"""
Common-view clock comparison.

Two stations observing the same satellite at the same time each report
REFSYS (local clock minus GNSS system time). Their difference cancels the
satellite and system clocks and leaves local clock A minus local clock B.

Usage:
    from pycggtts import CGGTTS
    from pycggtts.comparison import average_by_epoch, common_view_differences

    local = CGGTTS.from_path("GZSY8259.568")
    remote = CGGTTS.from_path("GZOP0159.568")
    diffs = common_view_differences(local, remote)
    for epoch, offset in average_by_epoch(diffs):
        print(epoch, offset * 1e9, "ns")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import numpy as np

from pycggtts.cggtts import CGGTTS
from pycggtts.track.track import Track
from pycggtts.utils.gnss import SV
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CommonViewDifference:
    """Clock difference from one satellite seen by both stations.

    Attributes:
        sv: Common satellite
        epoch: Track start (UTC)
        frc: Carrier code
        elevation_local: Elevation at the local station (degrees)
        elevation_remote: Elevation at the remote station (degrees)
        difference: local REFSYS minus remote REFSYS (s)
    """

    sv: SV
    epoch: datetime
    frc: str
    elevation_local: float
    elevation_remote: float
    difference: float


def _key(track: Track) -> tuple[SV, datetime, str]:
    return track.sv, track.epoch, track.frc


def common_view_differences(local: CGGTTS, remote: CGGTTS) -> list[CommonViewDifference]:
    """Pair tracks by (satellite, start time, carrier code).

    Tracks present in only one file are ignored. When a file holds the
    same key twice, the first track wins.

    Returns:
        Differences ordered by epoch, then satellite
    """
    remote_tracks: dict[tuple[SV, datetime, str], Track] = {}
    for track in remote.tracks:
        remote_tracks.setdefault(_key(track), track)

    seen = set()
    results = []
    for track in local.tracks:
        key = _key(track)
        if key in seen or key not in remote_tracks:
            continue
        seen.add(key)
        other = remote_tracks[key]
        results.append(
            CommonViewDifference(
                sv=track.sv,
                epoch=track.epoch,
                frc=track.frc,
                elevation_local=track.elevation_deg,
                elevation_remote=other.elevation_deg,
                difference=track.data.refsys - other.data.refsys,
            )
        )

    results.sort(key=lambda d: (d.epoch, d.sv))
    logger.debug(
        "Common-view pairing",
        local=len(local.tracks),
        remote=len(remote.tracks),
        common=len(results),
    )
    return results


def average_by_epoch(differences: list[CommonViewDifference]) -> list[tuple[datetime, float]]:
    """Mean clock difference per track epoch, in seconds."""
    by_epoch: dict[datetime, list[float]] = {}
    for d in differences:
        by_epoch.setdefault(d.epoch, []).append(d.difference)
    return [
        (epoch, float(np.mean(values)))
        for epoch, values in sorted(by_epoch.items())
    ]
