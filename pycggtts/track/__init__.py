"""CGGTTS tracks: model, column table, line reader and writer."""

from pycggtts.track.formatter import format_track
from pycggtts.track.parser import parse_track
from pycggtts.track.track import (
    BIPM_TRACKING_DURATION,
    CommonViewClass,
    GlonassChannel,
    IonosphericData,
    Track,
    TrackData,
)

__all__ = [
    "BIPM_TRACKING_DURATION",
    "CommonViewClass",
    "GlonassChannel",
    "IonosphericData",
    "Track",
    "TrackData",
    "format_track",
    "parse_track",
]
