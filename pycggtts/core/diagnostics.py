"""
Non-fatal parsing diagnostics.

Readers never reject a file for a checksum mismatch or for one bad track.
Such events are collected as ParseWarning records (and logged) so that
callers can report them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WarningKind(str, Enum):
    """Categories of non-fatal parsing events."""

    HEADER_CHECKSUM = "header_checksum"
    TRACK_CHECKSUM = "track_checksum"
    TRACK_FORMAT = "track_format"
    TRACK_LAYOUT = "track_layout"
    CALIBRATION_ID = "calibration_id"
    HARDWARE = "hardware"
    DELAY_CODE = "delay_code"


@dataclass(frozen=True)
class ParseWarning:
    """A non-fatal event met while reading a CGGTTS file.

    Attributes:
        kind: Warning category
        message: Human readable description
        line_number: 1-based line number in the source, when known
        line: Offending line content, when relevant
    """

    kind: WarningKind
    message: str
    line_number: int | None = None
    line: str | None = None

    def __str__(self) -> str:
        if self.line_number is not None:
            return f"line {self.line_number}: {self.message}"
        return self.message


@dataclass(frozen=True)
class ChecksumMismatch(ParseWarning):
    """Declared and computed checksums differ."""

    declared: int = 0
    computed: int = 0
