"""
CGGTTS file aggregate, reader and writer.

A CGGTTS file is a header followed by a table of tracks. Reading is
lenient: checksum mismatches and unparseable track lines are reported as
warnings, never raised. Writing is strict and deterministic.

Usage:
    from pycggtts import CGGTTS

    cggtts = CGGTTS.from_path("GZSY8259.568")
    for track in cggtts.sv_tracks(SV.parse("G08")):
        print(track.epoch, track.data.refsys)

    cggtts.write_path(Path("out") / cggtts.standardized_file_name())
"""

from __future__ import annotations

import io
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from pycggtts.core.diagnostics import ParseWarning, WarningKind
from pycggtts.core.exceptions import MixedLayoutError, NonAsciiError, ParsingError
from pycggtts.header.formatter import format_header
from pycggtts.header.header import Header
from pycggtts.header.parser import HeaderParser
from pycggtts.track import fields
from pycggtts.track.formatter import format_track
from pycggtts.track.parser import parse_track
from pycggtts.track.track import CommonViewClass, Track
from pycggtts.utils.gnss import SV, Constellation
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


# CGGTTS is ASCII; decoding as latin-1 never fails, so that stray bytes
# are reported by the ASCII guard with their line number
FILE_ENCODING = "latin-1"


@dataclass
class CGGTTS:
    """A CGGTTS file: header and ordered tracks.

    Attributes:
        header: File header
        tracks: Tracks in file order
    """

    header: Header = field(default_factory=Header)
    tracks: list[Track] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_path(cls, path: Path | str) -> "CGGTTS":
        """Read a CGGTTS file.

        Raises:
            FileNotFoundError: If path does not exist
            ParsingError: If the header cannot be parsed
            NonAsciiError: If the header is not pure ASCII
        """
        return CGGTTSReader().parse(path)

    @classmethod
    def read(cls, stream: TextIO | Iterable[str]) -> "CGGTTS":
        """Read CGGTTS content from a text stream (or any line iterable)."""
        return CGGTTSReader().read(stream)

    @classmethod
    def from_string(cls, content: str) -> "CGGTTS":
        return CGGTTSReader().read(io.StringIO(content))

    def with_header(self, header: Header) -> "CGGTTS":
        return CGGTTS(header=header, tracks=list(self.tracks))

    def with_track(self, track: Track) -> "CGGTTS":
        """Copy of self with track appended."""
        return CGGTTS(header=self.header, tracks=[*self.tracks, track])

    # -------------------------------------------------------------------------
    # Track access
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self.tracks)

    def sv_tracks(self, sv: SV) -> Iterator[Track]:
        """Tracks of one satellite."""
        return (t for t in self.tracks if t.sv == sv)

    def constellation_tracks(self, constellation: Constellation) -> Iterator[Track]:
        """Tracks of one constellation."""
        return (t for t in self.tracks if t.uses_constellation(constellation))

    def satellites(self) -> list[SV]:
        """Tracked satellites, sorted."""
        return sorted({t.sv for t in self.tracks})

    def carrier_codes(self) -> list[str]:
        """Carrier codes (FRC), in order of first appearance."""
        return list(dict.fromkeys(t.frc for t in self.tracks))

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def uses_constellation(self, constellation: Constellation) -> bool:
        return any(t.uses_constellation(constellation) for t in self.tracks)

    def unique_constellation(self, constellation: Constellation) -> bool:
        """True when every track uses constellation."""
        return all(t.uses_constellation(constellation) for t in self.tracks)

    def is_gps_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.GPS)

    def is_galileo_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.GALILEO)

    def is_glonass_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.GLONASS)

    def is_beidou_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.BEIDOU)

    def is_qzss_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.QZSS)

    def is_sbas_cggtts(self) -> bool:
        return self.unique_constellation(Constellation.SBAS)

    def has_ionospheric_data(self) -> bool:
        """True when there is at least one track and all carry MSIO/SMSI/ISG."""
        return bool(self.tracks) and all(t.has_ionospheric_data() for t in self.tracks)

    def common_view_class(self) -> CommonViewClass:
        """Single channel only when every track is single channel."""
        if all(t.cv_class == CommonViewClass.SINGLE_CHANNEL for t in self.tracks):
            return CommonViewClass.SINGLE_CHANNEL
        return CommonViewClass.MULTI_CHANNEL

    def is_single_channel(self) -> bool:
        return self.common_view_class() == CommonViewClass.SINGLE_CHANNEL

    def is_multi_channel(self) -> bool:
        return self.common_view_class() == CommonViewClass.MULTI_CHANNEL

    def follows_bipm_specs(self) -> bool:
        return all(t.follows_bipm_specs() for t in self.tracks)

    def epoch(self) -> datetime | None:
        """Start of the first track."""
        return self.tracks[0].epoch if self.tracks else None

    def total_duration(self) -> timedelta:
        """Sum of all tracking durations."""
        return sum((t.duration for t in self.tracks), timedelta(0))

    # -------------------------------------------------------------------------
    # File naming
    # -------------------------------------------------------------------------

    def dominant_constellation(self) -> Constellation:
        """Most tracked constellation (GPS for an empty file)."""
        if not self.tracks:
            return Constellation.GPS
        counts = Counter(t.sv.constellation for t in self.tracks)
        # Counter preserves first appearance order among equal counts
        return counts.most_common(1)[0][0]

    def standardized_file_name(
        self,
        lab: str | None = None,
        receiver_id: str | None = None,
    ) -> str:
        """BIPM file name CFLLIIMM.DDD for this file.

        Args:
            lab: Two-letter laboratory code (default: station name)
            receiver_id: Two-character receiver identifier (default: first
                two digits of the receiver serial number, or '__')

        Returns:
            File name such as 'GZSY1859.568'
        """
        name = self.dominant_constellation().value

        if self.has_ionospheric_data():
            name += "Z"
        elif self.is_single_channel():
            name += "S"
        else:
            name += "M"

        name += (lab or self.header.station)[:2].ljust(2, "X")

        if receiver_id:
            name += receiver_id[:2]
        else:
            serial = self.header.receiver.serial_number if self.header.receiver else ""
            name += serial[:2] if len(serial) >= 2 and serial[:2].isdigit() else "__"

        if self.tracks:
            mjd = self.tracks[0].mjd
            name += f"{mjd // 1000}.{mjd % 1000:03d}"
        else:
            name += "YY.YYY"

        return name

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def write(self, stream: TextIO) -> int:
        """Write self to a text stream.

        Returns:
            Number of tracks written

        Raises:
            MixedLayoutError: If tracks with and without ionospheric data
                are mixed
            FormattingError: If a value cannot be represented
            NonAsciiError: If some content is not ASCII
        """
        with_iono = sum(1 for t in self.tracks if t.has_ionospheric_data())
        without_iono = len(self.tracks) - with_iono
        if with_iono and without_iono:
            raise MixedLayoutError(with_iono, without_iono)

        stream.write(format_header(self.header))
        stream.write("\n")
        if with_iono:
            stream.write(fields.LABELS_WITH_IONO + "\n")
            stream.write(fields.UNITS_WITH_IONO + "\n")
        else:
            stream.write(fields.LABELS_WITHOUT_IONO + "\n")
            stream.write(fields.UNITS_WITHOUT_IONO + "\n")

        for track in self.tracks:
            stream.write(format_track(track) + "\n")

        return len(self.tracks)

    def write_path(self, path: Path | str) -> Path:
        """Write self to path, creating parent directories.

        The content is fully formatted before the file is opened, so that
        a formatting error leaves no partial file behind.

        Returns:
            The written path
        """
        path = Path(path)
        content = self.to_string()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="ascii", newline="\n") as f:
            f.write(content)

        logger.debug("Wrote CGGTTS file", path=str(path), tracks=len(self.tracks))
        return path

    def to_string(self) -> str:
        buffer = io.StringIO()
        self.write(buffer)
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.to_string()


class CGGTTSReader:
    """Lenient CGGTTS reader.

    Header errors are fatal. A track line that cannot be parsed is skipped;
    a track whose layout (with or without ionospheric data) differs from
    the first track is kept. Both cases, and every checksum mismatch, are
    recorded in ``warnings``.

    Usage:
        reader = CGGTTSReader()
        cggtts = reader.parse("GZSY8259.568")
        for warning in reader.warnings:
            print(warning)
    """

    def __init__(self):
        self.warnings: list[ParseWarning] = []

    def parse(self, path: Path | str) -> CGGTTS:
        """Read a CGGTTS file from disk.

        Args:
            path: File path

        Returns:
            CGGTTS

        Raises:
            FileNotFoundError: If path does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"CGGTTS file not found: {path}")

        with open(path, encoding=FILE_ENCODING, newline="") as f:
            cggtts = self.read(f)

        logger.debug(
            "Read CGGTTS file",
            path=str(path),
            tracks=len(cggtts.tracks),
            warnings=len(self.warnings),
        )
        return cggtts

    def read(self, stream: TextIO | Iterable[str]) -> CGGTTS:
        """Read CGGTTS content from a line iterable.

        Raises:
            ParsingError: If the header cannot be parsed
            NonAsciiError: If the header is not pure ASCII
        """
        self.warnings = []
        lines = iter(stream)

        header_parser = HeaderParser()
        header = header_parser.parse(lines)
        self.warnings.extend(header_parser.warnings)

        tracks: list[Track] = []
        first_has_iono: bool | None = None
        line_number = header_parser.line_number

        for raw in lines:
            line_number += 1
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue

            try:
                track = parse_track(line, line_number, self.warnings)
            except (ParsingError, NonAsciiError) as e:
                self._warn(WarningKind.TRACK_FORMAT, f"skipping track: {e}", line_number, line)
                continue

            if first_has_iono is None:
                first_has_iono = track.has_ionospheric_data()
            elif track.has_ionospheric_data() != first_has_iono:
                self._warn(
                    WarningKind.TRACK_LAYOUT,
                    "track layout differs from the first track",
                    line_number,
                    line,
                )

            tracks.append(track)

        return CGGTTS(header=header, tracks=tracks)

    @property
    def has_checksum_mismatch(self) -> bool:
        return any(
            w.kind in (WarningKind.HEADER_CHECKSUM, WarningKind.TRACK_CHECKSUM)
            for w in self.warnings
        )

    def _warn(self, kind: WarningKind, message: str, line_number: int, line: str) -> None:
        self.warnings.append(ParseWarning(kind, message, line_number, line))
        logger.warning(message, kind=kind.value, line_number=line_number)
