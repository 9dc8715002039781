"""CGGTTS track line writer."""

from __future__ import annotations

from pycggtts.track import fields
from pycggtts.track.track import Track
from pycggtts.utils.crc import calc_crc, format_crc
from pycggtts.utils.dates import format_hhmmss


def format_track_body(track: Track) -> str:
    """Track line up to and including the space preceding the checksum."""
    data = track.data
    columns = [
        str(track.sv),
        track.cv_class.value,
        f"{track.mjd:5d}",
        format_hhmmss(track.epoch),
        fields.TRKL.format(track.duration.total_seconds()),
        fields.ELV.format(track.elevation_deg),
        fields.AZTH.format(track.azimuth_deg),
        fields.REFSV.format(data.refsv),
        fields.SRSV.format(data.srsv),
        fields.REFSYS.format(data.refsys),
        fields.SRSYS.format(data.srsys),
        fields.DSG.format(data.dsg),
        fields.IOE.format(data.ioe),
        fields.MDTR.format(data.mdtr),
        fields.SMDT.format(data.smdt),
        fields.MDIO.format(data.mdio),
        fields.SMDI.format(data.smdi),
    ]

    if track.iono is not None:
        columns.extend([
            fields.MSIO.format(track.iono.msio),
            fields.SMSI.format(track.iono.smsi),
            fields.ISG.format(track.iono.isg),
        ])

    columns.extend([
        f"{str(track.fdma_channel):>2}",
        f"{track.hc:>2X}",
        f"{track.frc:>3}",
    ])

    return " ".join(columns) + " "


def format_track(track: Track) -> str:
    """Format a complete track line, checksum included (no newline).

    Raises:
        FormattingError: If a value cannot be represented (NaN)
        NonAsciiError: If the carrier code is not ASCII
    """
    body = format_track_body(track)
    return body + format_crc(calc_crc(body))
