"""
CGGTTS track line reader.

A track line holds 21 whitespace separated tokens, or 24 when the
ionospheric columns (MSIO, SMSI, ISG) are present. The last token is the
line checksum, computed over everything preceding it (the separating
space included). A checksum mismatch is reported, never fatal.
"""

from __future__ import annotations

from datetime import timedelta

from pycggtts.core.diagnostics import ChecksumMismatch, ParseWarning, WarningKind
from pycggtts.core.exceptions import (
    ChecksumFormatError,
    FieldError,
    InvalidTrackFormatError,
    NumericFieldError,
    ParsingError,
)
from pycggtts.track import fields
from pycggtts.track.track import (
    CommonViewClass,
    GlonassChannel,
    IonosphericData,
    Track,
    TrackData,
)
from pycggtts.utils.crc import calc_crc, format_crc, parse_crc
from pycggtts.utils.dates import datetime_from_mjd, parse_hhmmss
from pycggtts.utils.gnss import SV
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


TOKENS_WITHOUT_IONO = 21
TOKENS_WITH_IONO = 24


def split_checksum(line: str) -> tuple[str, str]:
    """Split a track line into (checksummed content, CK token)."""
    trimmed = line.rstrip()
    ck_start = trimmed.rfind(" ") + 1
    return trimmed[:ck_start], trimmed[ck_start:]


def parse_track(
    line: str,
    line_number: int | None = None,
    warnings: list[ParseWarning] | None = None,
) -> Track:
    """Parse one track line.

    Args:
        line: Track line (trailing newline allowed)
        line_number: Position in the source, for error reporting
        warnings: Optional list receiving a ChecksumMismatch

    Returns:
        Parsed Track

    Raises:
        InvalidTrackFormatError: Token count other than 21 or 24
        NumericFieldError: Non-numeric value in a numeric column
        FieldError: Invalid satellite, class, channel or carrier code
        ChecksumFormatError: Non-hexadecimal checksum
        NonAsciiError: Non-ASCII content
    """
    line = line.rstrip("\r\n")
    tokens = line.split()
    if len(tokens) not in (TOKENS_WITHOUT_IONO, TOKENS_WITH_IONO):
        raise InvalidTrackFormatError(len(tokens), line, line_number)

    content, ck_token = split_checksum(line)
    computed = calc_crc(content)
    try:
        declared = parse_crc(ck_token)
    except ValueError as e:
        raise ChecksumFormatError(ck_token, line, line_number) from e

    track = _build_track(tokens, line, line_number)

    if declared != computed:
        message = (
            f"track checksum mismatch: declared {format_crc(declared)}, "
            f"computed {format_crc(computed)}"
        )
        logger.warning(
            "Track checksum mismatch",
            sv=str(track.sv),
            declared=format_crc(declared),
            computed=format_crc(computed),
            line_number=line_number,
        )
        if warnings is not None:
            warnings.append(
                ChecksumMismatch(
                    WarningKind.TRACK_CHECKSUM,
                    message,
                    line_number,
                    line,
                    declared=declared,
                    computed=computed,
                )
            )

    return track


def _build_track(tokens: list[str], line: str, line_number: int | None) -> Track:
    def scaled(field: fields.ScaledField, token: str) -> float:
        try:
            return field.parse(token)
        except ValueError as e:
            raise NumericFieldError(field.name, token, line, line_number) from e

    def integer(name: str, token: str) -> int:
        try:
            return int(token)
        except ValueError as e:
            raise NumericFieldError(name, token, line, line_number) from e

    try:
        sv = SV.parse(tokens[0])
    except ValueError as e:
        raise FieldError("satellite", tokens[0], line, line_number) from e

    try:
        cv_class = CommonViewClass.from_str(tokens[1])
    except ValueError as e:
        raise FieldError("class", tokens[1], line, line_number) from e

    mjd = integer("MJD", tokens[2])
    try:
        time_of_day = parse_hhmmss(tokens[3])
    except ValueError as e:
        raise FieldError("STTIME", tokens[3], line, line_number) from e
    epoch = datetime_from_mjd(mjd) + time_of_day

    duration = timedelta(seconds=integer("TRKL", tokens[4]))
    elevation = scaled(fields.ELV, tokens[5])
    azimuth = scaled(fields.AZTH, tokens[6])

    ioe = integer("IOE", tokens[12])
    if not 0 <= ioe <= 999:
        raise FieldError("IOE", tokens[12], line, line_number)

    data = TrackData(
        refsv=scaled(fields.REFSV, tokens[7]),
        srsv=scaled(fields.SRSV, tokens[8]),
        refsys=scaled(fields.REFSYS, tokens[9]),
        srsys=scaled(fields.SRSYS, tokens[10]),
        dsg=scaled(fields.DSG, tokens[11]),
        ioe=ioe,
        mdtr=scaled(fields.MDTR, tokens[13]),
        smdt=scaled(fields.SMDT, tokens[14]),
        mdio=scaled(fields.MDIO, tokens[15]),
        smdi=scaled(fields.SMDI, tokens[16]),
    )

    iono = None
    offset = 17
    if len(tokens) == TOKENS_WITH_IONO:
        iono = IonosphericData(
            msio=scaled(fields.MSIO, tokens[17]),
            smsi=scaled(fields.SMSI, tokens[18]),
            isg=scaled(fields.ISG, tokens[19]),
        )
        offset = 20

    try:
        fdma_channel = GlonassChannel.parse(tokens[offset])
    except ValueError as e:
        raise FieldError("FR", tokens[offset], line, line_number) from e

    try:
        hc = int(tokens[offset + 1], 16)
    except ValueError as e:
        raise NumericFieldError("HC", tokens[offset + 1], line, line_number) from e

    try:
        return Track(
            sv=sv,
            cv_class=cv_class,
            epoch=epoch,
            duration=duration,
            elevation_deg=elevation,
            azimuth_deg=azimuth,
            data=data,
            iono=iono,
            fdma_channel=fdma_channel,
            hc=hc,
            frc=tokens[offset + 2],
        )
    except ValueError as e:
        raise ParsingError(str(e), line, line_number) from e
