"""Utility modules for checksums, date/time handling, GNSS identifiers and logging."""

from pycggtts.utils.crc import calc_crc, ensure_ascii, format_crc, parse_crc
from pycggtts.utils.dates import (
    MJD_EPOCH,
    datetime_from_mjd,
    ensure_utc,
    format_hhmmss,
    mjd_day,
    mjd_from_datetime,
    parse_hhmmss,
)
from pycggtts.utils.gnss import Constellation, SV
from pycggtts.utils.logging import get_logger, setup_logging

__all__ = [
    # Checksum
    "calc_crc",
    "ensure_ascii",
    "format_crc",
    "parse_crc",
    # Date/time utilities
    "MJD_EPOCH",
    "datetime_from_mjd",
    "ensure_utc",
    "format_hhmmss",
    "mjd_day",
    "mjd_from_datetime",
    "parse_hhmmss",
    # GNSS identifiers
    "Constellation",
    "SV",
    # Logging
    "get_logger",
    "setup_logging",
]
