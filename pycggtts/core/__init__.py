"""Configuration, exceptions and parsing diagnostics."""

from pycggtts.core.config import Settings, load_settings
from pycggtts.core.diagnostics import ChecksumMismatch, ParseWarning, WarningKind
from pycggtts.core.exceptions import (
    CGGTTSError,
    ConfigurationError,
    FitError,
    FormattingError,
    NonAsciiError,
    ParsingError,
)

__all__ = [
    "Settings",
    "load_settings",
    "ChecksumMismatch",
    "ParseWarning",
    "WarningKind",
    "CGGTTSError",
    "ConfigurationError",
    "FitError",
    "FormattingError",
    "NonAsciiError",
    "ParsingError",
]
