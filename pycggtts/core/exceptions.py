"""
Custom exceptions for PyCGGTTS.

Provides a hierarchy of exceptions for different error conditions.
Checksum mismatches are not exceptions: readers report them as warnings.
"""

from __future__ import annotations


class CGGTTSError(Exception):
    """Base exception for all PyCGGTTS errors."""

    pass


class ConfigurationError(CGGTTSError):
    """Configuration-related errors."""

    pass


# =============================================================================
# Reader errors
# =============================================================================

class ParsingError(CGGTTSError):
    """Base class for errors raised while reading CGGTTS content."""

    def __init__(
        self,
        message: str,
        line: str | None = None,
        line_number: int | None = None,
    ):
        self.line = line
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class UnsupportedVersionError(ParsingError):
    """File revision other than 2E."""

    def __init__(self, version: str, line: str | None = None, line_number: int | None = None):
        self.version = version
        super().__init__(f"unsupported CGGTTS version '{version}'", line, line_number)


class MissingFieldError(ParsingError):
    """A mandatory header field was never found."""

    def __init__(self, field: str, line_number: int | None = None):
        self.field = field
        super().__init__(f"missing mandatory field {field}", None, line_number)


class RevisionDateError(ParsingError):
    """Malformed REV DATE value."""

    def __init__(self, value: str, line: str | None = None, line_number: int | None = None):
        self.value = value
        super().__init__(f"malformed revision date '{value}'", line, line_number)


class NumericFieldError(ParsingError):
    """Integer or float parse failure in a structured field."""

    def __init__(
        self,
        field: str,
        value: str,
        line: str | None = None,
        line_number: int | None = None,
    ):
        self.field = field
        self.value = value
        super().__init__(f"invalid numeric value '{value}' for {field}", line, line_number)


class ChecksumFormatError(ParsingError):
    """CKSUM value is not two hexadecimal digits."""

    def __init__(self, value: str, line: str | None = None, line_number: int | None = None):
        self.value = value
        super().__init__(f"invalid checksum '{value}'", line, line_number)


class InvalidTrackFormatError(ParsingError):
    """Track line with a token count other than 21 or 24."""

    def __init__(self, token_count: int, line: str | None = None, line_number: int | None = None):
        self.token_count = token_count
        super().__init__(
            f"invalid track format: {token_count} fields (expecting 21 or 24)",
            line,
            line_number,
        )


class FieldError(ParsingError):
    """Invalid enumerated token (satellite, class, channel)."""

    def __init__(
        self,
        field: str,
        value: str,
        line: str | None = None,
        line_number: int | None = None,
    ):
        self.field = field
        self.value = value
        super().__init__(f"invalid {field} '{value}'", line, line_number)


class NonAsciiError(CGGTTSError):
    """Non-ASCII content where only ASCII is allowed."""

    def __init__(self, content: str | bytes):
        self.content = content
        super().__init__(f"non-ASCII content: {content!r}")


class CalibrationIdError(CGGTTSError):
    """Malformed calibration identifier (expecting <id>-<year>)."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid calibration id '{value}'")


# =============================================================================
# Writer errors
# =============================================================================

class FormattingError(CGGTTSError):
    """Content cannot be written as CGGTTS."""

    pass


class MixedLayoutError(FormattingError):
    """Tracks with and without ionospheric data in the same file."""

    def __init__(self, with_iono: int, without_iono: int):
        self.with_iono = with_iono
        self.without_iono = without_iono
        super().__init__(
            f"cannot mix ionospheric layouts: {with_iono} tracks with, "
            f"{without_iono} tracks without ionospheric data"
        )


# =============================================================================
# Tracker errors
# =============================================================================

class FitError(CGGTTSError):
    """Track fitting errors."""

    pass


class IncompleteTrackError(FitError):
    """Not enough measurements buffered for the tracking duration."""

    def __init__(self, count: int, required: int):
        self.count = count
        self.required = required
        super().__init__(
            f"incomplete track: {count} measurements, {required} required"
        )


class NotCenteredError(FitError):
    """Buffered measurements do not surround the track midpoint."""

    def __init__(self, midpoint: str):
        self.midpoint = midpoint
        super().__init__(f"buffer is not centered on track midpoint {midpoint}")


class LinearRegressionError(FitError):
    """Least-squares line fit failed."""

    def __init__(self, quantity: str, message: str):
        self.quantity = quantity
        super().__init__(f"linear regression failed for {quantity}: {message}")


class NonContiguousBufferError(FitError):
    """Gap larger than the sampling period between two measurements."""

    def __init__(self, before: str, after: str):
        self.before = before
        self.after = after
        super().__init__(f"gap in measurements between {before} and {after}")


class OutOfOrderSampleError(FitError):
    """Measurement older than (or equal to) the latest buffered one."""

    def __init__(self, epoch: str, latest: str):
        self.epoch = epoch
        self.latest = latest
        super().__init__(f"measurement at {epoch} is not after latest sample {latest}")
