"""
CGGTTS header reader.

The first line must declare version 2E. The following "KEY = value"
lines are accepted in any order until "CKSUM = ", after which the blank
line, the field labels line and the units line are consumed. Unknown
keys are ignored.

Usage:
    from pycggtts.header.parser import HeaderParser

    parser = HeaderParser()
    with open("GZSY8259.568", encoding="latin-1") as f:
        lines = iter(f)
        header = parser.parse(lines)
        # lines now points at the first track
    for warning in parser.warnings:
        print(warning)
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterator

from pycggtts.core.diagnostics import ChecksumMismatch, ParseWarning, WarningKind
from pycggtts.core.exceptions import (
    CalibrationIdError,
    ChecksumFormatError,
    FieldError,
    MissingFieldError,
    NumericFieldError,
    ParsingError,
    RevisionDateError,
    UnsupportedVersionError,
)
from pycggtts.header.delay import CalibrationId, Code, Delay, SystemDelay
from pycggtts.header.hardware import Hardware
from pycggtts.header.header import Coordinates, Header
from pycggtts.header.reference_time import ReferenceTime
from pycggtts.header.version import Version
from pycggtts.utils.crc import calc_crc, format_crc, parse_crc
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


# Number of lines following CKSUM: blank, field labels, units
TRAILING_LINES = 3


class HeaderParser:
    """Parser for the header section of a CGGTTS file.

    After ``parse`` returns, ``line_number`` holds the number of lines
    consumed, ``declared_checksum``/``computed_checksum`` the header
    checksums and ``warnings`` every non-fatal event.
    """

    VERSION_PATTERN = re.compile(
        r"^C?GGTTS\s.*?VERSION\s*=\s*(\S*)\s*$"
    )
    KEY_VALUE_PATTERN = re.compile(r"^([A-Z][A-Z_ ]*?)\s*=\s?(.*)$")
    CKSUM_PATTERN = re.compile(r"^(CKSUM\s*=\s*)(\S*)\s*$")
    REV_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
    DELAY_ENTRY_PATTERN = re.compile(
        r"([-+]?(?:\d+\.?\d*|\.\d+))\s*ns\s*\(\s*(\w+)\s+(\w+)\s*\)"
    )
    CAL_ID_PATTERN = re.compile(r"CAL_ID\s*=\s*(\S*)")

    def __init__(self):
        self.line_number = 0
        self.declared_checksum: int | None = None
        self.computed_checksum: int | None = None
        self.warnings: list[ParseWarning] = []

    def parse(self, lines: Iterator[str]) -> Header:
        """Parse header lines.

        Args:
            lines: Line iterator, left positioned on the first track line

        Returns:
            Parsed Header

        Raises:
            ParsingError: On missing or unsupported version, malformed REV
                DATE, CKSUM or numeric field, or premature end of input
            NonAsciiError: If a header line is not pure ASCII
        """
        self.line_number = 0
        self.warnings = []

        crc = 0
        first = self._next_line(lines)
        if first is None:
            raise MissingFieldError("VERSION")
        crc += calc_crc(first)
        self._parse_version(first)

        fields: dict[str, Any] = {}
        delay = SystemDelay()

        while True:
            line = self._next_line(lines)
            if line is None:
                raise MissingFieldError("CKSUM", self.line_number)

            cksum = self.CKSUM_PATTERN.match(line.strip())
            if cksum:
                crc += calc_crc(cksum.group(1))
                self.computed_checksum = crc % 256
                try:
                    self.declared_checksum = parse_crc(cksum.group(2))
                except ValueError as e:
                    raise ChecksumFormatError(cksum.group(2), line, self.line_number) from e
                break

            crc += calc_crc(line)

            match = self.KEY_VALUE_PATTERN.match(line.strip())
            if not match:
                continue
            key = " ".join(match.group(1).split())
            value = match.group(2).strip()
            delay = self._parse_field(key, value, line, fields, delay)

        if "release_date" not in fields:
            raise MissingFieldError("REV DATE", self.line_number)

        if self.declared_checksum != self.computed_checksum:
            self._warn_checksum()

        # blank line, field labels and units are not interpreted
        for _ in range(TRAILING_LINES):
            if self._next_line(lines) is None:
                break

        fields["apc_coordinates"] = Coordinates(
            *(fields.pop(axis, 0.0) for axis in ("x", "y", "z"))
        )

        try:
            return Header(delay=delay, **fields)
        except ValueError as e:
            raise ParsingError(str(e)) from e

    # -------------------------------------------------------------------------

    def _next_line(self, lines: Iterator[str]) -> str | None:
        try:
            line = next(lines)
        except StopIteration:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def _parse_version(self, line: str) -> None:
        match = self.VERSION_PATTERN.match(line.strip())
        if not match:
            raise MissingFieldError("VERSION", self.line_number)
        try:
            Version.from_str(match.group(1))
        except ValueError as e:
            raise UnsupportedVersionError(match.group(1), line, self.line_number) from e

    def _parse_field(
        self,
        key: str,
        value: str,
        line: str,
        fields: dict[str, Any],
        delay: SystemDelay,
    ) -> SystemDelay:
        """Store one header field, returning the (possibly updated) delay."""
        if key == "REV DATE":
            fields["release_date"] = self._parse_date(value, line)
        elif key in ("RCVR", "IMS"):
            name = "receiver" if key == "RCVR" else "ims"
            try:
                fields[name] = Hardware.parse(value)
            except ValueError as e:
                self._warn(WarningKind.HARDWARE, f"ignoring {key}: {e}", line)
        elif key == "CH":
            fields["nb_channels"] = self._parse_int(key, value, line)
        elif key == "LAB":
            fields["station"] = value
        elif key in ("X", "Y", "Z"):
            fields[key.lower()] = self._parse_float(key, value, line)
        elif key == "FRAME":
            fields["reference_frame"] = None if value == "?" else value
        elif key == "COMMENTS":
            fields["comments"] = None if value == "NO COMMENTS" else value
        elif key == "REF":
            try:
                fields["reference_time"] = ReferenceTime.parse(value)
            except ValueError as e:
                raise FieldError(key, value, line, self.line_number) from e
        elif key == "CAB DLY":
            delay = delay.with_antenna_cable_delay(self._parse_float(key, value, line))
        elif key == "REF DLY":
            delay = delay.with_ref_delay(self._parse_float(key, value, line))
        elif key in ("INT DLY", "SYS DLY", "TOT DLY"):
            delay = self._parse_frequency_dependent_delays(key, value, line, delay)
        else:
            logger.debug("Ignoring header field", key=key, line_number=self.line_number)
        return delay

    def _parse_frequency_dependent_delays(
        self,
        key: str,
        value: str,
        line: str,
        delay: SystemDelay,
    ) -> SystemDelay:
        """Parse INT/SYS/TOT DLY entries and the optional CAL_ID."""
        entries_text, _, _ = value.partition("CAL_ID")
        entries = self.DELAY_ENTRY_PATTERN.findall(entries_text)
        if not entries:
            raise NumericFieldError(key, value, line, self.line_number)

        for nanos, system, code_str in entries:
            nanoseconds = float(nanos)
            entry = Delay.internal(nanoseconds) if key == "INT DLY" else Delay.systemic(nanoseconds)
            try:
                code = Code(code_str.upper())
            except ValueError:
                self._warn(
                    WarningKind.DELAY_CODE,
                    f"ignoring {key} entry with unsupported code '{system} {code_str}'",
                    line,
                )
                continue
            delay = delay.with_frequency_dependent_delay(code, entry)

        cal_match = self.CAL_ID_PATTERN.search(value)
        if cal_match and cal_match.group(1) != "NA":
            try:
                delay = delay.with_calibration_id(CalibrationId.parse(cal_match.group(1)))
            except (CalibrationIdError, ValueError) as e:
                self._warn(WarningKind.CALIBRATION_ID, f"ignoring CAL_ID: {e}", line)

        return delay

    def _parse_date(self, value: str, line: str) -> date:
        match = self.REV_DATE_PATTERN.match(value)
        if not match:
            raise RevisionDateError(value, line, self.line_number)
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError as e:
            raise RevisionDateError(value, line, self.line_number) from e

    def _parse_int(self, key: str, value: str, line: str) -> int:
        try:
            return int(value)
        except ValueError as e:
            raise NumericFieldError(key, value, line, self.line_number) from e

    def _parse_float(self, key: str, value: str, line: str) -> float:
        """Parse the first token of value ('4314137.334 m', '155.2 ns')."""
        token = value.split()[0] if value.split() else value
        try:
            return float(token)
        except ValueError as e:
            raise NumericFieldError(key, value, line, self.line_number) from e

    def _warn(self, kind: WarningKind, message: str, line: str | None = None) -> None:
        warning = ParseWarning(kind, message, self.line_number, line)
        self.warnings.append(warning)
        logger.warning(message, line_number=self.line_number)

    def _warn_checksum(self) -> None:
        message = (
            f"header checksum mismatch: declared {format_crc(self.declared_checksum)}, "
            f"computed {format_crc(self.computed_checksum)}"
        )
        self.warnings.append(
            ChecksumMismatch(
                WarningKind.HEADER_CHECKSUM,
                message,
                self.line_number,
                None,
                declared=self.declared_checksum,
                computed=self.computed_checksum,
            )
        )
        logger.warning(
            "Header checksum mismatch",
            declared=format_crc(self.declared_checksum),
            computed=format_crc(self.computed_checksum),
        )
