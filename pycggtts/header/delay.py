"""
Measurement-chain delays.

A CGGTTS station declares:
- the antenna cable delay (CAB DLY) and local reference delay (REF DLY)
- a list of frequency-dependent delays keyed by carrier code, either
  internal (INT DLY, receiver + antenna) or systemic (SYS DLY / TOT DLY)
- an optional calibration identifier (CAL_ID = <process>-<year>)

All values are expressed in nanoseconds.

Usage:
    from pycggtts.header.delay import Code, Delay, SystemDelay

    delay = (
        SystemDelay()
        .with_antenna_cable_delay(155.2)
        .with_frequency_dependent_delay(Code.C1, Delay.internal(32.9))
    )
    total = delay.total_frequency_dependent_delay_nanos(Code.C1)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator

from pycggtts.core.exceptions import CalibrationIdError
from pycggtts.utils.gnss import Constellation


# =============================================================================
# Carrier codes
# =============================================================================

class Code(str, Enum):
    """Carrier codes a frequency-dependent delay can be attached to."""

    C1 = "C1"
    C2 = "C2"
    P1 = "P1"
    P2 = "P2"
    E1 = "E1"
    E5 = "E5"
    B1 = "B1"
    B2 = "B2"

    @property
    def constellation(self) -> Constellation:
        """Constellation the carrier belongs to."""
        if self.value[0] in ("C", "P"):
            return Constellation.GPS
        if self.value[0] == "E":
            return Constellation.GALILEO
        return Constellation.BEIDOU


# =============================================================================
# Delay values
# =============================================================================

class DelayKind(str, Enum):
    """Internal (INT DLY) or systemic (SYS DLY, TOT DLY) delay."""

    INTERNAL = "INT"
    SYSTEMIC = "SYS"


@dataclass(frozen=True)
class Delay:
    """A frequency-dependent delay in nanoseconds."""

    kind: DelayKind
    nanoseconds: float

    @classmethod
    def internal(cls, nanoseconds: float) -> "Delay":
        return cls(DelayKind.INTERNAL, nanoseconds)

    @classmethod
    def systemic(cls, nanoseconds: float) -> "Delay":
        return cls(DelayKind.SYSTEMIC, nanoseconds)

    @property
    def is_internal(self) -> bool:
        return self.kind == DelayKind.INTERNAL

    @property
    def total_seconds(self) -> float:
        return self.nanoseconds * 1e-9

    def add_nanos(self, nanoseconds: float) -> "Delay":
        """Same kind of delay, increased by nanoseconds."""
        return replace(self, nanoseconds=self.nanoseconds + nanoseconds)


# =============================================================================
# Calibration identifier
# =============================================================================

@dataclass(frozen=True)
class CalibrationId:
    """Calibration process identifier, written as <process_id>-<year>."""

    process_id: int
    year: int

    PATTERN = re.compile(r"^(\d+)-(\d+)$")

    @classmethod
    def parse(cls, text: str) -> "CalibrationId":
        """Parse '<id>-<year>'.

        Raises:
            CalibrationIdError: On 'NA' or any malformed value
        """
        match = cls.PATTERN.match(text.strip())
        if not match:
            raise CalibrationIdError(text.strip())
        process_id, year = int(match.group(1)), int(match.group(2))
        if process_id > 0xFFFF or year > 0xFFFF:
            raise CalibrationIdError(text.strip())
        return cls(process_id, year)

    def __str__(self) -> str:
        return f"{self.process_id}-{self.year}"


# =============================================================================
# System delay
# =============================================================================

@dataclass(frozen=True)
class SystemDelay:
    """Delays of the complete measurement chain.

    TOT DLY entries are stored as systemic delays: they supplement the
    cable and reference delays, which are always part of the totals.

    Attributes:
        antenna_cable_delay: CAB DLY in nanoseconds
        local_ref_delay: REF DLY in nanoseconds
        freq_dependent_delays: Ordered (code, delay) entries
        calibration_id: Optional calibration identifier, written on the
            last frequency-dependent delay line (requires at least one)
    """

    antenna_cable_delay: float = 0.0
    local_ref_delay: float = 0.0
    freq_dependent_delays: tuple[tuple[Code, Delay], ...] = field(default_factory=tuple)
    calibration_id: CalibrationId | None = None

    def __post_init__(self):
        if self.calibration_id is not None and not self.freq_dependent_delays:
            raise ValueError("calibration id requires a frequency-dependent delay")

    def with_antenna_cable_delay(self, nanoseconds: float) -> "SystemDelay":
        return replace(self, antenna_cable_delay=nanoseconds)

    def with_ref_delay(self, nanoseconds: float) -> "SystemDelay":
        return replace(self, local_ref_delay=nanoseconds)

    def with_calibration_id(self, calibration_id: CalibrationId | None) -> "SystemDelay":
        return replace(self, calibration_id=calibration_id)

    def with_frequency_dependent_delay(self, code: Code, delay: Delay) -> "SystemDelay":
        """Add (or replace) the delay of this kind for code, keeping order."""
        entries = list(self.freq_dependent_delays)
        for i, (existing_code, existing) in enumerate(entries):
            if existing_code == code and existing.kind == delay.kind:
                entries[i] = (code, delay)
                break
        else:
            entries.append((code, delay))
        return replace(self, freq_dependent_delays=tuple(entries))

    @property
    def total_cable_delay_nanos(self) -> float:
        """Antenna cable delay plus local reference delay."""
        return self.antenna_cable_delay + self.local_ref_delay

    def delay(self, code: Code) -> Delay | None:
        """First delay declared for code, if any."""
        for entry_code, delay in self.freq_dependent_delays:
            if entry_code == code:
                return delay
        return None

    def total_frequency_dependent_delay_nanos(self, code: Code) -> float | None:
        """Total delay for code, cable delays included.

        Returns:
            Delay in nanoseconds, or None when code is not declared
        """
        delay = self.delay(code)
        if delay is None:
            return None
        return delay.nanoseconds + self.total_cable_delay_nanos

    def frequency_dependent_nanos_delay_iter(self) -> Iterator[tuple[Code, float]]:
        """Iterate (code, total delay in nanoseconds) pairs in declaration order."""
        for code, delay in self.freq_dependent_delays:
            yield code, delay.nanoseconds + self.total_cable_delay_nanos
