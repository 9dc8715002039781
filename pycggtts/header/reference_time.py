"""
Reference timescale of a CGGTTS station.

The REF header field names the local clock the measurements refer to:
TAI, UTC, a laboratory realization UTC(k), or any free-form label.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ReferenceTimeKind(str, Enum):
    """Reference time variants."""

    TAI = "TAI"
    UTC = "UTC"
    UTCK = "UTC(k)"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class ReferenceTime:
    """Reference timescale (REF field).

    Attributes:
        kind: Variant
        label: Laboratory for UTC(k), free-form text for custom references
    """

    kind: ReferenceTimeKind = ReferenceTimeKind.UTC
    label: str | None = None

    UTCK_PATTERN = re.compile(r"^UTC\((.*)\)$")

    def __post_init__(self):
        if self.kind in (ReferenceTimeKind.UTCK, ReferenceTimeKind.CUSTOM):
            if not self.label:
                raise ValueError(f"{self.kind.value} reference requires a label")
        elif self.label is not None:
            raise ValueError(f"{self.kind.value} reference takes no label")

    @classmethod
    def tai(cls) -> "ReferenceTime":
        return cls(ReferenceTimeKind.TAI)

    @classmethod
    def utc(cls) -> "ReferenceTime":
        return cls(ReferenceTimeKind.UTC)

    @classmethod
    def utc_k(cls, lab: str) -> "ReferenceTime":
        """Laboratory realization of UTC, e.g. UTC(OP)."""
        return cls(ReferenceTimeKind.UTCK, lab.strip())

    @classmethod
    def custom(cls, label: str) -> "ReferenceTime":
        return cls(ReferenceTimeKind.CUSTOM, label)

    @classmethod
    def parse(cls, text: str) -> "ReferenceTime":
        """Parse a REF field value.

        'TAI' and 'UTC' are case-insensitive. 'UTC(lab)' gives a UTC(k)
        reference. Anything else is kept verbatim as a custom reference.
        """
        text = text.strip()
        lower = text.lower()
        if lower == "tai":
            return cls.tai()
        if lower == "utc":
            return cls.utc()
        match = cls.UTCK_PATTERN.match(text)
        if match and match.group(1).strip():
            return cls.utc_k(match.group(1))
        return cls.custom(text)

    def __str__(self) -> str:
        if self.kind == ReferenceTimeKind.TAI:
            return "TAI"
        if self.kind == ReferenceTimeKind.UTC:
            return "UTC"
        if self.kind == ReferenceTimeKind.UTCK:
            return f"UTC({self.label})"
        return self.label or ""
