"""CGGTTS file format revisions."""

from __future__ import annotations

from datetime import date
from enum import Enum


class Version(str, Enum):
    """Supported CGGTTS revisions. Only 2E is accepted."""

    V2E = "2E"

    @property
    def release_date(self) -> date:
        """Publication date of this revision (the REV DATE field)."""
        return _RELEASE_DATES[self]

    @classmethod
    def from_str(cls, text: str) -> "Version":
        """Parse a version token.

        Raises:
            ValueError: If the revision is not supported
        """
        return cls(text.strip().upper())


_RELEASE_DATES = {
    Version.V2E: date(2014, 2, 20),
}
