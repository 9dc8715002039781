"""
CGGTTS checksum (CK).

The checksum is the sum of all ASCII bytes modulo 256, carriage returns
and line feeds excluded. It protects both the header (up to and including
the "CKSUM = " prefix) and every track line (up to and including the
space preceding the two CK digits).

Usage:
    from pycggtts.utils.crc import calc_crc

    ck = calc_crc("R24 FF 57000 000600  780 347 394 +1186342 +0 163 +0 40 2 141 +22 23 -1 23 -1 29 +2 0 L3P")
    assert ck == 0x0F
"""

from __future__ import annotations

import re

from pycggtts.core.exceptions import NonAsciiError

# Line terminators never contribute to the checksum
_EXCLUDED = (0x0A, 0x0D)

_HEX_PATTERN = re.compile(r"^[0-9A-Fa-f]{1,2}$")


def ensure_ascii(content: str | bytes) -> bytes:
    """Return content as ASCII bytes.

    Raises:
        NonAsciiError: If any byte is above 0x7F
    """
    if isinstance(content, bytes):
        if any(b > 0x7F for b in content):
            raise NonAsciiError(content)
        return content
    try:
        return content.encode("ascii")
    except UnicodeEncodeError as e:
        raise NonAsciiError(content) from e


def calc_crc(content: str | bytes) -> int:
    """Compute the 8-bit CGGTTS checksum of content.

    Args:
        content: ASCII text or bytes

    Returns:
        Checksum in [0, 255]

    Raises:
        NonAsciiError: If content is not pure ASCII
    """
    data = ensure_ascii(content)
    return sum(b for b in data if b not in _EXCLUDED) % 256


def format_crc(value: int) -> str:
    """Format a checksum as two upper-case hex digits."""
    return f"{value:02X}"


def parse_crc(text: str) -> int:
    """Parse a two-digit hexadecimal checksum.

    Raises:
        ValueError: If text is not a hexadecimal byte
    """
    text = text.strip()
    if not _HEX_PATTERN.match(text):
        raise ValueError(f"invalid checksum: {text!r}")
    return int(text, 16)
