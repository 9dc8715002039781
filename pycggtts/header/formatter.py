"""
CGGTTS header writer.

Lines are always emitted in the same order so that written files are
stable and diff-friendly. The checksum covers every header byte up to and
including the "CKSUM = " prefix.
"""

from __future__ import annotations

from pycggtts.header.delay import Code, Delay, DelayKind, SystemDelay
from pycggtts.header.header import Header
from pycggtts.utils.crc import calc_crc, format_crc


VERSION_LINE = "CGGTTS GENERIC DATA FORMAT VERSION = {}"
CKSUM_PREFIX = "CKSUM = "


def _format_delay_entry(code: Code, delay: Delay) -> str:
    return f"{delay.nanoseconds:6.1f} ns ({code.constellation.short_name} {code.value})"


def format_delay_lines(delay: SystemDelay) -> list[str]:
    """Format the INT DLY / SYS DLY lines of a SystemDelay.

    One line per delay kind, internal first. The calibration identifier
    is appended to the last line. Nothing is produced when there are no
    frequency-dependent delays.
    """
    lines = []
    for kind in (DelayKind.INTERNAL, DelayKind.SYSTEMIC):
        entries = [
            _format_delay_entry(code, d)
            for code, d in delay.freq_dependent_delays
            if d.kind == kind
        ]
        if entries:
            lines.append(f"{kind.value} DLY = " + ", ".join(entries))

    if lines:
        cal_id = str(delay.calibration_id) if delay.calibration_id else "NA"
        lines[-1] += f"     CAL_ID = {cal_id}"

    return lines


def format_header_body(header: Header) -> str:
    """Header text up to and including the "CKSUM = " prefix."""
    lines = [
        VERSION_LINE.format(header.version.value),
        f"REV DATE = {header.version.release_date.isoformat()}",
    ]

    if header.receiver is not None:
        lines.append(f"RCVR = {header.receiver}")

    lines.append(f"CH = {header.nb_channels}")

    if header.ims is not None:
        lines.append(f"IMS = {header.ims}")

    lines.append(f"LAB = {header.station}")

    apc = header.apc_coordinates
    lines.append(f"X = {apc.x:12.3f} m")
    lines.append(f"Y = {apc.y:12.3f} m")
    lines.append(f"Z = {apc.z:12.3f} m")

    if header.reference_frame is not None:
        lines.append(f"FRAME = {header.reference_frame}")

    if header.comments is not None and header.comments.strip():
        lines.append(f"COMMENTS = {header.comments.strip()}")
    else:
        lines.append("COMMENTS = NO COMMENTS")

    lines.extend(format_delay_lines(header.delay))

    lines.append(f"CAB DLY = {header.delay.antenna_cable_delay:05.1f} ns")
    lines.append(f"REF DLY = {header.delay.local_ref_delay:05.1f} ns")
    lines.append(f"REF = {header.reference_time}")

    return "\n".join(lines) + "\n" + CKSUM_PREFIX


def format_header(header: Header) -> str:
    """Format a complete header, CKSUM line included.

    Returns:
        Header text terminated by a newline

    Raises:
        NonAsciiError: If any header field is not ASCII
    """
    body = format_header_body(header)
    return body + format_crc(calc_crc(body)) + "\n"
