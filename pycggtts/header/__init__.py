"""CGGTTS header: station description, hardware, reference time and delays."""

from pycggtts.header.delay import CalibrationId, Code, Delay, DelayKind, SystemDelay
from pycggtts.header.formatter import format_header
from pycggtts.header.hardware import Hardware
from pycggtts.header.header import Coordinates, Header
from pycggtts.header.parser import HeaderParser
from pycggtts.header.reference_time import ReferenceTime, ReferenceTimeKind
from pycggtts.header.version import Version

__all__ = [
    "CalibrationId",
    "Code",
    "Coordinates",
    "Delay",
    "DelayKind",
    "Hardware",
    "Header",
    "HeaderParser",
    "ReferenceTime",
    "ReferenceTimeKind",
    "SystemDelay",
    "Version",
    "format_header",
]
