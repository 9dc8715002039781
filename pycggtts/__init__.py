"""
PyCGGTTS: CGGTTS common-view GNSS time transfer files

Reader, writer and in-memory model for BIPM CGGTTS 2E files, together with
the common-view scheduling and the track reduction used to produce them.
"""

__version__ = "1.0.0"
__author__ = "PyCGGTTS Team"

from pycggtts.cggtts import CGGTTS, CGGTTSReader
from pycggtts.header import Header
from pycggtts.track import Track

__all__ = ["CGGTTS", "CGGTTSReader", "Header", "Track", "__version__"]
