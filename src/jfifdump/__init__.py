"""Read the segment structure of JFIF/JPEG files without decoding image data.

Print the image dimensions::

    from jfifdump import Reader, SegmentKind

    with open("some.jpeg", "rb") as f:
        for segment in Reader(f):
            if segment.kind == SegmentKind.FRAME:
                print(f"{segment.value.dimension_x}x{segment.value.dimension_y}")
                break
"""

__version__ = "0.1.0"

from .errors import (
    JfifError, JfifMarkerNotFound, InvalidMarker, InvalidMarkerLength,
    InvalidSegmentLength, InvalidDhtSegmentLength, InvalidDqtSegmentLength,
    InvalidFrameSegmentLength, InvalidDriLength, InvalidScanHeaderLength,
    JfifIOError, UnexpectedEof, EndOfStream, ReaderStateError,
)
from .primitives import (
    Segment, SegmentKind, DensityUnit, App, App0Jfif, Dqt, Dht, Dac, DacParam,
    Frame, FrameComponent, Scan, ScanComponent, Rst, Unknown,
)
from .handler import Handler, dispatch
from .reader import Reader, ReaderState, read
from .text import TextFormat
from .json_format import JsonFormat

__all__ = [
    'read',
    'dispatch',
    'Reader',
    'ReaderState',
    'Handler',
    'TextFormat',
    'JsonFormat',
    'Segment',
    'SegmentKind',
    'DensityUnit',
    'App',
    'App0Jfif',
    'Dqt',
    'Dht',
    'Dac',
    'DacParam',
    'Frame',
    'FrameComponent',
    'Scan',
    'ScanComponent',
    'Rst',
    'Unknown',
    'JfifError',
    'JfifMarkerNotFound',
    'InvalidMarker',
    'InvalidMarkerLength',
    'InvalidSegmentLength',
    'InvalidDhtSegmentLength',
    'InvalidDqtSegmentLength',
    'InvalidFrameSegmentLength',
    'InvalidDriLength',
    'InvalidScanHeaderLength',
    'JfifIOError',
    'UnexpectedEof',
    'EndOfStream',
    'ReaderStateError',
]
