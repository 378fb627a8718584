from __future__ import annotations
from typing import List, Protocol

from .primitives import (
    Segment, SegmentKind, App0Jfif, Dqt, Dht, Dac, Frame, Scan, Rst,
)


class Handler(Protocol):
    """Receives decoded segments, one call per segment in stream order.

    `position` is the stream offset right after the marker, `length` the
    number of payload bytes without the 2-byte length field.
    """

    def handle_soi(self, position: int, length: int) -> None: ...

    def handle_eoi(self, position: int, length: int) -> None: ...

    def handle_app(self, position: int, length: int, nr: int, data: bytes) -> None: ...

    def handle_app0_jfif(self, position: int, length: int, jfif: App0Jfif) -> None: ...

    def handle_dqt(self, position: int, length: int, tables: List[Dqt]) -> None: ...

    def handle_dht(self, position: int, length: int, tables: List[Dht]) -> None: ...

    def handle_dac(self, position: int, length: int, dac: Dac) -> None: ...

    def handle_frame(self, position: int, length: int, frame: Frame) -> None: ...

    def handle_scan(self, position: int, length: int, scan: Scan) -> None: ...

    def handle_dri(self, position: int, length: int, restart: int) -> None: ...

    def handle_rst(self, position: int, length: int, rst: Rst) -> None: ...

    def handle_comment(self, position: int, length: int, data: bytes) -> None: ...

    def handle_unknown(self, position: int, length: int, marker: int, data: bytes) -> None: ...


def dispatch(segment: Segment, handler: Handler) -> None:
    """Call the handle_<kind> method of handler that matches segment."""
    kind = segment.kind
    position = segment.position
    length = segment.length
    value = segment.value

    if kind == SegmentKind.SOI:
        handler.handle_soi(position, length)
    elif kind == SegmentKind.EOI:
        handler.handle_eoi(position, length)
    elif kind == SegmentKind.APP:
        handler.handle_app(position, length, value.nr, value.data)
    elif kind == SegmentKind.APP0_JFIF:
        handler.handle_app0_jfif(position, length, value)
    elif kind == SegmentKind.DQT:
        handler.handle_dqt(position, length, value)
    elif kind == SegmentKind.DHT:
        handler.handle_dht(position, length, value)
    elif kind == SegmentKind.DAC:
        handler.handle_dac(position, length, value)
    elif kind == SegmentKind.FRAME:
        handler.handle_frame(position, length, value)
    elif kind == SegmentKind.SCAN:
        handler.handle_scan(position, length, value)
    elif kind == SegmentKind.DRI:
        handler.handle_dri(position, length, value)
    elif kind == SegmentKind.RST:
        handler.handle_rst(position, length, value)
    elif kind == SegmentKind.COMMENT:
        handler.handle_comment(position, length, value)
    elif kind == SegmentKind.UNKNOWN:
        handler.handle_unknown(position, length, value.marker, value.data)
    else:
        raise ValueError(f"Unhandled segment kind {kind}")
