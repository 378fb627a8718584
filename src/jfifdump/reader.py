from __future__ import annotations
import logging
from enum import Enum
from typing import BinaryIO, Iterator, List, Optional, Tuple

from .errors import (
    JfifError, JfifIOError, JfifMarkerNotFound, UnexpectedEof, EndOfStream,
    InvalidMarker, InvalidMarkerLength, InvalidDhtSegmentLength,
    InvalidFrameSegmentLength, InvalidDriLength, InvalidScanHeaderLength,
    ReaderStateError,
)
from .marker import (
    MARKER_PREFIX, STUFFING, SOI_MARKER, EOI_MARKER, SOS_MARKER, DQT_MARKER,
    DRI_MARKER, DHT_MARKER, DAC_MARKER, COM_MARKER, RST0_MARKER, APP0_MARKER,
    JFIF_IDENTIFIER, JFIF_HEADER_SIZE,
    is_app, is_rst, is_sof, marker_info,
)
from .primitives import (
    Segment, SegmentKind, App, App0Jfif, Dqt, Dht, Dac, DacParam,
    Frame, FrameComponent, Scan, ScanComponent, Rst, Unknown,
)
from .handler import Handler, dispatch

logger = logging.getLogger(__name__)

# precision/destination byte + 64 values
DQT_TABLE_SIZE = 65
# class/destination byte + 16 code length counts
DHT_HEADER_SIZE = 17


class ReaderState(Enum):
    AWAITING_SOI = "awaiting_soi"
    SCANNING = "scanning"
    EOI = "eoi"
    ERROR = "error"


class Reader:
    """Forward-only reader over the marker segments of a JFIF stream.

    The reader owns `source` and reads it strictly sequentially, one segment
    per `next_segment()` call. Once an error was raised the reader is
    poisoned and must be discarded.
    """

    def __init__(self, source: BinaryIO):
        self.source = source
        self.position = 0
        self.state = ReaderState.AWAITING_SOI
        # marker found at the end of entropy-coded data, consumed by the next call
        self._pending_marker: Optional[int] = None
        self._pending_size = 0

        head = self._read_source(2)
        self.position += len(head)
        if head != bytes([MARKER_PREFIX, SOI_MARKER]):
            self.state = ReaderState.ERROR
            raise JfifMarkerNotFound(0)

        self.state = ReaderState.SCANNING

    def __iter__(self) -> Iterator[Segment]:
        """Yield segments up to and including EOI, stop quietly at a clean end of stream."""
        while self.state == ReaderState.SCANNING:
            try:
                segment = self.next_segment()
            except EndOfStream:
                return
            yield segment

    # ------------------------------------------------------------------
    # byte level
    # ------------------------------------------------------------------

    def _read_source(self, count: int) -> bytes:
        chunks = []
        remaining = count
        while remaining > 0:
            try:
                chunk = self.source.read(remaining)
            except OSError as err:
                raise JfifIOError(str(err), self.position) from err
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def _read_exact(self, count: int) -> bytes:
        data = self._read_source(count)
        self.position += len(data)
        if len(data) != count:
            raise UnexpectedEof(count, len(data), self.position)
        return data

    def _read_u8(self) -> int:
        return self._read_exact(1)[0]

    def _read_u4_tuple(self) -> Tuple[int, int]:
        v = self._read_u8()
        return v >> 4, v & 0x0F

    def _read_u16(self) -> int:
        data = self._read_exact(2)
        return (data[0] << 8) | data[1]

    def _skip(self, count: int) -> None:
        if count > 0:
            self._read_exact(count)

    def _read_length(self) -> int:
        """Read a segment length field, return the payload size without the field."""
        length = self._read_u16()
        if length <= 2:
            raise InvalidMarkerLength(length, self.position - 2)
        return length - 2

    # ------------------------------------------------------------------
    # marker scanning
    # ------------------------------------------------------------------

    def _next_marker(self) -> int:
        if self._pending_marker is not None:
            marker = self._pending_marker
            self._pending_marker = None
            self._pending_size = 0
            return marker

        # anything before 0xFF is garbage between segments
        while True:
            byte = self._read_source(1)
            if not byte:
                raise EndOfStream(1, 0, self.position)
            self.position += 1
            if byte[0] == MARKER_PREFIX:
                break

        # 0xFF fill bytes may precede the marker code
        marker = self._read_u8()
        while marker == MARKER_PREFIX:
            marker = self._read_u8()
        return marker

    def next_segment(self) -> Segment:
        """Read and decode the next segment.

        Raises EndOfStream when the source ends cleanly between segments and
        another JfifError for anything malformed or truncated.
        """
        if self.state != ReaderState.SCANNING:
            raise ReaderStateError(f"Reader is in state {self.state.value}", self.position)

        try:
            segment = self._decode_segment()
        except JfifError:
            self.state = ReaderState.ERROR
            raise

        if segment.kind == SegmentKind.EOI:
            self.state = ReaderState.EOI
        return segment

    def _decode_segment(self) -> Segment:
        marker = self._next_marker()
        position = self.position
        logger.debug("Found %s at %d", marker_info(marker), position)

        if marker == STUFFING:
            raise InvalidMarker(marker, position)
        elif marker == EOI_MARKER:
            kind, value = SegmentKind.EOI, None
        elif is_app(marker):
            kind, value = self._read_app_segment(marker - APP0_MARKER)
        elif marker == DQT_MARKER:
            kind, value = SegmentKind.DQT, self._read_dqt()
        elif marker == DHT_MARKER:
            kind, value = SegmentKind.DHT, self._read_dht()
        elif marker == DAC_MARKER:
            kind, value = SegmentKind.DAC, self._read_dac()
        elif is_sof(marker):
            kind, value = SegmentKind.FRAME, self._read_frame(marker)
        elif marker == SOS_MARKER:
            kind, value = SegmentKind.SCAN, self._read_scan()
        elif marker == DRI_MARKER:
            kind, value = SegmentKind.DRI, self._read_dri()
        elif is_rst(marker):
            kind, value = SegmentKind.RST, self._read_rst(marker - RST0_MARKER)
        elif marker == COM_MARKER:
            kind, value = SegmentKind.COMMENT, self._read_segment()
        else:
            kind, value = SegmentKind.UNKNOWN, Unknown(marker, self._read_segment())

        # bytes of a marker already read by the scan data extractor belong to the next segment
        end = self.position - self._pending_size
        length = end - position
        if kind not in (SegmentKind.EOI, SegmentKind.RST):
            length -= 2

        return Segment(kind, position, length, value)

    # ------------------------------------------------------------------
    # segment payloads
    # ------------------------------------------------------------------

    def _read_segment(self) -> bytes:
        length = self._read_length()
        return self._read_exact(length)

    def _read_app_segment(self, nr: int):
        data = self._read_segment()

        if nr == 0 and len(data) >= JFIF_HEADER_SIZE and data.startswith(JFIF_IDENTIFIER):
            x_thumbnail = data[12]
            y_thumbnail = data[13]
            thumbnail = None
            if x_thumbnail > 0 and y_thumbnail > 0 and len(data) > JFIF_HEADER_SIZE:
                thumbnail = data[JFIF_HEADER_SIZE:]

            jfif = App0Jfif(
                major=data[5],
                minor=data[6],
                unit=data[7],
                x_density=(data[8] << 8) | data[9],
                y_density=(data[10] << 8) | data[11],
                x_thumbnail=x_thumbnail,
                y_thumbnail=y_thumbnail,
                thumbnail=thumbnail,
            )
            return SegmentKind.APP0_JFIF, jfif

        return SegmentKind.APP, App(nr, data)

    def _read_dqt(self) -> List[Dqt]:
        length = self._read_length()
        num_tables = length // DQT_TABLE_SIZE

        tables = []
        for _ in range(num_tables):
            precision, dest = self._read_u4_tuple()
            values = self._read_exact(64)
            tables.append(Dqt(precision, dest, values))

        # a trailing partial table is dropped
        self._skip(length - num_tables * DQT_TABLE_SIZE)
        return tables

    def _read_dht(self) -> List[Dht]:
        length = self._read_length()
        declared = length + 2

        tables = []
        while length > DHT_HEADER_SIZE:
            table_class, dest = self._read_u4_tuple()
            code_lengths = self._read_exact(16)
            num_codes = sum(code_lengths)

            if DHT_HEADER_SIZE + num_codes > length:
                raise InvalidDhtSegmentLength(declared, self.position)

            values = self._read_exact(num_codes)
            tables.append(Dht(table_class, dest, code_lengths, values))
            length -= DHT_HEADER_SIZE + num_codes

        self._skip(length)
        return tables

    def _read_dac(self) -> Dac:
        length = self._read_length()

        params = []
        for _ in range(length // 2):
            table_class, dest = self._read_u4_tuple()
            value = self._read_u8()
            params.append(DacParam(table_class, dest, value))

        self._skip(length % 2)
        return Dac(params)

    def _read_frame(self, sof: int) -> Frame:
        length = self._read_length()
        # precision(1) + height(2) + width(2) + number of components(1)
        if length < 6:
            raise InvalidFrameSegmentLength(length + 2, self.position)

        precision = self._read_u8()
        dimension_y = self._read_u16()
        dimension_x = self._read_u16()
        num_components = self._read_u8()

        remaining = length - 6 - num_components * 3
        if remaining < 0:
            raise InvalidFrameSegmentLength(length + 2, self.position)

        components = []
        for _ in range(num_components):
            component_id = self._read_u8()
            h_sampling, v_sampling = self._read_u4_tuple()
            quantization_table = self._read_u8()
            components.append(FrameComponent(component_id, h_sampling, v_sampling, quantization_table))

        self._skip(remaining)
        return Frame(sof, precision, dimension_y, dimension_x, components)

    def _read_scan(self) -> Scan:
        length = self._read_length()
        # number of components(1) + spectral selection(2) + approximation(1)
        if length < 4:
            raise InvalidScanHeaderLength(length + 2, self.position)

        num_components = self._read_u8()
        remaining = length - 1 - num_components * 2 - 3
        if remaining < 0:
            raise InvalidScanHeaderLength(length + 2, self.position)

        components = []
        for _ in range(num_components):
            component_id = self._read_u8()
            dc_table, ac_table = self._read_u4_tuple()
            components.append(ScanComponent(component_id, dc_table, ac_table))

        selection_start = self._read_u8()
        selection_end = self._read_u8()
        approximation_low, approximation_high = self._read_u4_tuple()

        self._skip(remaining)
        data = self._read_scan_data()

        return Scan(
            components=components,
            selection_start=selection_start,
            selection_end=selection_end,
            approximation_low=approximation_low,
            approximation_high=approximation_high,
            data=data,
        )

    def _read_scan_data(self) -> bytes:
        """Collect entropy-coded bytes up to the next marker.

        Stuffed 0xFF 0x00 pairs are kept as they are. A run of several 0xFF
        before the 0x00 is kept whole, as libjpeg writes and accepts it. The
        marker that ends the data is held back for the next segment.
        """
        data = bytearray()

        while True:
            byte = self._read_u8()
            if byte != MARKER_PREFIX:
                data.append(byte)
                continue

            ff_count = 1
            byte = self._read_u8()
            while byte == MARKER_PREFIX:
                ff_count += 1
                byte = self._read_u8()

            if byte != STUFFING:
                self._pending_marker = byte
                self._pending_size = ff_count + 1
                break

            data.extend(bytes([MARKER_PREFIX]) * ff_count)
            data.append(byte)

        return bytes(data)

    def _read_rst(self, nr: int) -> Rst:
        return Rst(nr, self._read_scan_data())

    def _read_dri(self) -> int:
        length = self._read_length()
        if length < 2:
            raise InvalidDriLength(length + 2, self.position)

        restart = self._read_u16()
        self._skip(length - 2)
        return restart


def read(source: BinaryIO, handler: Handler) -> None:
    """Read a whole JFIF stream and report every segment to handler.

    Stops after EOI, or when the stream ends between two segments.
    """
    reader = Reader(source)
    dispatch(Segment(SegmentKind.SOI, reader.position), handler)

    for segment in reader:
        dispatch(segment, handler)
