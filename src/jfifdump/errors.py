from typing import Optional


class JfifError(Exception):
    """Base class of every error raised while reading a JFIF stream.

    msg: The unformatted error message
    pos: The stream offset where parsing failed (None when unknown)

    """
    def __init__(self, msg: str, pos: Optional[int] = None):
        errmsg = msg if pos is None else '%s: index %d' % (msg, pos)
        Exception.__init__(self, errmsg)
        self.msg = msg
        self.pos = pos


class JfifMarkerNotFound(JfifError):
    def __init__(self, pos: int = 0):
        super().__init__("Not a JFIF file", pos)


class InvalidMarker(JfifError):
    def __init__(self, marker: int, pos: Optional[int] = None):
        super().__init__(f"Invalid marker: 0x{marker:02X}", pos)
        self.marker = marker


class InvalidMarkerLength(JfifError):
    def __init__(self, length: int, pos: Optional[int] = None):
        super().__init__(f"Invalid length for marker: {length}", pos)
        self.length = length


class InvalidSegmentLength(JfifError):
    """Declared length does not fit the fixed fields of the segment."""
    name = "segment"

    def __init__(self, length: int, pos: Optional[int] = None):
        super().__init__(f"Invalid {self.name} length: {length}", pos)
        self.length = length


class InvalidDhtSegmentLength(InvalidSegmentLength):
    name = "dht segment"


class InvalidDqtSegmentLength(InvalidSegmentLength):
    """Reserved: DQT tables are counted as length // 65, so no DQT length is rejected."""
    name = "dqt segment"


class InvalidFrameSegmentLength(InvalidSegmentLength):
    name = "frame segment"


class InvalidDriLength(InvalidSegmentLength):
    name = "dri"


class InvalidScanHeaderLength(InvalidSegmentLength):
    name = "scan header"


class JfifIOError(JfifError):
    """The byte source failed. The original OSError is kept as __cause__."""


class UnexpectedEof(JfifIOError):
    def __init__(self, expected: int, got: int, pos: Optional[int] = None):
        super().__init__(f"Expecting {expected} bytes but {got} was found", pos)
        self.expected = expected
        self.got = got


class EndOfStream(UnexpectedEof):
    """Stream ended between segments, while looking for the next marker."""


class ReaderStateError(JfifError):
    pass
