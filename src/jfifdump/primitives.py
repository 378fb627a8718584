from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .marker import sof_name


class SegmentKind(Enum):
    SOI = "soi"
    EOI = "eoi"
    APP = "app"
    APP0_JFIF = "app0_jfif"
    DQT = "dqt"
    DHT = "dht"
    DAC = "dac"
    FRAME = "frame"
    SCAN = "scan"
    DRI = "dri"
    RST = "rst"
    COMMENT = "comment"
    UNKNOWN = "unknown"


class DensityUnit(Enum):
    PIXEL = 0
    DPI = 1
    DPCM = 2


@dataclass
class App:
    nr: int
    data: bytes


@dataclass
class App0Jfif:
    major: int = 0
    minor: int = 0
    # 0 = pixel aspect ratio only, 1 = dots per inch, 2 = dots per cm
    unit: int = 0
    x_density: int = 0
    y_density: int = 0
    x_thumbnail: int = 0
    y_thumbnail: int = 0
    thumbnail: Optional[bytes] = None

    @property
    def density_unit(self) -> Optional[DensityUnit]:
        """The unit as a DensityUnit, None for values outside 0-2."""
        try:
            return DensityUnit(self.unit)
        except ValueError:
            return None


@dataclass
class Dqt:
    precision: int
    dest: int
    # 64 bytes, zigzag order as stored in the stream
    values: bytes


@dataclass
class Dht:
    # 0 = DC, 1 = AC
    table_class: int
    dest: int
    # number of codes of each bit length 1-16
    code_lengths: bytes
    values: bytes


@dataclass
class DacParam:
    table_class: int
    dest: int
    value: int


@dataclass
class Dac:
    params: List[DacParam] = field(default_factory=list)


@dataclass
class FrameComponent:
    id: int
    horizontal_sampling_factor: int
    vertical_sampling_factor: int
    quantization_table: int


@dataclass
class Frame:
    sof: int
    precision: int
    dimension_y: int
    dimension_x: int
    components: List[FrameComponent] = field(default_factory=list)

    @property
    def sof_name(self) -> str:
        return sof_name(self.sof)


@dataclass
class ScanComponent:
    id: int
    dc_table: int
    ac_table: int


@dataclass
class Scan:
    components: List[ScanComponent] = field(default_factory=list)
    selection_start: int = 0
    selection_end: int = 0
    approximation_low: int = 0
    approximation_high: int = 0
    # entropy-coded bytes, still stuffed
    data: bytes = b""


@dataclass
class Rst:
    nr: int
    data: bytes


@dataclass
class Unknown:
    marker: int
    data: bytes


@dataclass
class Segment:
    """One decoded segment.

    `value` holds the payload for `kind`:

    SOI, EOI      -> None
    APP           -> App
    APP0_JFIF     -> App0Jfif
    DQT           -> List[Dqt]
    DHT           -> List[Dht]
    DAC           -> Dac
    FRAME         -> Frame
    SCAN          -> Scan
    DRI           -> int (restart interval)
    RST           -> Rst
    COMMENT       -> bytes
    UNKNOWN       -> Unknown
    """
    kind: SegmentKind
    position: int
    length: int = 0
    value: Any = None
