from __future__ import annotations
import sys
from typing import List, Optional, TextIO

import numpy as np

from .marker import printable_prefix
from .primitives import App0Jfif, Dqt, Dht, Dac, Frame, Scan, Rst

UNIT_NAMES = {
    0: "pixel",
    1: "dots per inch",
    2: "dots per cm",
}


class TextFormat:
    """Human readable dump, one block of lines per segment."""

    def __init__(self, verbose: bool = False, out: Optional[TextIO] = None):
        self.verbose = verbose
        self.out = out if out is not None else sys.stdout

    def _print(self, *args) -> None:
        print(*args, file=self.out)

    def handle_soi(self, position: int, length: int) -> None:
        self._print("SOI")

    def handle_eoi(self, position: int, length: int) -> None:
        self._print("EOI")

    def handle_app(self, position: int, length: int, nr: int, data: bytes) -> None:
        self._print(f"App(0x{nr:X}):{printable_prefix(data, 20)}")

    def handle_app0_jfif(self, position: int, length: int, jfif: App0Jfif) -> None:
        self._print("App(0x0): JFIF")
        self._print(f"  Version: {jfif.major}.{jfif.minor:02}")

        unit = UNIT_NAMES.get(jfif.unit, f"Unknown unit: {jfif.unit}")
        self._print(f"  Density: {jfif.x_density}x{jfif.y_density} {unit}")
        self._print(f"  Thumbnail: {jfif.x_thumbnail}x{jfif.y_thumbnail}")

    def handle_dqt(self, position: int, length: int, tables: List[Dqt]) -> None:
        self._print("DQT:")

        for table in tables:
            self._print(f"  {table.dest}: Precision {table.precision}")
            if self.verbose:
                # stored in zigzag order, printed 8 per row as in the stream
                grid = np.frombuffer(table.values, dtype=np.uint8).reshape(8, 8)
                for row in grid:
                    self._print("    " + ", ".join(f"{int(v):3d}" for v in row))

    def handle_dht(self, position: int, length: int, tables: List[Dht]) -> None:
        self._print("DHT:")

        for table in tables:
            self._print(f"  Table {table.dest}: Class {table.table_class}")
            if self.verbose:
                self._print("    Code lengths: " + ", ".join(str(v) for v in table.code_lengths))

    def handle_dac(self, position: int, length: int, dac: Dac) -> None:
        self._print("DAC:")

        for param in dac.params:
            self._print(f"  Class: {param.table_class}   Dest: {param.dest}    Value: {param.value}")

    def handle_frame(self, position: int, length: int, frame: Frame) -> None:
        self._print(f"Frame: {frame.sof_name}")
        self._print(f"  Precision: {frame.precision}")
        self._print(f"  Dimension: {frame.dimension_x}x{frame.dimension_y}")

        for component in frame.components:
            self._print(
                f"  Component({component.id}): "
                f"Sampling {component.horizontal_sampling_factor}x{component.vertical_sampling_factor} "
                f"Quantization: {component.quantization_table}"
            )

    def handle_scan(self, position: int, length: int, scan: Scan) -> None:
        self._print("Scan:")

        for component in scan.components:
            self._print(f"  Component: {component.id} DC:{component.dc_table} AC:{component.ac_table}")

        self._print(f"  Selection: {scan.selection_start} to {scan.selection_end}")
        self._print(f"  Approximation: {scan.approximation_low} to {scan.approximation_high}")
        self._print(f"  Data: {len(scan.data)} bytes")

    def handle_dri(self, position: int, length: int, restart: int) -> None:
        self._print(f"DRI: {restart}")

    def handle_rst(self, position: int, length: int, rst: Rst) -> None:
        self._print(f"RST({rst.nr}): Data: {len(rst.data)} bytes")

    def handle_comment(self, position: int, length: int, data: bytes) -> None:
        try:
            self._print(f"Comment: {data.decode('utf-8')}")
        except UnicodeDecodeError:
            self._print(f"Comment: BAD STRING WITH LENGTH {len(data)}")

    def handle_unknown(self, position: int, length: int, marker: int, data: bytes) -> None:
        self._print(f"Unknown(0x{marker:X}):{len(data)}")
