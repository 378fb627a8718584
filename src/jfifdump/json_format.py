from __future__ import annotations
import json
from typing import Any, Dict, List

from .marker import printable_prefix
from .primitives import App0Jfif, Dqt, Dht, Dac, Frame, Scan, Rst

UNIT_NAMES = {
    0: "pixel",
    1: "dpi",
    2: "dpcm",
}


class JsonFormat:
    """Collects one JSON object per segment; `stringify()` renders the array.

    Raw byte payloads are only included when `verbose` is set.
    """

    def __init__(self, verbose: bool = False):
        self.markers: List[Dict[str, Any]] = []
        self.verbose = verbose

    def _add(self, position: int, length: int, marker: str, **fields) -> Dict[str, Any]:
        value = {"position": position, "length": length, "marker": marker}
        value.update(fields)
        self.markers.append(value)
        return value

    def stringify(self) -> str:
        return json.dumps(self.markers, indent=4)

    def handle_soi(self, position: int, length: int) -> None:
        self._add(position, length, "SOI")

    def handle_eoi(self, position: int, length: int) -> None:
        self._add(position, length, "EOI")

    def handle_app(self, position: int, length: int, nr: int, data: bytes) -> None:
        value = self._add(position, length, f"App(0x{nr:X})", start=printable_prefix(data, 20))
        if self.verbose:
            value["data"] = list(data)

    def handle_app0_jfif(self, position: int, length: int, jfif: App0Jfif) -> None:
        density = {
            "unit": UNIT_NAMES.get(jfif.unit, f"unknown {jfif.unit}"),
            "x": jfif.x_density,
            "y": jfif.y_density,
        }
        thumbnail = {"width": jfif.x_thumbnail, "height": jfif.y_thumbnail}
        if self.verbose and jfif.thumbnail is not None:
            thumbnail["data"] = list(jfif.thumbnail)

        self._add(
            position, length, "App(0x0):JFIF",
            version={"major": jfif.major, "minor": jfif.minor},
            density=density,
            thumbnail=thumbnail,
        )

    def handle_dqt(self, position: int, length: int, tables: List[Dqt]) -> None:
        values = []
        for table in tables:
            t_value = {"dest": table.dest, "precision": table.precision}
            if self.verbose:
                t_value["data"] = list(table.values)
            values.append(t_value)

        self._add(position, length, "DQT", tables=values)

    def handle_dht(self, position: int, length: int, tables: List[Dht]) -> None:
        values = []
        for table in tables:
            t_value = {"class": table.table_class, "dest": table.dest}
            if self.verbose:
                t_value["code_lengths"] = list(table.code_lengths)
                t_value["values"] = list(table.values)
            values.append(t_value)

        self._add(position, length, "DHT", tables=values)

    def handle_dac(self, position: int, length: int, dac: Dac) -> None:
        params = [
            {"class": param.table_class, "dest": param.dest, "param": param.value}
            for param in dac.params
        ]
        self._add(position, length, "DAC", params=params)

    def handle_frame(self, position: int, length: int, frame: Frame) -> None:
        components = [
            {
                "id": component.id,
                "sampling_factor": {
                    "horizontal": component.horizontal_sampling_factor,
                    "vertical": component.vertical_sampling_factor,
                },
                "quantization_table": component.quantization_table,
            }
            for component in frame.components
        ]
        self._add(
            position, length, "SOF",
            type=frame.sof_name,
            precision=frame.precision,
            dimension={"width": frame.dimension_x, "height": frame.dimension_y},
            components=components,
        )

    def handle_scan(self, position: int, length: int, scan: Scan) -> None:
        components = [
            {"id": component.id, "dc_table": component.dc_table, "ac_table": component.ac_table}
            for component in scan.components
        ]
        value = self._add(
            position, length, "SOS",
            components=components,
            selection={"start": scan.selection_start, "end": scan.selection_end},
            approximation={"low": scan.approximation_low, "high": scan.approximation_high},
            size=len(scan.data),
        )
        if self.verbose:
            value["data"] = list(scan.data)

    def handle_dri(self, position: int, length: int, restart: int) -> None:
        self._add(position, length, "DRI", restart=restart)

    def handle_rst(self, position: int, length: int, rst: Rst) -> None:
        value = self._add(position, length, f"RST({rst.nr})", size=len(rst.data))
        if self.verbose:
            value["data"] = list(rst.data)

    def handle_comment(self, position: int, length: int, data: bytes) -> None:
        try:
            self._add(position, length, "COM", text=data.decode("utf-8"))
        except UnicodeDecodeError:
            self._add(position, length, "COM", raw=list(data))

    def handle_unknown(self, position: int, length: int, marker: int, data: bytes) -> None:
        value = self._add(position, length, f"Marker(0x{marker:X})", size=len(data))
        if self.verbose:
            value["data"] = list(data)
