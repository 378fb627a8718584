"""Unit tests for the text and JSON output handlers."""
import io
import json

from jfifdump import read, TextFormat, JsonFormat

SOI = b"\xFF\xD8"
EOI = b"\xFF\xD9"


def segment(marker: int, payload: bytes) -> bytes:
    return bytes([0xFF, marker]) + (len(payload) + 2).to_bytes(2, "big") + payload


JFIF = segment(0xE0, b"JFIF\x00\x01\x02\x01\x00\x48\x00\x48\x00\x00")
DQT = segment(0xDB, b"\x00" + bytes(range(64)))
DHT = segment(0xC4, b"\x10" + bytes([0, 2] + [0] * 14) + b"\x01\x02")
SOF = segment(0xC0, b"\x08\x00\x20\x00\x40\x01\x01\x11\x00")
SOS = segment(0xDA, b"\x01\x01\x01\x00\x3F\x00") + b"\x12\xFF\x00\x34"
COM = segment(0xFE, b"made by hand")

IMAGE = SOI + JFIF + DQT + DHT + SOF + SOS + EOI


def render_text(data: bytes, verbose: bool = False) -> str:
    out = io.StringIO()
    read(io.BytesIO(data), TextFormat(verbose, out=out))
    return out.getvalue()


def render_json(data: bytes, verbose: bool = False) -> list:
    handler = JsonFormat(verbose)
    read(io.BytesIO(data), handler)
    return json.loads(handler.stringify())


class TestTextFormat:
    """Tests for TextFormat."""

    def test_image(self):
        """Every segment of a small image is printed in order."""
        lines = render_text(IMAGE).splitlines()

        assert lines == [
            "SOI",
            "App(0x0): JFIF",
            "  Version: 1.02",
            "  Density: 72x72 dots per inch",
            "  Thumbnail: 0x0",
            "DQT:",
            "  0: Precision 0",
            "DHT:",
            "  Table 0: Class 1",
            "Frame: Baseline DCT",
            "  Precision: 8",
            "  Dimension: 64x32",
            "  Component(1): Sampling 1x1 Quantization: 0",
            "Scan:",
            "  Component: 1 DC:0 AC:1",
            "  Selection: 0 to 63",
            "  Approximation: 0 to 0",
            "  Data: 4 bytes",
            "EOI",
        ]

    def test_verbose_dqt_grid(self):
        """Verbose mode prints the 64 table values 8 per row."""
        lines = render_text(SOI + DQT, verbose=True).splitlines()

        assert lines[3] == "      0,   1,   2,   3,   4,   5,   6,   7"
        assert lines[10] == "     56,  57,  58,  59,  60,  61,  62,  63"

    def test_verbose_dht_code_lengths(self):
        """Verbose mode prints the code length counts."""
        text = render_text(SOI + DHT, verbose=True)

        assert "    Code lengths: 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0" in text

    def test_comment(self):
        """Comments are printed as text, invalid UTF-8 as its length."""
        assert "Comment: made by hand" in render_text(SOI + COM)
        assert "Comment: BAD STRING WITH LENGTH 2" in render_text(SOI + segment(0xFE, b"\xC3\x28"))

    def test_restart_and_unknown(self):
        """DRI, RSTn and unknown markers have one line each."""
        data = SOI + segment(0xDD, b"\x00\x08") + SOS + b"\xFF\xD3\xAA" + segment(0xF2, b"\x00\x01") + EOI
        lines = render_text(data).splitlines()

        assert "DRI: 8" in lines
        assert "RST(3): Data: 1 bytes" in lines
        assert "Unknown(0xF2):2" in lines


class TestJsonFormat:
    """Tests for JsonFormat."""

    def test_image(self):
        """One object per segment with position, length and marker."""
        markers = render_json(IMAGE)

        assert [m["marker"] for m in markers] == [
            "SOI", "App(0x0):JFIF", "DQT", "DHT", "SOF", "SOS", "EOI",
        ]
        assert markers[0]["position"] == 2
        assert markers[1]["position"] == 4
        assert markers[1]["length"] == 14
        assert markers[1]["density"] == {"unit": "dpi", "x": 72, "y": 72}
        assert markers[4]["type"] == "Baseline DCT"
        assert markers[4]["dimension"] == {"width": 64, "height": 32}
        assert markers[5]["size"] == 4
        assert "data" not in markers[5]

    def test_verbose_includes_data(self):
        """Raw bytes are only included in verbose mode."""
        markers = render_json(IMAGE, verbose=True)

        dqt = markers[2]["tables"][0]
        assert dqt["data"] == list(range(64))
        dht = markers[3]["tables"][0]
        assert dht["class"] == 1
        assert dht["values"] == [1, 2]
        assert markers[5]["data"] == [0x12, 0xFF, 0x00, 0x34]

    def test_app_and_comment(self):
        """Raw APPn shows a printable start, comments their text."""
        data = SOI + segment(0xE1, b"Exif\x00\x00") + COM + segment(0xFE, b"\xFF") + EOI
        markers = render_json(data)

        assert markers[1]["marker"] == "App(0x1)"
        assert markers[1]["start"] == "Exif\\x00\\x00"
        assert markers[2]["text"] == "made by hand"
        assert markers[3]["raw"] == [255]

    def test_dac_dri_rst(self):
        """DAC params, restart interval and restart markers."""
        data = (
            SOI + segment(0xCC, b"\x11\x05") + segment(0xDD, b"\x00\x02")
            + SOS + b"\xFF\xD0\x01\x02" + EOI
        )
        markers = render_json(data)

        assert markers[1] == {
            "position": 4, "length": 2, "marker": "DAC",
            "params": [{"class": 1, "dest": 1, "param": 5}],
        }
        assert markers[2]["restart"] == 2
        assert markers[4]["marker"] == "RST(0)"
        assert markers[4]["size"] == 2

    def test_approximation_nibbles(self):
        """The high nibble is reported as low, the low nibble as high."""
        data = SOI + segment(0xDA, b"\x01\x01\x00\x01\x05\x21") + EOI

        assert render_json(data)[1]["approximation"] == {"low": 2, "high": 1}
        assert "  Approximation: 2 to 1" in render_text(data).splitlines()
