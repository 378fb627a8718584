# --------------------------------------------------------------
# |segment name|marker value|has length|description             |
# --------------------------------------------------------------
# |SOI         |0xFFD8      |No        | start of image         |
# |EOI         |0xFFD9      |No        | end of image           |
# |RSTn        |0xFFD0-D7   |No        | restart, entropy data  |
# |SOS         |0xFFDA      |Yes       | start of scan          |
# |DQT         |0xFFDB      |Yes       | quantization table     |
# |DRI         |0xFFDD      |Yes       | restart interval       |
# |DHT         |0xFFC4      |Yes       | huffman table          |
# |DAC         |0xFFCC      |Yes       | arithmetic conditioning|
# |SOFn        |0xFFC0-CF   |Yes       | start of frame         |
# |APPn        |0xFFE0-EF   |Yes       | application data       |
# |COM         |0xFFFE      |Yes       | comment                |
# --------------------------------------------------------------
# The 2 length bytes count themselves, so the payload is length - 2 bytes.
# SOS and RSTn are followed by entropy-coded data that runs up to the next marker.

MARKER_PREFIX = 0xFF
STUFFING = 0x00

SOI_MARKER = 0xD8
EOI_MARKER = 0xD9
SOS_MARKER = 0xDA
DQT_MARKER = 0xDB
DRI_MARKER = 0xDD
DHT_MARKER = 0xC4
DAC_MARKER = 0xCC
COM_MARKER = 0xFE
RST0_MARKER = 0xD0
RST7_MARKER = 0xD7
APP0_MARKER = 0xE0
APP15_MARKER = 0xEF

JFIF_IDENTIFIER = b"JFIF\x00"
# identifier(5) version(2) unit(1) density(4) thumbnail size(2)
JFIF_HEADER_SIZE = 14

SOF_NAMES = {
    0xC0: "Baseline DCT",
    0xC1: "Extended sequential DCT",
    0xC2: "Progressive DCT",
    0xC3: "Lossless",
    0xC5: "Differential sequential DCT",
    0xC6: "Differential progressive DCT",
    0xC7: "Differential lossless",
    0xC9: "Extended sequential DCT arithmetic",
    0xCA: "Progressive DCT arithmetic",
    0xCB: "Lossless arithmetic coding",
    0xCD: "Differential sequential DCT arithmetic",
    0xCE: "Differential progressive DCT arithmetic",
    0xCF: "Differential lossless arithmetic",
}


def is_sof(marker: int) -> bool:
    # 0xC4 (DHT), 0xC8 (reserved) and 0xCC (DAC) sit inside the range
    return marker in SOF_NAMES


def is_app(marker: int) -> bool:
    return APP0_MARKER <= marker <= APP15_MARKER


def is_rst(marker: int) -> bool:
    return RST0_MARKER <= marker <= RST7_MARKER


def sof_name(marker: int) -> str:
    return SOF_NAMES.get(marker, "Unknown")


def marker_info(marker: int) -> str:

    marker_dict = {
        SOI_MARKER: "Start of Image (SOI)",
        EOI_MARKER: "End of Image (EOI)",
        DQT_MARKER: "Define Quantization Table (DQT)",
        DHT_MARKER: "Define Huffman Table (DHT)",
        DAC_MARKER: "Define Arithmetic Conditioning (DAC)",
        SOS_MARKER: "Start of Scan (SOS)",
        DRI_MARKER: "Define Restart Interval (DRI)",
        COM_MARKER: "Comment (COM)",
    }

    if is_sof(marker):
        return f"Start of Frame {marker - 0xC0} (SOF{marker - 0xC0}) - {sof_name(marker)}"
    if is_app(marker):
        return f"Application Segment {marker - APP0_MARKER} (APP{marker - APP0_MARKER})"
    if is_rst(marker):
        return f"Restart {marker - RST0_MARKER} (RST{marker - RST0_MARKER})"

    return marker_dict.get(marker, "Unknown Marker")


def printable_prefix(data: bytes, limit: int = 20) -> str:
    """First `limit` bytes of data, printable ASCII as is and the rest as \\xNN."""
    result = []
    for v in data[:limit]:
        if 0x20 <= v < 0x7F:
            result.append(chr(v))
        else:
            result.append(f"\\x{v:02X}")
    return "".join(result)
