import re
import struct
import zlib

_STREAM_RE = re.compile(rb"<<([^\n]*?)>>\nstream\n(.*?)\nendstream", re.DOTALL)


def make_jpeg(width: int, height: int, channels: int = 3, progressive: bool = False, bits: int = 8) -> bytes:
    """Smallest marker layout the parser needs: SOI, APP0 (JFIF), SOFn, EOI."""
    soi = b"\xff\xd8"
    app0 = b"\xff\xe0" + struct.pack(">H", 16) + b"JFIF\x00" + b"\x01\x01\x00" + struct.pack(">HH", 1, 1) + b"\x00\x00"
    components = b"".join(bytes([i + 1, 0x11, 0]) for i in range(channels))
    marker = b"\xff\xc2" if progressive else b"\xff\xc0"
    sof = marker + struct.pack(">HBHHB", 8 + 3 * channels, bits, height, width, channels) + components
    return soi + app0 + sof + b"\xff\xd9"


def content_streams(pdf_bytes: bytes) -> list[bytes]:
    """Decoded page content streams (image streams are skipped)."""
    streams = []
    for entries, data in _STREAM_RE.findall(pdf_bytes):
        if b"/Subtype /Image" in entries:
            continue
        if b"/FlateDecode" in entries:
            data = zlib.decompress(data)
        streams.append(data)
    return streams


def all_content(pdf_bytes: bytes) -> bytes:
    return b"\n".join(content_streams(pdf_bytes))
