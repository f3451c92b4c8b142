"""
JPEG embedding: header parsing, content-hash deduplication and display sizing.

Only baseline/extended/progressive JPEG (SOF0..SOF2) is understood; the raw
file is stored unchanged as a ``/DCTDecode`` image XObject.
"""

from __future__ import annotations

import hashlib
import logging
import struct

from .document import PdfDocument, stream_object
from .errors import ImageFormatError
from .models import EmbeddedImage, JpegInfo

log = logging.getLogger(__name__)

_SOI = b"\xff\xd8"
_SOF_MARKERS = (0xC0, 0xC1, 0xC2)
_EOI = 0xD9
_COLOR_SPACES = {1: "/DeviceGray", 3: "/DeviceRGB", 4: "/DeviceCMYK"}


def parse_jpeg_metadata(data: bytes) -> JpegInfo:
    """Scan marker segments up to the first start-of-frame and read its header."""
    if len(data) < 2 or data[:2] != _SOI:
        raise ImageFormatError("Invalid JPEG data: missing SOI marker.")

    offset = 2
    length = len(data)
    while offset < length - 1:
        if data[offset] != 0xFF:
            raise ImageFormatError(f"Invalid JPEG structure at offset {offset}")

        marker = data[offset + 1]
        if marker == 0xFF:
            # fill byte
            offset += 1
            continue

        if marker in _SOF_MARKERS:
            if offset + 9 >= length:
                raise ImageFormatError("Truncated JPEG SOF segment.")
            bits, height, width, channels = struct.unpack_from(">BHHB", data, offset + 4)
            if width == 0 or height == 0:
                raise ImageFormatError(f"Invalid JPEG frame size {width}x{height}.")
            return JpegInfo(
                width=width,
                height=height,
                color_space=_COLOR_SPACES.get(channels, "/DeviceRGB"),
                bits_per_component=bits,
            )

        if marker == _EOI:
            break

        # standalone markers: stuffed zero and RST0..RST7
        if marker == 0x00 or 0xD0 <= marker <= 0xD7:
            offset += 2
            continue

        if offset + 3 >= length:
            break
        (segment_length,) = struct.unpack_from(">H", data, offset + 2)
        offset += 2 + segment_length

    raise ImageFormatError(
        "Could not find SOF marker in JPEG data. The file may be corrupted or not a JPEG."
    )


def compute_display_size(
    pixel_width: int,
    pixel_height: int,
    max_width: float,
    max_height: float,
    width: float | None = None,
    height: float | None = None,
    dpi: float = 72.0,
) -> tuple[float, float]:
    """
    Resolve the drawn size of an image in points.

    A single given dimension keeps the pixel aspect ratio; with neither, the
    natural size at ``dpi`` is used. The result is then scaled down to fit
    ``max_width`` and afterwards ``max_height`` so that an image never needs
    more than one page.
    """
    if width is not None and height is not None:
        w, h = float(width), float(height)
    elif width is not None:
        w = float(width)
        h = w * (pixel_height / pixel_width)
    elif height is not None:
        h = float(height)
        w = h * (pixel_width / pixel_height)
    else:
        w = pixel_width / dpi * 72.0
        h = pixel_height / dpi * 72.0

    if w > max_width:
        scale = max_width / w
        w = max_width
        h *= scale

    if h > max_height:
        scale = max_height / h
        h = max_height
        w *= scale

    return w, h


class ImageStore:
    """Image XObjects of one document, stored once per distinct byte content."""

    def __init__(self, doc: PdfDocument):
        self.doc = doc
        self._by_hash: dict[str, EmbeddedImage] = {}
        self._by_name: dict[str, EmbeddedImage] = {}

    def __len__(self) -> int:
        return len(self._by_hash)

    def get(self, name: str) -> EmbeddedImage | None:
        return self._by_name.get(name)

    def embed(self, data: bytes) -> EmbeddedImage:
        digest = hashlib.sha256(data).hexdigest()
        cached = self._by_hash.get(digest)
        if cached is not None:
            log.debug("image %s already embedded as /%s", digest[:12], cached.name)
            return cached

        # Parse first: a malformed file must not allocate an object.
        info = parse_jpeg_metadata(data)

        name = f"Im{len(self._by_hash) + 1}"
        obj_id = self.doc.allocate_id()
        entries = (
            b"/Type /XObject /Subtype /Image /Width %d /Height %d /ColorSpace %s"
            b" /BitsPerComponent %d /Filter /DCTDecode"
            % (info.width, info.height, info.color_space.encode("ascii"), info.bits_per_component)
        )
        self.doc.set_object(obj_id, stream_object(data, entries))

        image = EmbeddedImage(name=name, obj_id=obj_id, pixel_width=info.width, pixel_height=info.height)
        self._by_hash[digest] = image
        self._by_name[name] = image
        log.debug(
            "embedded image /%s %dx%d %s (obj %d, %d bytes)",
            name, info.width, info.height, info.color_space, obj_id, len(data),
        )
        return image
