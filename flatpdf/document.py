from __future__ import annotations

import zlib

from .constants import PDF_HEADER


def pdf_escape_literal(data: bytes) -> bytes:
    # PDF literal string escaping.
    return data.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")


def format_number(value: float) -> bytes:
    """Format a coordinate with at most 4 decimals and no trailing zeros."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text.encode("ascii")


def stream_object(data: bytes, entries: bytes = b"", compress: bool = False) -> bytes:
    """Build a stream object body; ``entries`` are extra dictionary entries."""
    if compress:
        data = zlib.compress(data, 6)
    head = b"<< " + (entries + b" " if entries else b"") + b"/Length %d" % len(data)
    if compress:
        head += b" /Filter /FlateDecode"
    return head + b" >>\nstream\n" + data + b"\nendstream"


class PdfDocument:
    """
    Flat object table for one PDF file.

    Object 1 is the Catalog and object 2 the page tree root; every other id
    comes from ``allocate_id``. ``output`` assembles header, objects, xref
    table and trailer and can be called any number of times.
    """

    def __init__(self):
        self._objects: dict[int, bytes] = {}
        self._object_count = 0
        self._page_ids: list[int] = []
        self.catalog_id = self.allocate_id()
        self.pages_id = self.allocate_id()

    @property
    def object_count(self) -> int:
        return self._object_count

    @property
    def page_ids(self) -> list[int]:
        return list(self._page_ids)

    def allocate_id(self) -> int:
        self._object_count += 1
        return self._object_count

    def set_object(self, obj_id: int, body: bytes) -> None:
        self._objects[obj_id] = body

    def get_object(self, obj_id: int) -> bytes | None:
        return self._objects.get(obj_id)

    def add_page(self, page_id: int) -> None:
        self._page_ids.append(page_id)

    def output(self) -> bytes:
        self.set_object(self.catalog_id, b"<< /Type /Catalog /Pages %d 0 R >>" % self.pages_id)
        kids = b" ".join(b"%d 0 R" % pid for pid in self._page_ids)
        self.set_object(
            self.pages_id,
            b"<< /Type /Pages /Kids [" + kids + b"] /Count %d >>" % len(self._page_ids),
        )

        parts: list[bytes] = [PDF_HEADER]
        offset = len(PDF_HEADER)
        offsets: list[int] = []

        for obj_id in range(1, self._object_count + 1):
            offsets.append(offset)
            body = self._objects.get(obj_id, b"<< >>")
            obj = b"%d 0 obj\n" % obj_id + body + b"\nendobj\n"
            parts.append(obj)
            offset += len(obj)

        xref_offset = offset
        parts.append(b"xref\n")
        parts.append(b"0 %d\n" % (self._object_count + 1))
        parts.append(b"0000000000 65535 f \n")
        for off in offsets:
            parts.append(b"%010d 00000 n \n" % off)

        parts.append(
            b"trailer\n"
            + b"<< /Size %d /Root %d 0 R >>\n" % (self._object_count + 1, self.catalog_id)
            + b"startxref\n"
            + b"%d\n" % xref_offset
            + b"%%EOF\n"
        )
        return b"".join(parts)
