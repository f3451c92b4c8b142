"""
Page/stream writer: the public drawing surface of flatpdf.

``FlatPdf`` keeps one active page at a time. Drawing calls append content
operators to that page's buffer and move a top-down cursor; when the next
block would cross the bottom margin a new page is started. Sealed page
streams are kept raw until ``output()`` so that the total page count can be
substituted into the page-number text.

Usage::

    pdf = FlatPdf(Style.compact())
    pdf.h1("Report")
    widths = pdf.table(["Name", "Total"], rows)
    pdf.summary_row(["", "1,234"], widths)
    pdf.save("out/report.pdf")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from .constants import PAGE_TOTAL_PLACEHOLDER, RULE_COLOR
from .document import PdfDocument, format_number, pdf_escape_literal, stream_object
from .encoding import encode_winansi
from .errors import DocumentFinalizedError, ImageReadError, StorageCapabilityError
from .fonts import FontRegistry, resolve_font_name
from .images import ImageStore, compute_display_size
from .metrics import string_width, word_wrap
from .models import (
    DataTableOptions,
    EmbeddedImage,
    ImageOptions,
    PageState,
    SummaryRowOptions,
    TableOptions,
    merge_options,
)
from .style import Style, to_rgb
from .tables import TableRenderer

log = logging.getLogger(__name__)


def _color_ops(rgb) -> bytes:
    return b" ".join(format_number(c) for c in rgb)


class FlatPdf:
    def __init__(self, style: Style | None = None):
        self.style = style or Style()
        self.doc = PdfDocument()
        self.fonts = FontRegistry(self.doc)
        self.fonts.preload()
        self.images = ImageStore(self.doc)
        self._tables = TableRenderer(self)
        self._page: PageState | None = None
        self._page_count = 0
        # content object id -> raw stream of a sealed page
        self._page_streams: dict[int, bytes] = {}
        self._finished = False
        self.new_page()

    @classmethod
    def make(cls, style: Style | None = None) -> "FlatPdf":
        return cls(style)

    # Page management

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def cursor_x(self) -> float:
        return self._page.cursor_x

    @property
    def cursor_y(self) -> float:
        return self._page.cursor_y

    @cursor_y.setter
    def cursor_y(self, value: float) -> None:
        self._page.cursor_y = value

    def _check_open(self) -> None:
        if self._finished:
            raise DocumentFinalizedError("document was already output; no further drawing is possible")

    def new_page(self) -> None:
        self._check_open()
        if self._page is not None:
            self._finalize_page()

        self._page_count += 1
        page_id = self.doc.allocate_id()
        content_id = self.doc.allocate_id()
        self._page = PageState(
            page_id=page_id,
            content_id=content_id,
            number=self._page_count,
            cursor_x=self.style.margin_left,
            cursor_y=self.style.top_y,
        )
        self.doc.add_page(page_id)
        log.debug("page %d started (obj %d, content %d)", self._page_count, page_id, content_id)

    def page_break(self) -> None:
        self.new_page()

    def ensure_space(self, height: float) -> bool:
        """Start a new page unless ``height`` points fit above the bottom margin."""
        self._check_open()
        if self._page.cursor_y - height < self.style.bottom_y:
            self.new_page()
            return True
        return False

    def _finalize_page(self) -> None:
        page = self._page
        self._render_header_footer()
        self._page_streams[page.content_id] = page.stream()

        s = self.style
        resources = b"/Font " + self.fonts.resource_dict()
        if page.images:
            entries = []
            for name in page.images:
                image = self.images.get(name)
                entries.append(b"/%s %d 0 R" % (name.encode("ascii"), image.obj_id))
            resources += b" /XObject << " + b" ".join(entries) + b" >>"

        self.doc.set_object(
            page.page_id,
            b"<< /Type /Page /Parent %d 0 R " % self.doc.pages_id
            + b"/MediaBox [0 0 " + format_number(s.page_width) + b" " + format_number(s.page_height) + b"] "
            + b"/Contents %d 0 R " % page.content_id
            + b"/Resources << " + resources + b" >> >>",
        )
        log.debug("page %d sealed (%d stream bytes, %d images)",
                  page.number, len(self._page_streams[page.content_id]), len(page.images))

    def _render_header_footer(self) -> None:
        s = self.style
        page = self._page

        if s.show_page_numbers:
            text = s.page_number_format.replace("{page}", str(page.number))
            text = text.replace("{pages}", PAGE_TOTAL_PLACEHOLDER)
            self.set_font("Helvetica", s.header_footer_font_size)
            self.set_fill_color(s.header_footer_color)
            width = string_width(text.replace(PAGE_TOTAL_PLACEHOLDER, "000"), "Helvetica", s.header_footer_font_size)
            self.draw_text(s.page_width - s.margin_right - width, s.margin_bottom - 20, text)

        if s.header_text:
            self.set_font("Helvetica", s.header_footer_font_size)
            self.set_fill_color(s.header_footer_color)
            self.draw_text(s.margin_left, s.page_height - s.margin_top + 15, s.header_text)
            line_y = s.page_height - s.margin_top + 8
            self.set_stroke(s.header_footer_color, 0.5)
            self.stroke_line(s.margin_left, line_y, s.page_width - s.margin_right, line_y)

        if s.footer_text:
            self.set_font("Helvetica", s.header_footer_font_size)
            self.set_fill_color(s.header_footer_color)
            self.draw_text(s.margin_left, s.margin_bottom - 20, s.footer_text)

    # Low-level drawing primitives

    def _emit(self, op: bytes) -> None:
        self._check_open()
        self._page.write(op)

    def body_font(self, bold: bool = False, italic: bool = False) -> str:
        return resolve_font_name(self.style.font_family, bold=bold, italic=italic)

    def set_font(self, font_name: str, size: float) -> None:
        page = self._page
        if page.active_font == font_name and page.active_size == size:
            return
        resource = self.fonts.resource_for(font_name)
        self._emit(b"BT /%s %s Tf ET\n" % (resource.encode("ascii"), format_number(size)))
        page.active_font = font_name
        page.active_size = size

    def set_fill_color(self, rgb) -> None:
        rgb = to_rgb(rgb)
        page = self._page
        if page.active_color == rgb:
            return
        self._emit(_color_ops(rgb) + b" rg\n")
        page.active_color = rgb

    def invalidate_color(self) -> None:
        self._page.active_color = None

    def set_stroke(self, rgb, width: float) -> None:
        rgb = to_rgb(rgb)
        page = self._page
        if page.active_stroke == rgb and page.active_line_width == width:
            return
        self._emit(_color_ops(rgb) + b" RG " + format_number(width) + b" w\n")
        page.active_stroke = rgb
        page.active_line_width = width

    def draw_text(self, x: float, y: float, text: str | bytes) -> None:
        self._emit(
            b"BT " + format_number(x) + b" " + format_number(y) + b" Td ("
            + pdf_escape_literal(encode_winansi(text)) + b") Tj ET\n"
        )

    def fill_rect(self, x: float, y: float, w: float, h: float, rgb) -> None:
        """Filled rectangle; leaves the fill color unknown to the state cache."""
        self._emit(_color_ops(to_rgb(rgb)) + b" rg\n")
        self._emit(b" ".join(format_number(v) for v in (x, y, w, h)) + b" re f\n")
        self.invalidate_color()

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._emit(
            b"%s %s m %s %s l S\n"
            % (format_number(x1), format_number(y1), format_number(x2), format_number(y2))
        )

    def _rule(self, y: float, width: float) -> None:
        s = self.style
        self.set_stroke(RULE_COLOR, width)
        self.stroke_line(s.margin_left, y, s.page_width - s.margin_right, y)

    # Text

    def text(
        self,
        text: str,
        font: str | None = None,
        size: float | None = None,
        color=None,
    ) -> None:
        """
        Write word-wrapped text at the cursor.

        Each ``\\n`` starts a new paragraph separated by the paragraph spacing;
        a blank paragraph only advances the cursor by one line.
        """
        self._check_open()
        s = self.style
        font = resolve_font_name(font) if font is not None else self.body_font()
        size = size if size is not None else s.font_size
        color = to_rgb(color) if color is not None else s.text_color
        line_spacing = size * s.line_height
        max_width = s.content_width

        paragraphs = text.split("\n")
        for index, paragraph in enumerate(paragraphs):
            if paragraph.strip() == "":
                self.ensure_space(line_spacing)
                self.cursor_y -= line_spacing
                continue

            for line in word_wrap(paragraph, font, size, max_width):
                self.ensure_space(line_spacing)
                self.set_font(font, size)
                self.set_fill_color(color)
                self.draw_text(self.cursor_x, self.cursor_y, line)
                self.cursor_y -= line_spacing

            if index < len(paragraphs) - 1:
                self.cursor_y -= s.paragraph_spacing

    def bold(self, text: str, size: float | None = None, color=None) -> None:
        self.text(text, self.body_font(bold=True), size, color)

    def italic(self, text: str, size: float | None = None, color=None) -> None:
        self.text(text, self.body_font(italic=True), size, color)

    def code(self, text: str, size: float | None = None) -> None:
        self.text(text, "Courier", size if size is not None else self.style.font_size * 0.9)

    def h1(self, text: str) -> None:
        self._heading(text, self.style.h1_size, underline=True)

    def h2(self, text: str) -> None:
        self._heading(text, self.style.h2_size)

    def h3(self, text: str) -> None:
        self._heading(text, self.style.h3_size)

    def _heading(self, text: str, size: float, underline: bool = False) -> None:
        s = self.style
        line_spacing = size * s.line_height
        # Extra 20pt keeps a heading from being stranded at the page bottom.
        self.ensure_space(s.heading_space_before + line_spacing + s.heading_space_after + 20)
        self.cursor_y -= s.heading_space_before

        self.set_font(self.body_font(bold=True), size)
        self.set_fill_color(s.heading_color)
        self.draw_text(self.cursor_x, self.cursor_y, text)
        self.cursor_y -= line_spacing

        if underline:
            self._rule(self.cursor_y + 2, 0.75)

        self.cursor_y -= s.heading_space_after

    def hr(self) -> None:
        self.ensure_space(12)
        self.cursor_y -= 6
        self._rule(self.cursor_y, 0.5)
        self.cursor_y -= 6

    def space(self, points: float = 10) -> None:
        self._check_open()
        self.cursor_y -= points
        if self.cursor_y < self.style.bottom_y:
            self.new_page()

    # Tables

    def table(
        self,
        headers: Sequence[Any],
        rows: Sequence[Sequence[Any]],
        options: TableOptions | None = None,
        **overrides,
    ) -> list[float]:
        """Draw a table and return the column widths it used."""
        self._check_open()
        opts = merge_options(options, TableOptions, overrides)
        return self._tables.render_table(headers, rows, opts)

    def data_table(
        self,
        data: Sequence[Mapping[str, Any]],
        options: DataTableOptions | None = None,
        **overrides,
    ) -> list[float]:
        """Draw a table from records; headers come from the keys of the first record."""
        self._check_open()
        opts = merge_options(options, DataTableOptions, overrides)
        return self._tables.render_data_table(data, opts)

    def summary_row(
        self,
        values: Sequence[Any],
        col_widths: Sequence[float],
        options: SummaryRowOptions | None = None,
        **overrides,
    ) -> None:
        self._check_open()
        opts = merge_options(options, SummaryRowOptions, overrides)
        self._tables.render_summary_row(values, col_widths, opts)

    # Images

    def image(
        self,
        path: str | Path,
        width: float | None = None,
        height: float | None = None,
        options: ImageOptions | None = None,
        **overrides,
    ) -> EmbeddedImage:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ImageReadError(str(path), exc.strerror or type(exc).__name__) from exc
        return self.image_from_bytes(data, width, height, options, **overrides)

    def image_from_bytes(
        self,
        data: bytes,
        width: float | None = None,
        height: float | None = None,
        options: ImageOptions | None = None,
        **overrides,
    ) -> EmbeddedImage:
        self._check_open()
        opts = merge_options(options, ImageOptions, overrides)
        s = self.style
        image = self.images.embed(bytes(data))

        w, h = compute_display_size(
            image.pixel_width,
            image.pixel_height,
            s.content_width,
            s.content_height,
            width=width,
            height=height,
            dpi=opts.dpi,
        )
        self.ensure_space(h)

        if opts.align == "center":
            x = s.margin_left + (s.content_width - w) / 2
        elif opts.align == "right":
            x = s.page_width - s.margin_right - w
        else:
            if opts.align != "left":
                log.warning("unknown image alignment %r; using left", opts.align)
            x = s.margin_left
        y = self.cursor_y - h

        self._emit(b"q\n")
        self._emit(b"%s 0 0 %s %s %s cm\n" % (format_number(w), format_number(h), format_number(x), format_number(y)))
        self._emit(b"/%s Do\n" % image.name.encode("ascii"))
        self._emit(b"Q\n")

        if image.name not in self._page.images:
            self._page.images.append(image.name)

        self.cursor_y -= h
        self.cursor_y -= s.paragraph_spacing
        return image

    def image_from_storage(
        self,
        storage: Any,
        path: str,
        width: float | None = None,
        height: float | None = None,
        options: ImageOptions | None = None,
        **overrides,
    ) -> EmbeddedImage:
        """
        Draw a JPEG fetched from any object with a ``get(path)`` method that
        returns the bytes, or ``None`` when the path does not exist.
        """
        get = getattr(storage, "get", None)
        if not callable(get):
            raise StorageCapabilityError(
                f"storage object {type(storage).__name__} has no callable get(path) method"
            )
        try:
            data = get(path)
        except OSError as exc:
            raise ImageReadError(path, str(exc)) from exc
        if data is None or data is False:
            raise ImageReadError(path)
        return self.image_from_bytes(data, width, height, options, **overrides)

    # Output

    def output(self) -> bytes:
        """Seal the document and return the PDF bytes; safe to call repeatedly."""
        if not self._finished:
            self._finalize_page()
            self._finished = True
            log.debug("document finalized with %d pages", self._page_count)

        total = str(self._page_count).encode("ascii")
        placeholder = PAGE_TOTAL_PLACEHOLDER.encode("ascii")
        for content_id, raw in self._page_streams.items():
            data = raw.replace(placeholder, total)
            self.doc.set_object(content_id, stream_object(data, compress=self.style.compress))

        return self.doc.output()

    def save(self, path: str | Path) -> Path:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(self.output())
        return out_path

    def current_page(self) -> int:
        return self._page_count

    def remaining_space(self) -> float:
        return self._page.cursor_y - self.style.bottom_y
