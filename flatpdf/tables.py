"""
Table layout: column sizing, wrapped row heights and paginated row drawing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .constants import ALIGNMENTS, DEFAULT_MIN_COLUMN_WIDTH
from .metrics import string_width, word_wrap
from .models import DataTableOptions, SummaryRowOptions, TableOptions, cell_to_text

if TYPE_CHECKING:
    from .writer import FlatPdf

log = logging.getLogger(__name__)


def auto_column_widths(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    available_width: float,
    font_size: float,
    header_font: str,
    body_font: str,
    padding: float,
    min_widths: Sequence[float] = (),
    max_column_width: float | None = None,
) -> list[float]:
    """
    Size columns to their content and stretch or squeeze them to fill
    ``available_width`` exactly.

    Natural width is the widest header/cell plus padding, capped at
    ``max_column_width`` (half the available width by default). Spare room is
    shared in proportion to natural width. When the columns do not fit they
    shrink proportionally, never below their minimum, and a final uniform
    scale makes the sum come out exact.
    """
    col_count = len(headers)
    if col_count == 0:
        return []
    if max_column_width is None:
        max_column_width = available_width * 0.5

    natural: list[float] = []
    for c in range(col_count):
        w = string_width(headers[c], header_font, font_size) + 2 * padding
        for row in rows:
            value = row[c] if c < len(row) else ""
            w = max(w, string_width(value, body_font, font_size) + 2 * padding)
        natural.append(min(w, max_column_width))

    total_natural = sum(natural)
    if total_natural <= 0:
        return [available_width / col_count] * col_count

    if total_natural <= available_width:
        extra = available_width - total_natural
        return [w + (w / total_natural) * extra for w in natural]

    widths = []
    for c, w in enumerate(natural):
        min_w = min_widths[c] if c < len(min_widths) else DEFAULT_MIN_COLUMN_WIDTH
        widths.append(max((w / total_natural) * available_width, min_w))

    total = sum(widths)
    if total > 0:
        scale = available_width / total
        widths = [w * scale for w in widths]
    return widths


def calc_row_height(
    cells: Sequence[str],
    col_widths: Sequence[float],
    font: str,
    font_size: float,
    padding: float,
    line_height: float,
) -> float:
    max_lines = 1
    for c, width in enumerate(col_widths):
        text = cells[c] if c < len(cells) else ""
        lines = word_wrap(text, font, font_size, width - 2 * padding)
        max_lines = max(max_lines, len(lines))
    return max_lines * line_height + 2 * padding


def aligned_x(
    cell_x: float,
    cell_width: float,
    padding: float,
    text: str,
    font: str,
    font_size: float,
    align: str,
) -> float:
    """Left edge of ``text`` inside a cell for ``left``, ``center`` or ``right``."""
    if align == "right":
        return cell_x + cell_width - padding - string_width(text, font, font_size)
    if align == "center":
        return cell_x + (cell_width - string_width(text, font, font_size)) / 2
    return cell_x + padding


def headers_from_columns(columns: Sequence[str], labels: Mapping[str, str] | None = None) -> list[str]:
    """Header labels for record keys: ``first_name`` becomes ``First name``."""
    labels = labels or {}
    headers = []
    for col in columns:
        if col in labels:
            headers.append(labels[col])
            continue
        text = col.replace("_", " ")
        headers.append(text[:1].upper() + text[1:])
    return headers


def _normalize_row(row: Sequence[Any], col_count: int) -> list[str]:
    cells = [cell_to_text(v) for v in list(row)[:col_count]]
    cells.extend([""] * (col_count - len(cells)))
    return cells


def _column_align(aligns: Sequence[str], c: int) -> str:
    align = aligns[c] if c < len(aligns) else "left"
    if align not in ALIGNMENTS:
        log.warning("unknown column alignment %r; using left", align)
        return "left"
    return align


class TableRenderer:
    """Draws tables through the low-level primitives of a ``FlatPdf``."""

    def __init__(self, writer: FlatPdf):
        self.writer = writer

    @property
    def style(self):
        return self.writer.style

    def render_table(self, headers: Sequence[Any], rows: Sequence[Sequence[Any]], opts: TableOptions) -> list[float]:
        s = self.style
        w = self.writer
        headers = [cell_to_text(h) for h in headers]
        col_count = len(headers)
        if col_count == 0:
            log.debug("table without columns skipped")
            return []

        font_size = opts.font_size if opts.font_size is not None else s.table_font_size
        striped = opts.striped if opts.striped is not None else s.table_striped
        repeat_header = opts.repeat_header if opts.repeat_header is not None else s.table_repeat_header
        padding = s.table_cell_padding
        header_font = s.table_header_font
        body_font = w.body_font()
        line_height = font_size * s.line_height

        cells_by_row = [_normalize_row(row, col_count) for row in rows]

        if opts.column_widths is not None:
            col_widths = [float(x) for x in opts.column_widths]
            if len(col_widths) != col_count:
                raise ValueError(
                    f"column_widths has {len(col_widths)} entries for {col_count} columns"
                )
        else:
            col_widths = auto_column_widths(
                headers,
                cells_by_row,
                s.content_width,
                font_size,
                header_font,
                body_font,
                padding,
                min_widths=opts.column_min_widths,
                max_column_width=opts.max_column_width,
            )
        log.debug("table: %d columns, %d rows, widths=%s", col_count, len(cells_by_row),
                  ["%.1f" % x for x in col_widths])

        def render_header() -> None:
            row_height = calc_row_height(headers, col_widths, header_font, font_size, padding, line_height)
            w.ensure_space(row_height)
            self._draw_row(headers, col_widths, row_height, header_font, font_size, s.table_header_bg,
                           s.table_header_color, opts.column_aligns, line_height)

        render_header()

        for index, cells in enumerate(cells_by_row):
            row_height = calc_row_height(cells, col_widths, body_font, font_size, padding, line_height)
            if w.ensure_space(row_height) and repeat_header:
                render_header()
            background = s.table_alt_row_bg if striped and index % 2 == 1 else s.table_row_bg
            self._draw_row(cells, col_widths, row_height, body_font, font_size, background,
                           s.text_color, opts.column_aligns, line_height)

        w.cursor_y -= s.paragraph_spacing
        return col_widths

    def render_data_table(self, data: Sequence[Mapping[str, Any]], opts: DataTableOptions) -> list[float]:
        if not data:
            return []

        columns = list(opts.columns) if opts.columns is not None else list(data[0].keys())
        headers = headers_from_columns(columns, opts.column_labels)

        rows = []
        for record in data:
            row = []
            for col in columns:
                value = record.get(col, "")
                formatter = opts.formatters.get(col)
                if formatter is not None:
                    value = formatter(value)
                row.append(cell_to_text(value))
            rows.append(row)

        return self.render_table(headers, rows, opts)

    def render_summary_row(self, values: Sequence[Any], col_widths: Sequence[float], opts: SummaryRowOptions) -> None:
        s = self.style
        w = self.writer
        font_size = opts.font_size if opts.font_size is not None else s.table_font_size
        font = w.body_font(bold=True)
        padding = s.table_cell_padding
        row_height = font_size * s.line_height + 2 * padding

        w.ensure_space(row_height)
        x = s.margin_left
        y = w.cursor_y
        w.fill_rect(x, y - row_height, sum(col_widths), row_height, opts.background)

        for c, width in enumerate(col_widths):
            text = cell_to_text(values[c]) if c < len(values) else ""
            if text == "":
                x += width
                continue
            align = _column_align(opts.column_aligns, c)
            w.set_font(font, font_size)
            w.set_fill_color(s.heading_color)
            w.draw_text(aligned_x(x, width, padding, text, font, font_size, align), y - padding - font_size, text)
            x += width

        self._draw_borders(y, col_widths, row_height)
        w.cursor_y = y - row_height

    def _draw_row(
        self,
        cells: Sequence[str],
        col_widths: Sequence[float],
        row_height: float,
        font: str,
        font_size: float,
        background,
        text_color,
        aligns: Sequence[str],
        line_height: float,
    ) -> None:
        s = self.style
        w = self.writer
        padding = s.table_cell_padding
        x = s.margin_left
        y = w.cursor_y

        w.fill_rect(x, y - row_height, sum(col_widths), row_height, background)

        for c, width in enumerate(col_widths):
            lines = word_wrap(cells[c], font, font_size, width - 2 * padding)
            align = _column_align(aligns, c)
            text_y = y - padding - font_size
            w.set_font(font, font_size)
            w.set_fill_color(text_color)
            for line in lines:
                w.draw_text(aligned_x(x, width, padding, line, font, font_size, align), text_y, line)
                text_y -= line_height
            x += width

        self._draw_borders(y, col_widths, row_height)
        w.cursor_y = y - row_height

    def _draw_borders(self, top_y: float, col_widths: Sequence[float], row_height: float) -> None:
        s = self.style
        w = self.writer
        start_x = s.margin_left
        end_x = start_x + sum(col_widths)
        bottom_y = top_y - row_height

        w.set_stroke(s.table_border_color, s.table_line_width)
        w.stroke_line(start_x, top_y, end_x, top_y)
        w.stroke_line(start_x, bottom_y, end_x, bottom_y)

        x = start_x
        w.stroke_line(x, top_y, x, bottom_y)
        for width in col_widths:
            x += width
            w.stroke_line(x, top_y, x, bottom_y)
