"""
Character widths for the 14 standard PDF fonts and greedy word-wrap.

Widths are expressed in 1/1000 of the font size and indexed by WinAnsi code.
The upright faces take their tables from the AFM data bundled with
reportlab; oblique/italic faces share the table of their upright face.
"""

from __future__ import annotations

from functools import lru_cache

from reportlab.pdfbase import pdfmetrics

from .encoding import encode_winansi, to_winansi


_TABLE_FONT = {
    "Helvetica-Oblique": "Helvetica",
    "Helvetica-BoldOblique": "Helvetica-Bold",
    "Courier-Bold": "Courier",
    "Courier-Oblique": "Courier",
    "Courier-BoldOblique": "Courier",
    "Times-Italic": "Times-Roman",
    "Times-BoldItalic": "Times-Bold",
}

# Symbol and ZapfDingbats are drawn with WinAnsi codes, so they measure as Helvetica.
_FACES_WITH_TABLES = {"Helvetica", "Helvetica-Bold", "Courier", "Times-Roman", "Times-Bold"}

DEFAULT_WIDTHS = {
    "Helvetica": 556,
    "Helvetica-Bold": 556,
    "Courier": 600,
    "Times-Roman": 500,
    "Times-Bold": 500,
}


def table_font(font_name: str) -> str:
    """Return the face whose width table is used for ``font_name``."""
    face = _TABLE_FONT.get(font_name, font_name)
    if face not in _FACES_WITH_TABLES:
        return "Helvetica"
    return face


@lru_cache(maxsize=None)
def _width_table(face: str) -> tuple[int, ...]:
    default = DEFAULT_WIDTHS[face]
    widths = pdfmetrics.getFont(face).widths
    return tuple(w if w else default for w in widths)


def char_width(char: str, font_name: str) -> int:
    """Width of a single character in thousandths of the font size."""
    code = encode_winansi(char)[:1]
    table = _width_table(table_font(font_name))
    if not code:
        return 0
    return table[code[0]]


def string_width(text: str, font_name: str, font_size: float) -> float:
    if not text:
        return 0.0
    table = _width_table(table_font(font_name))
    total = sum(table[b] for b in encode_winansi(text))
    return total / 1000.0 * font_size


def word_wrap(text: str, font_name: str, font_size: float, max_width: float) -> list[str]:
    """
    Greedy word-wrap on single spaces.

    A word wider than ``max_width`` stays whole on its own line; a non-positive
    ``max_width`` returns the text as one line. Lines come back converted to
    WinAnsi characters so that what was measured is what gets drawn.
    """
    text = to_winansi(text)
    if max_width <= 0:
        return [text]

    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = word if current == "" else f"{current} {word}"
        if current != "" and string_width(candidate, font_name, font_size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate

    if current != "":
        lines.append(current)
    return lines or [""]
