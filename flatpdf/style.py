"""
Read-only layout configuration.

All measurements are PDF points (1/72 inch). Colors are stored as float RGB
triples in 0..1 but may be given as anything ``reportlab.lib.colors.toColor``
understands (``"#3366aa"``, ``"navy"``, a ``Color`` instance) or as a 3-tuple.
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER, landscape as _landscape

RGB = tuple[float, float, float]

_COLOR_FIELDS = (
    "text_color",
    "heading_color",
    "table_header_bg",
    "table_header_color",
    "table_row_bg",
    "table_alt_row_bg",
    "table_border_color",
    "header_footer_color",
)


def to_rgb(value) -> RGB:
    if isinstance(value, (tuple, list)):
        if len(value) != 3:
            raise ValueError(f"RGB color needs 3 components, got {len(value)}")
        return tuple(float(c) for c in value)
    color = colors.toColor(value)
    return (float(color.red), float(color.green), float(color.blue))


@dataclass(frozen=True)
class Style:
    # Page
    page_width: float = LETTER[0]
    page_height: float = LETTER[1]
    margin_top: float = 60
    margin_bottom: float = 60
    margin_left: float = 50
    margin_right: float = 50

    # Body text
    font_family: str = "Helvetica"
    font_size: float = 9
    line_height: float = 1.4
    text_color: RGB = (0.2, 0.2, 0.2)

    # Headings
    h1_size: float = 20
    h2_size: float = 15
    h3_size: float = 12
    heading_space_before: float = 16
    heading_space_after: float = 6
    heading_color: RGB = (0.1, 0.1, 0.1)

    # Tables
    table_font_size: float = 8
    table_cell_padding: float = 5
    table_line_width: float = 0.5
    table_header_bg: RGB = (0.22, 0.40, 0.65)
    table_header_color: RGB = (1.0, 1.0, 1.0)
    table_header_font: str = "Helvetica-Bold"
    table_row_bg: RGB = (1.0, 1.0, 1.0)
    table_alt_row_bg: RGB = (0.95, 0.96, 0.98)
    table_border_color: RGB = (0.78, 0.80, 0.83)
    table_striped: bool = True
    table_repeat_header: bool = True

    # Header / footer
    show_page_numbers: bool = True
    page_number_format: str = "Page {page} of {pages}"
    header_footer_font_size: float = 7
    header_footer_color: RGB = (0.5, 0.5, 0.5)
    header_text: str = ""
    footer_text: str = ""

    paragraph_spacing: float = 8
    compress: bool = True

    def __post_init__(self) -> None:
        for name in _COLOR_FIELDS:
            object.__setattr__(self, name, to_rgb(getattr(self, name)))

    # Presets

    @classmethod
    def make(cls, **overrides) -> "Style":
        return cls(**overrides)

    @classmethod
    def compact(cls, **overrides) -> "Style":
        """Dense layout for maximum data per page."""
        base = dict(
            font_size=8,
            line_height=1.3,
            margin_top=45,
            margin_bottom=45,
            margin_left=36,
            margin_right=36,
            table_font_size=7,
            table_cell_padding=3,
            paragraph_spacing=4,
            h1_size=16,
            h2_size=12,
            h3_size=10,
        )
        base.update(overrides)
        return cls(**base)

    @classmethod
    def a4(cls, **overrides) -> "Style":
        base = dict(page_width=A4[0], page_height=A4[1])
        base.update(overrides)
        return cls(**base)

    @classmethod
    def landscape(cls, **overrides) -> "Style":
        """Landscape letter, for wide tables."""
        width, height = _landscape(LETTER)
        base = dict(page_width=width, page_height=height)
        base.update(overrides)
        return cls(**base)

    @classmethod
    def landscape_compact(cls, **overrides) -> "Style":
        width, height = _landscape(LETTER)
        base = dict(
            page_width=width,
            page_height=height,
            font_size=8,
            line_height=1.3,
            margin_top=40,
            margin_bottom=40,
            margin_left=36,
            margin_right=36,
            table_font_size=7,
            table_cell_padding=3,
            paragraph_spacing=4,
        )
        base.update(overrides)
        return cls(**base)

    # Derived geometry

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def top_y(self) -> float:
        return self.page_height - self.margin_top

    @property
    def bottom_y(self) -> float:
        return self.margin_bottom
