from __future__ import annotations

import datetime as _dt
import numbers
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

from .constants import SUMMARY_ROW_BG


@dataclass(frozen=True)
class TableOptions:
    """Per-call table settings; ``None`` means "use the Style default"."""

    font_size: float | None = None
    striped: bool | None = None
    repeat_header: bool | None = None
    column_aligns: Sequence[str] = ()
    column_widths: Sequence[float] | None = None
    column_min_widths: Sequence[float] = ()
    max_column_width: float | None = None


@dataclass(frozen=True)
class DataTableOptions(TableOptions):
    columns: Sequence[str] | None = None
    column_labels: Mapping[str, str] = field(default_factory=dict)
    formatters: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class SummaryRowOptions:
    font_size: float | None = None
    column_aligns: Sequence[str] = ()
    background: tuple[float, float, float] = SUMMARY_ROW_BG


@dataclass(frozen=True)
class ImageOptions:
    dpi: float = 72.0
    align: str = "left"


def merge_options(options, default_cls, overrides: dict):
    """Return ``options`` (or a fresh ``default_cls``) with keyword overrides applied.

    Unknown keywords raise ``TypeError`` exactly like the dataclass constructor.
    """
    base = options if options is not None else default_cls()
    if not overrides:
        return base
    return replace(base, **overrides)


@dataclass(frozen=True)
class JpegInfo:
    width: int
    height: int
    color_space: str
    bits_per_component: int


@dataclass(frozen=True)
class EmbeddedImage:
    name: str
    obj_id: int
    pixel_width: int
    pixel_height: int


@dataclass
class PageState:
    page_id: int
    content_id: int
    number: int
    cursor_x: float
    cursor_y: float
    parts: list[bytes] = field(default_factory=list, repr=False)
    # Cached graphics state; only used to skip redundant operators.
    active_font: str = ""
    active_size: float = 0.0
    active_color: tuple[float, float, float] | None = None
    active_stroke: tuple[float, float, float] | None = None
    active_line_width: float | None = None
    images: list[str] = field(default_factory=list)

    def write(self, op: bytes) -> None:
        self.parts.append(op)

    def stream(self) -> bytes:
        return b"".join(self.parts)


def cell_to_text(value: Any) -> str:
    """Convert a table cell value to its display text.

    None is empty, booleans are ``true``/``false``, dates use ISO format and
    enums show their value. Other types raise ``TypeError``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return cell_to_text(value.value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, numbers.Number):
        return str(value)
    if isinstance(value, (_dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    raise TypeError(f"cannot render {type(value).__name__} as table cell text")
