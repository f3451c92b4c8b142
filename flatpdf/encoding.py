"""
Unicode to WinAnsi (Windows-1252) conversion for PDF content streams.

Type1 standard fonts with ``/WinAnsiEncoding`` can only show the 256 glyphs of
the Windows-1252 code page. Every piece of text is pushed through
``encode_winansi`` before it enters a content stream:

- characters that exist in cp1252 are kept as-is,
- characters listed in ``_TRANSLIT`` get a pinned approximation,
- other characters fall back to their compatibility decomposition with
  accents stripped (``ā`` -> ``a``, ``ﬁ`` -> ``fi``),
- whatever is left becomes ``?``.
"""

from __future__ import annotations

import codecs
import re
import unicodedata
from enum import Enum
from functools import lru_cache

TRANSLIT_TABLE_VERSION = "1"

_CODEC = "cp1252"
_ERROR_HANDLER = "flatpdf-translit"
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")

# Version 1 of the approximation table. Only characters missing from cp1252.
_TRANSLIT = {
    # dashes and minus signs
    "‐": "-", "‑": "-", "‒": "-", "―": "-", "−": "-",
    "⁃": "-", "﹘": "-", "﹣": "-", "－": "-",
    # quotes and primes
    "‛": "'", "‟": '"', "′": "'", "″": '"', "‵": "'",
    "「": '"', "」": '"',
    # spaces
    "\u2002": " ", "\u2003": " ", "\u2004": " ", "\u2005": " ", "\u2006": " ",
    "\u2007": " ", "\u2008": " ", "\u2009": " ", "\u200a": " ", "\u202f": " ",
    "\u205f": " ", "\u3000": " ",
    # invisible characters
    "\u200b": "", "\u200c": "", "\u200d": "", "\u2060": "", "\ufeff": "",
    # arrows and math
    "←": "<-", "→": "->", "↔": "<->", "⇒": "=>",
    "⇐": "<=", "≤": "<=", "≥": ">=", "≠": "!=",
    "≈": "~", "≃": "~", "≡": "=", "∗": "*", "∙": "·",
    "⋅": "·", "∕": "/", "⁄": "/", "∣": "|",
    # bullets and marks
    "‣": "•", "●": "•", "◦": "o",
    "✓": "v", "✔": "v", "✗": "x", "✘": "x",
    "★": "*", "☆": "*",
    # letters without a compatibility decomposition
    "ı": "i", "Ł": "L", "ł": "l", "Đ": "D", "đ": "d",
    "Ħ": "H", "ħ": "h", "Ŧ": "T", "ŧ": "t",
    # currency signs
    "₹": "INR", "₽": "RUB", "₩": "W", "₪": "ILS",
    "₺": "TRY", "₴": "UAH", "₱": "PHP", "₿": "BTC",
}


class Convertibility(Enum):
    DIRECT = "direct"
    APPROXIMATED = "approximated"
    UNMAPPABLE = "unmappable"


def _encodable(text: str) -> bool:
    try:
        text.encode(_CODEC)
    except UnicodeEncodeError:
        return False
    return True


@lru_cache(maxsize=4096)
def _approximate(char: str) -> str | None:
    replacement = _TRANSLIT.get(char)
    if replacement is not None and _encodable(replacement):
        return replacement

    decomposed = unicodedata.normalize("NFKD", char)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    if stripped and stripped != char and _encodable(stripped):
        return stripped
    return None


def _replacement(char: str) -> str:
    approx = _approximate(char)
    return "?" if approx is None else approx


def _translit_errors(exc: UnicodeError) -> tuple[str, int]:
    if not isinstance(exc, UnicodeEncodeError):
        raise exc
    chunk = exc.object[exc.start:exc.end]
    return "".join(_replacement(c) for c in chunk), exc.end


codecs.register_error(_ERROR_HANDLER, _translit_errors)


def encode_winansi(text: str | bytes) -> bytes:
    """Convert text to single-byte WinAnsi bytes ready for a ``Tj`` operand.

    ``bytes`` that are not valid UTF-8 are assumed to already be WinAnsi and
    are returned unchanged.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            return text
    if not text:
        return b""
    if not _NON_ASCII_RE.search(text):
        return text.encode("ascii")
    return text.encode(_CODEC, errors=_ERROR_HANDLER)


def to_winansi(text: str | bytes) -> str:
    """Like ``encode_winansi`` but returns a ``str`` limited to cp1252 characters."""
    return encode_winansi(text).decode(_CODEC, errors="replace")


def classify_char(char: str) -> Convertibility:
    if _encodable(char):
        return Convertibility.DIRECT
    if _approximate(char) is not None:
        return Convertibility.APPROXIMATED
    return Convertibility.UNMAPPABLE
