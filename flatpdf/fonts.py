from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .constants import FONT_ALIASES, PRELOADED_FONTS, STANDARD_FONTS
from .document import PdfDocument


log = logging.getLogger(__name__)

_FAMILY_VARIANTS = {
    # family: (regular, bold, italic, bold italic)
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
}


def resolve_font_name(family: str, bold: bool = False, italic: bool = False) -> str:
    """
    Map a family name or alias (``arial``, ``serif``, ``monospace`` ...) plus
    bold/italic flags to one of the standard Type1 face names.

    Names that are not a known family are returned unchanged.
    """
    family = FONT_ALIASES.get(family.lower(), family)
    variants = _FAMILY_VARIANTS.get(family)
    if variants is None:
        return family
    return variants[(2 if italic else 0) + (1 if bold else 0)]


@dataclass
class FontRegistry:
    """Standard fonts registered in one document, keyed by face name in registration order."""

    doc: PdfDocument
    object_ids: dict[str, int] = field(default_factory=dict)
    resource_names: dict[str, str] = field(default_factory=dict)

    def preload(self) -> None:
        for name in PRELOADED_FONTS:
            self.register(name)

    def register(self, font_name: str) -> str:
        """Register ``font_name`` once and return its resource name (``F1``, ``F2`` ...)."""
        if font_name in self.resource_names:
            return self.resource_names[font_name]

        obj_id = self.doc.allocate_id()
        self.doc.set_object(
            obj_id,
            b"<< /Type /Font /Subtype /Type1 /BaseFont /%s /Encoding /WinAnsiEncoding >>"
            % font_name.encode("ascii"),
        )
        resource_name = f"F{len(self.resource_names) + 1}"
        self.object_ids[font_name] = obj_id
        self.resource_names[font_name] = resource_name
        log.debug("registered font %s as /%s (obj %d)", font_name, resource_name, obj_id)
        return resource_name

    def resource_for(self, font_name: str) -> str:
        if font_name in self.resource_names:
            return self.resource_names[font_name]
        if font_name not in STANDARD_FONTS:
            log.warning("font %r is not a standard PDF font; using Helvetica", font_name)
            return self.register("Helvetica")
        return self.register(font_name)

    def resource_dict(self) -> bytes:
        entries = [
            b"/%s %d 0 R" % (self.resource_names[name].encode("ascii"), obj_id)
            for name, obj_id in self.object_ids.items()
        ]
        return b"<< " + b" ".join(entries) + b" >>"
