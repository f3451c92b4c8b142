PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"

# Substituted with the real page count when the document is output.
PAGE_TOTAL_PLACEHOLDER = "___TOTAL_PAGES___"

STANDARD_FONTS = (
    "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique",
    "Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique",
    "Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic",
    "Symbol", "ZapfDingbats",
)

# Registered up front so font resource names and object ids are stable.
PRELOADED_FONTS = (
    "Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique",
    "Courier", "Courier-Bold",
    "Times-Roman", "Times-Bold",
)

FONT_ALIASES = {
    "helvetica": "Helvetica",
    "arial": "Helvetica",
    "sans-serif": "Helvetica",
    "courier": "Courier",
    "monospace": "Courier",
    "times": "Times-Roman",
    "times-roman": "Times-Roman",
    "serif": "Times-Roman",
}

RULE_COLOR = (0.8, 0.8, 0.8)
SUMMARY_ROW_BG = (0.90, 0.92, 0.95)
DEFAULT_MIN_COLUMN_WIDTH = 30.0
ALIGNMENTS = ("left", "center", "right")
