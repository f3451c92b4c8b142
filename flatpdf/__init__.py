from .errors import (
    DocumentFinalizedError,
    ErrorKind,
    FlatPdfError,
    ImageFormatError,
    ImageReadError,
    StorageCapabilityError,
)
from .models import (
    DataTableOptions,
    EmbeddedImage,
    ImageOptions,
    SummaryRowOptions,
    TableOptions,
    cell_to_text,
)
from .style import Style, to_rgb
from .version import __version__
from .writer import FlatPdf

__all__ = [
    "DataTableOptions",
    "DocumentFinalizedError",
    "EmbeddedImage",
    "ErrorKind",
    "FlatPdf",
    "FlatPdfError",
    "ImageFormatError",
    "ImageOptions",
    "ImageReadError",
    "StorageCapabilityError",
    "Style",
    "SummaryRowOptions",
    "TableOptions",
    "__version__",
    "cell_to_text",
    "to_rgb",
]
