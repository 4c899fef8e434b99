"""Convert Vue single-file component templates into Markdown documentation."""

__version__ = "0.1.0"

from .config import AppConfig, FileMapping, load_config
from .core import ConversionService
from .errors import ConversionError
from .models import BatchConversionResult, ConversionResult, ConvertedDocument
from .render import render_markdown

__all__ = [
    "__version__",
    "AppConfig",
    "BatchConversionResult",
    "ConversionError",
    "ConversionResult",
    "ConversionService",
    "ConvertedDocument",
    "FileMapping",
    "load_config",
    "render_markdown",
]
