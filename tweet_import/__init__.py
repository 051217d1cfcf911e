from __future__ import annotations

from .errors import (
    ImportFormatError,
    InvalidArchiveFormat,
    InvalidCsvFormat,
    InvalidMarkdownFormat,
    UnsupportedFormat,
)
from .importer import ImportResult, import_posts, parse_imported_data
from .post import PostMedia, PostMetrics, PostRecord
from .sniff import detect_import_format

__all__ = [
    "ImportFormatError",
    "ImportResult",
    "InvalidArchiveFormat",
    "InvalidCsvFormat",
    "InvalidMarkdownFormat",
    "PostMedia",
    "PostMetrics",
    "PostRecord",
    "UnsupportedFormat",
    "detect_import_format",
    "import_posts",
    "parse_imported_data",
]
