from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class ImportInputError(RuntimeError):
    """Raised when an import file cannot be read or decoded."""


class ImportFormatError(RuntimeError):
    """Base class for failures while parsing an import payload."""


class UnsupportedFormat(ImportFormatError):
    """Raised when the payload is not JSON, CSV or Markdown."""


class InvalidArchiveFormat(ImportFormatError):
    """Raised when a JSON archive cannot be parsed."""


class InvalidCsvFormat(ImportFormatError):
    """Raised when a CSV export cannot be processed."""


class InvalidMarkdownFormat(ImportFormatError):
    """Raised when a Markdown export cannot be processed."""


class ExportError(RuntimeError):
    """Raised when writing an export file fails."""
