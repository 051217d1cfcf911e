from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from .config_schema import AppConfig
from .errors import ImportFormatError, ImportInputError, UnsupportedFormat
from .extract import extract_csv_records, extract_json_records, extract_markdown_records
from .ids import Clock, IdGenerator, RandomIdGenerator
from .normalize import post_record_from_raw
from .post import PostRecord
from .run_log import RunLogger
from .sniff import ImportFormat, detect_import_format

_UNSUPPORTED_MESSAGE = "Unsupported import format. Please use JSON, CSV, or Markdown."


@dataclass(frozen=True)
class ImportResult:
    format: ImportFormat
    posts: Sequence[PostRecord]


def _extract_raw_records(
    raw: str,
    fmt: ImportFormat,
    *,
    ids: IdGenerator,
    clock: Clock | None,
    quoted_fields: bool,
) -> Sequence[Mapping[str, Any]]:
    if fmt == "json":
        return extract_json_records(raw)
    if fmt == "csv":
        return extract_csv_records(raw, quoted_fields=quoted_fields)
    if fmt == "markdown":
        return extract_markdown_records(raw, ids=ids, clock=clock)
    raise UnsupportedFormat(_UNSUPPORTED_MESSAGE)


def parse_imported_data(
    raw: str,
    *,
    ids: IdGenerator | None = None,
    clock: Clock | None = None,
    quoted_fields: bool = False,
) -> list[PostRecord]:
    """
    Detect the payload format, extract its records and normalize each one.

    Records come back in source order. Any extractor failure fails the whole
    import; there is no per-record recovery.
    """
    return list(
        _run_import(raw, ids=ids, clock=clock, quoted_fields=quoted_fields).posts
    )


def _run_import(
    raw: str,
    *,
    ids: IdGenerator | None,
    clock: Clock | None,
    quoted_fields: bool,
) -> ImportResult:
    text = raw or ""
    fmt = detect_import_format(text)
    if fmt == "unknown":
        raise UnsupportedFormat(_UNSUPPORTED_MESSAGE)

    gen = ids or RandomIdGenerator(clock=clock)
    records = _extract_raw_records(
        text, fmt, ids=gen, clock=clock, quoted_fields=quoted_fields
    )
    posts = [post_record_from_raw(r, ids=gen, clock=clock) for r in records]
    return ImportResult(format=fmt, posts=posts)


def import_posts(
    raw: str,
    *,
    config: AppConfig | None = None,
    ids: IdGenerator | None = None,
    clock: Clock | None = None,
    logger: RunLogger | None = None,
    source: str | None = None,
) -> ImportResult:
    """
    Configured import entrypoint: same pipeline as ``parse_imported_data`` plus
    run-log events and the detected format in the result.
    """
    cfg = config or AppConfig()

    try:
        result = _run_import(
            raw,
            ids=ids,
            clock=clock,
            quoted_fields=cfg.csv.quoted_fields,
        )
    except ImportFormatError as e:
        if logger is not None:
            logger.exception("import_failed", exc=e, source=source)
        raise

    if logger is not None:
        logger.info("import_format_detected", source=source, format=result.format)
        logger.info(
            "import_completed",
            source=source,
            format=result.format,
            posts=len(result.posts),
        )
    return result


def read_import_file(
    path: str | Path,
    *,
    encoding: str = "utf-8",
    max_bytes: int | None = None,
) -> str:
    """
    Read an import payload from disk, or from stdin when ``path`` is ``-``.
    """
    if str(path) == "-":
        data = sys.stdin.buffer.read()
        label = "<stdin>"
    else:
        p = Path(path)
        label = str(p)
        if not p.is_file():
            raise ImportInputError(f"Import file not found: {p}")
        if max_bytes is not None and p.stat().st_size > max_bytes:
            raise ImportInputError(f"Import file exceeds {max_bytes} bytes: {p}")
        try:
            data = p.read_bytes()
        except OSError as e:
            raise ImportInputError(f"Failed to read import file: {p}") from e

    if max_bytes is not None and len(data) > max_bytes:
        raise ImportInputError(f"Import payload exceeds {max_bytes} bytes: {label}")

    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise ImportInputError(f"Import payload is not valid {encoding}: {label}") from e

    return text.lstrip("\ufeff")
