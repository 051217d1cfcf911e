from __future__ import annotations

import csv
import io
import re
from typing import Any, Mapping

from .errors import InvalidArchiveFormat, InvalidCsvFormat, InvalidMarkdownFormat
from .ids import Clock, IdGenerator, RandomIdGenerator, iso_timestamp
from .sniff import loads_strict_json

_ARCHIVE_KEYS = ("tweets", "tweet")

_MD_BLOCK_SPLIT_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_MD_AUTHOR_RE = re.compile(r"- @(\w+)(?:\s+\((.+)\))?")
_MD_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2}(?:T\d{2}:\d{2}:\d{2}Z)?)")


def extract_json_records(raw: str) -> list[Mapping[str, Any]]:
    """
    Pull raw post objects out of a JSON archive.

    Archives keep posts under ``tweets`` (or ``tweet``); a bare top-level array is
    accepted as the post list itself.
    """
    try:
        data = loads_strict_json(raw)
    except ValueError as e:
        raise InvalidArchiveFormat(f"Invalid Twitter archive format: {e}") from e
    except RecursionError as e:
        raise InvalidArchiveFormat("Invalid Twitter archive format: nesting too deep") from e

    items: Any = []
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        for key in _ARCHIVE_KEYS:
            if key in data:
                items = data[key]
                break

    if not isinstance(items, list):
        return []

    out: list[Mapping[str, Any]] = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidArchiveFormat(
                f"Invalid Twitter archive format: entry {idx} is not an object"
            )
        out.append(item)
    return out


def _split_naive(line: str) -> list[str]:
    return line.split(",")


def _split_quoted(line: str) -> list[str]:
    rows = list(csv.reader(io.StringIO(line)))
    return rows[0] if rows else []


def extract_csv_records(raw: str, *, quoted_fields: bool = False) -> list[dict[str, str]]:
    """
    Map each CSV data row onto the lower-cased header names.

    Fields are split on bare commas unless ``quoted_fields`` is set, in which case
    double-quoted fields may contain commas.
    """
    split = _split_quoted if quoted_fields else _split_naive

    try:
        lines = raw.split("\n")
        headers = [h.strip().lower() for h in split(lines[0])]

        out: list[dict[str, str]] = []
        for line in lines[1:]:
            if not line.strip():
                continue
            values = split(line)
            row: dict[str, str] = {}
            for idx, header in enumerate(headers):
                value = values[idx] if idx < len(values) else ""
                row[header] = (value or "").strip()
            out.append(row)
        return out
    except (csv.Error, TypeError) as e:
        raise InvalidCsvFormat(f"Invalid CSV format: {e}") from e


def _markdown_block_record(
    block: str, *, ids: IdGenerator, clock: Clock | None
) -> dict[str, str]:
    lines = [ln for ln in block.split("\n") if ln.strip()]
    text = lines[0].strip() if lines else ""

    author_username = ""
    author_name = ""
    author_line = next((ln for ln in lines if ln.startswith("- @")), None)
    if author_line is not None:
        match = _MD_AUTHOR_RE.match(author_line)
        if match:
            author_username = match.group(1) or ""
            author_name = (match.group(2) or "").strip() or author_username

    created_at = None
    for ln in lines:
        date_match = _MD_DATE_RE.search(ln)
        if date_match:
            created_at = date_match.group(1)
            break

    return {
        "id": ids("md"),
        "text": text,
        "authorUsername": author_username,
        "authorName": author_name,
        "authorId": author_username,
        "createdAt": created_at or iso_timestamp(clock),
    }


def extract_markdown_records(
    raw: str,
    *,
    ids: IdGenerator | None = None,
    clock: Clock | None = None,
) -> list[dict[str, str]]:
    """
    Treat every heading-delimited block as one post.

    The first non-empty line is the post text; ``- @user (Name)`` lines carry the
    author and the first ``YYYY-MM-DD`` date found is the creation time.
    """
    gen = ids or RandomIdGenerator(clock=clock)

    try:
        blocks = [b for b in _MD_BLOCK_SPLIT_RE.split(raw) if b.strip()]
        return [_markdown_block_record(b, ids=gen, clock=clock) for b in blocks]
    except TypeError as e:
        raise InvalidMarkdownFormat(f"Invalid markdown format: {e}") from e
