from __future__ import annotations

import json
import re
from typing import Any, Callable, Literal

ImportFormat = Literal["json", "csv", "markdown", "unknown"]

_CSV_MIN_HEADER_FIELDS = 4
_CSV_HEADER_HINT_RE = re.compile(r"id|text|content|tweet|author|user|date|created", re.IGNORECASE)
_MD_HEADING_RE = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_MD_BULLET_RE = re.compile(r"^\s*[-*]\s+", re.MULTILINE)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def loads_strict_json(raw: str) -> Any:
    """
    Parse standard JSON only: ``NaN`` and ``Infinity`` are rejected.

    Nesting deeper than the interpreter can decode raises RecursionError.
    """
    return json.loads(raw, parse_constant=_reject_constant)


def looks_like_json(raw: str) -> bool:
    try:
        loads_strict_json(raw)
    except (ValueError, RecursionError):
        return False
    return True


def looks_like_csv(raw: str) -> bool:
    if "," not in raw or "\n" not in raw:
        return False

    headers = raw.split("\n", 1)[0].split(",")
    if len(headers) < _CSV_MIN_HEADER_FIELDS:
        return False
    return any(_CSV_HEADER_HINT_RE.search(h) for h in headers)


def looks_like_markdown(raw: str) -> bool:
    return bool(_MD_HEADING_RE.search(raw) or _MD_BULLET_RE.search(raw))


# Order matters: valid JSON wins even when it also resembles CSV or Markdown.
_FORMAT_CHECKS: tuple[tuple[ImportFormat, Callable[[str], bool]], ...] = (
    ("json", looks_like_json),
    ("csv", looks_like_csv),
    ("markdown", looks_like_markdown),
)


def detect_import_format(raw: str) -> ImportFormat:
    """Classify an import payload as json, csv, markdown or unknown."""
    text = raw or ""
    for fmt, check in _FORMAT_CHECKS:
        if check(text):
            return fmt
    return "unknown"
