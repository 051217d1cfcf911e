from __future__ import annotations

import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, TextIO

_MESSAGE_LIMIT = 2000
_TRACEBACK_LIMIT = 12000


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(text: str, *, limit: int) -> str:
    s = str(text or "")
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 1)] + "…"


class RunLogger:
    """
    Small JSONL logger for import runs.

    Every line is one JSON object (``ts``, ``level``, ``event``, ``session_id``,
    ``run_id`` once known, optional ``source`` and a ``data`` payload), so import
    history can be audited with ordinary JSON tooling. The file is truncated on
    open.
    """

    def __init__(self, fp: TextIO) -> None:
        self._fp: TextIO | None = fp
        self._session_id = uuid.uuid4().hex
        self._run_id: str | None = None
        self._lock = Lock()

    @classmethod
    def open(cls, path: str | Path) -> "RunLogger":
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        return cls(p.open("w", encoding="utf-8", newline="\n"))

    def close(self) -> None:
        with self._lock:
            if self._fp is not None:
                try:
                    self._fp.flush()
                finally:
                    self._fp.close()
                self._fp = None

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def set_run_id(self, run_id: str) -> None:
        """Tag every following line with ``run_id`` (the config hash in the CLI)."""
        self._run_id = (run_id or "").strip() or None

    def info(self, event: str, *, source: str | None = None, **data: Any) -> None:
        self.log("INFO", event, source=source, **data)

    def exception(
        self,
        event: str,
        *,
        exc: BaseException,
        source: str | None = None,
        **data: Any,
    ) -> None:
        err = {
            "type": type(exc).__name__,
            "message": _truncate(str(exc), limit=_MESSAGE_LIMIT),
            "traceback": _truncate(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                limit=_TRACEBACK_LIMIT,
            ),
        }
        self.log("ERROR", event, source=source, error=err, **data)

    def log(self, level: str, event: str, *, source: str | None = None, **data: Any) -> None:
        record: dict[str, Any] = {
            "ts": _utc_now_iso(),
            "level": level,
            "event": event,
            "session_id": self._session_id,
        }
        if self._run_id:
            record["run_id"] = self._run_id

        src = (source or "").strip()
        if src:
            record["source"] = src

        if data:
            record["data"] = data

        payload = json.dumps(
            record,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )

        with self._lock:
            if self._fp is None:
                raise ValueError("RunLogger is closed")
            self._fp.write(payload + "\n")
            self._fp.flush()
