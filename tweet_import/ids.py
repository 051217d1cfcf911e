from __future__ import annotations

import random
import string
from datetime import datetime, timezone
from typing import Callable, Protocol

Clock = Callable[[], datetime]

_BASE36 = string.digits + string.ascii_lowercase
_SUFFIX_LEN = 7


class IdGenerator(Protocol):
    def __call__(self, prefix: str) -> str: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(clock: Clock | None = None) -> str:
    """Render the clock's current time as millisecond UTC ISO-8601 with a Z suffix."""
    now = (clock or utc_now)()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RandomIdGenerator:
    """Ids of the form ``<prefix>_<epoch-millis>_<random base36>``."""

    def __init__(self, *, clock: Clock | None = None, rng: random.Random | None = None) -> None:
        self._clock = clock or utc_now
        self._rng = rng or random.Random()

    def __call__(self, prefix: str) -> str:
        now = self._clock()
        millis = int(now.timestamp()) * 1000 + now.microsecond // 1000
        suffix = "".join(self._rng.choice(_BASE36) for _ in range(_SUFFIX_LEN))
        return f"{prefix}_{millis}_{suffix}"


class SequentialIdGenerator:
    """Deterministic ids of the form ``<prefix>_<n>``, counting from 1."""

    def __init__(self, start: int = 1) -> None:
        self._next = int(start)

    def __call__(self, prefix: str) -> str:
        n = self._next
        self._next += 1
        return f"{prefix}_{n}"
