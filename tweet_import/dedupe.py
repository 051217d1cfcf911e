from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .post import PostRecord


def dedupe_key(post: PostRecord) -> str:
    return f"id:{post.id}"


@dataclass
class SeenKeys:
    keys: set[str] = field(default_factory=set)

    def has(self, key: str) -> bool:
        return key in self.keys

    def add(self, key: str) -> None:
        self.keys.add(key)

    def add_post(self, post: PostRecord) -> str:
        key = dedupe_key(post)
        self.add(key)
        return key

    def has_post(self, post: PostRecord) -> bool:
        return self.has(dedupe_key(post))


def dedupe_posts(posts: Iterable[PostRecord], *, seen: SeenKeys | None = None) -> list[PostRecord]:
    """Keep the first record for each id, preserving source order."""
    tracker = seen if seen is not None else SeenKeys()
    out: list[PostRecord] = []
    for post in posts:
        if tracker.has_post(post):
            continue
        tracker.add_post(post)
        out.append(post)
    return out
