from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from .ids import iso_timestamp

MediaType = Literal["photo", "video", "gif"]


@dataclass(frozen=True)
class PostMedia:
    type: MediaType
    url: str
    preview_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "url": self.url}
        if self.preview_url:
            out["previewUrl"] = self.preview_url
        return out


@dataclass(frozen=True)
class PostMetrics:
    likes: int = 0
    retweets: int = 0
    replies: int = 0

    @property
    def engagement(self) -> int:
        return self.likes + self.retweets + self.replies

    def to_dict(self) -> dict[str, int]:
        return {"likes": self.likes, "retweets": self.retweets, "replies": self.replies}


@dataclass(frozen=True)
class PostRecord:
    """
    Canonical, format-independent representation of an imported post.

    Has no slot for contact or location data; those source fields are never
    carried over.
    """

    id: str
    text: str = ""
    author_id: str = ""
    author_name: str = ""
    author_username: str = ""
    created_at: str = field(default_factory=iso_timestamp)
    media: Sequence[PostMedia] | None = None
    metrics: PostMetrics = PostMetrics()

    # Filled in by enrichment after import.
    ai_summary: str | None = None
    ai_topics: Sequence[str] | None = None
    ai_entities: Sequence[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "authorUsername": self.author_username,
            "createdAt": self.created_at,
        }
        if self.media:
            out["media"] = [m.to_dict() for m in self.media]
        out["metrics"] = self.metrics.to_dict()
        if self.ai_summary is not None:
            out["aiSummary"] = self.ai_summary
        if self.ai_topics is not None:
            out["aiTopics"] = list(self.ai_topics)
        if self.ai_entities is not None:
            out["aiEntities"] = list(self.ai_entities)
        return out
