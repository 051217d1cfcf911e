from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from .post import PostRecord


@dataclass(frozen=True)
class PostInsights:
    total_posts: int
    total_engagement: int
    average_engagement: int
    unique_topics: int
    top_topics: Sequence[tuple[str, int]]
    top_authors: Sequence[tuple[str, int]]
    engagement_by_day: Sequence[tuple[str, int]]
    media_posts: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_posts": self.total_posts,
            "total_engagement": self.total_engagement,
            "average_engagement": self.average_engagement,
            "unique_topics": self.unique_topics,
            "top_topics": [{"topic": t, "count": n} for t, n in self.top_topics],
            "top_authors": [{"author": a, "count": n} for a, n in self.top_authors],
            "engagement_by_day": [{"day": d, "engagement": n} for d, n in self.engagement_by_day],
            "media_posts": self.media_posts,
        }


def _day_of(created_at: str) -> str | None:
    day = (created_at or "").strip()[:10]
    if len(day) == 10 and day[4] == "-" and day[7] == "-":
        return day
    return None


def summarize_posts(
    posts: Sequence[PostRecord],
    *,
    top_topics: int = 5,
    top_authors: int = 5,
) -> PostInsights:
    """
    Aggregate engagement, topic and author statistics over a batch of posts.

    Daily engagement counts likes and retweets only; total engagement also
    includes replies.
    """
    total_engagement = 0
    topic_counts: Counter[str] = Counter()
    author_counts: Counter[str] = Counter()
    by_day: Counter[str] = Counter()
    media_posts = 0

    for post in posts:
        total_engagement += post.metrics.engagement

        for topic in post.ai_topics or ():
            t = (topic or "").strip()
            if t:
                topic_counts[t] += 1

        author = (post.author_username or "").strip()
        if author:
            author_counts[author] += 1

        day = _day_of(post.created_at)
        if day is not None:
            by_day[day] += post.metrics.likes + post.metrics.retweets

        if post.media:
            media_posts += 1

    total = len(posts)
    # Halves round up.
    average = int(total_engagement / total + 0.5) if total else 0

    return PostInsights(
        total_posts=total,
        total_engagement=total_engagement,
        average_engagement=average,
        unique_topics=len(topic_counts),
        top_topics=tuple(topic_counts.most_common(top_topics)),
        top_authors=tuple(author_counts.most_common(top_authors)),
        engagement_by_day=tuple(sorted(by_day.items())),
        media_posts=media_posts,
    )
