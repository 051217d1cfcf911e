from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Sequence

from .errors import ExportError
from .insights import PostInsights, summarize_posts
from .post import PostRecord

_EXCEL_FORMULA_PREFIXES = ("=", "+", "-", "@")

_SHEETS = ("posts", "media", "insights")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _safe_excel_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return str(value)
    s = value
    if not s:
        return s
    if s.startswith(_EXCEL_FORMULA_PREFIXES):
        return "'" + s
    return s


def _fmt_pipe_join(values: Iterable[str] | None) -> str:
    out: list[str] = []
    for v in values or ():
        t = (v or "").strip()
        if t:
            out.append(t)
    return " | ".join(out)


def _prepare_path(out_path: str | Path) -> Path:
    out = Path(out_path)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Failed to create output directory for {out}: {e}") from e
    return out


def export_posts_json(posts: Sequence[PostRecord], out_path: str | Path, *, indent: int = 2) -> Path:
    out = _prepare_path(out_path)
    payload = [p.to_dict() for p in posts]
    try:
        out.write_text(
            json.dumps(payload, ensure_ascii=False, indent=indent or None) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ExportError(f"Failed to write JSON export: {out}: {e}") from e
    return out


def export_posts_jsonl(posts: Sequence[PostRecord], out_path: str | Path) -> Path:
    out = _prepare_path(out_path)
    try:
        with out.open("w", encoding="utf-8", newline="\n") as fp:
            for p in posts:
                fp.write(json.dumps(p.to_dict(), ensure_ascii=False, sort_keys=True) + "\n")
    except OSError as e:
        raise ExportError(f"Failed to write JSONL export: {out}: {e}") from e
    return out


def _post_row(post: PostRecord) -> dict[str, Any]:
    return {
        "id": _safe_excel_text(post.id),
        "created_at": _safe_excel_text(post.created_at),
        "author_username": _safe_excel_text(post.author_username),
        "author_name": _safe_excel_text(post.author_name),
        "author_id": _safe_excel_text(post.author_id),
        "text": _safe_excel_text(post.text),
        "likes": int(post.metrics.likes),
        "retweets": int(post.metrics.retweets),
        "replies": int(post.metrics.replies),
        "media_count": len(post.media or ()),
        "ai_summary": _safe_excel_text(post.ai_summary),
        "ai_topics": _safe_excel_text(_fmt_pipe_join(post.ai_topics)),
        "ai_entities": _safe_excel_text(_fmt_pipe_join(post.ai_entities)),
    }


def _media_rows(posts: Sequence[PostRecord]) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for post in posts:
        for idx, m in enumerate(post.media or ()):
            out.append(
                {
                    "post_id": _safe_excel_text(post.id),
                    "position": idx,
                    "type": m.type,
                    "url": _safe_excel_text(m.url),
                    "preview_url": _safe_excel_text(m.preview_url),
                }
            )
    return out


def _insight_rows(insights: PostInsights, *, out: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = [
        {"kind": "meta", "label": "exported_at_utc", "value": _safe_excel_text(_utc_now_iso())},
        {"kind": "meta", "label": "output_path", "value": _safe_excel_text(str(out))},
        {"kind": "stat", "label": "total_posts", "value": insights.total_posts},
        {"kind": "stat", "label": "total_engagement", "value": insights.total_engagement},
        {"kind": "stat", "label": "average_engagement", "value": insights.average_engagement},
        {"kind": "stat", "label": "unique_topics", "value": insights.unique_topics},
        {"kind": "stat", "label": "media_posts", "value": insights.media_posts},
    ]
    for topic, n in insights.top_topics:
        rows.append({"kind": "topic", "label": _safe_excel_text(topic), "value": int(n)})
    for author, n in insights.top_authors:
        rows.append({"kind": "author", "label": _safe_excel_text(author), "value": int(n)})
    for day, n in insights.engagement_by_day:
        rows.append({"kind": "engagement_by_day", "label": _safe_excel_text(day), "value": int(n)})
    return rows


def export_posts_workbook(
    posts: Sequence[PostRecord],
    out_path: str | Path,
    *,
    insights: PostInsights | None = None,
) -> Path:
    """
    Write posts, their media and batch insights to an Excel workbook.
    """
    try:
        import pandas as pd  # type: ignore[import-not-found]
    except Exception as e:
        raise ExportError("pandas is required for Excel export") from e

    out = _prepare_path(out_path)
    stats = insights if insights is not None else summarize_posts(posts)

    df_posts = pd.DataFrame([_post_row(p) for p in posts])
    df_media = pd.DataFrame(_media_rows(posts))
    df_insights = pd.DataFrame(_insight_rows(stats, out=out))

    try:
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            df_posts.to_excel(writer, sheet_name="posts", index=False)
            df_media.to_excel(writer, sheet_name="media", index=False)
            df_insights.to_excel(writer, sheet_name="insights", index=False)

            wb = writer.book
            for name in _SHEETS:
                if name in wb.sheetnames:
                    ws = wb[name]
                    ws.freeze_panes = "A2"
    except Exception as e:
        raise ExportError(f"Failed to write workbook: {out}: {e}") from e

    return out
