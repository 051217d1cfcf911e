from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Mapping

from .ids import Clock, IdGenerator, RandomIdGenerator, iso_timestamp
from .post import MediaType, PostMedia, PostMetrics, PostRecord

_TWITTER_DATE_FORMAT = "%a %b %d %H:%M:%S %z %Y"

_MEDIA_TYPES: dict[str, MediaType] = {
    "photo": "photo",
    "video": "video",
    "gif": "gif",
    "animated_gif": "gif",
}


def _lookup(item: Mapping[str, Any], path: str) -> Any:
    value: Any = item
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def first_present(item: Mapping[str, Any], *paths: str) -> Any:
    """
    Return the first value found under ``paths`` that is present and non-empty.

    Dotted paths reach into nested mappings (``user.screen_name``).
    """
    for path in paths:
        value = _lookup(item, path)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


# String fields are kept verbatim; whitespace-only values count as absent.
def _coerce_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _coerce_id(value: Any) -> str | None:
    if isinstance(value, str):
        return _coerce_str(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def _coerce_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        s = value.strip().replace(",", "")
        if s.isdigit():
            return int(s)
    return None


def _first_str(item: Mapping[str, Any], *paths: str) -> str | None:
    for path in paths:
        value = _coerce_str(_lookup(item, path))
        if value:
            return value
    return None


def _first_id(item: Mapping[str, Any], *paths: str) -> str | None:
    for path in paths:
        value = _coerce_id(_lookup(item, path))
        if value:
            return value
    return None


def _first_count(item: Mapping[str, Any], *paths: str) -> int:
    for path in paths:
        value = _coerce_count(_lookup(item, path))
        if value:
            return value
    return 0


def _is_iso_timestamp(value: str) -> bool:
    candidate = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        datetime.fromisoformat(candidate)
        return True
    except ValueError:
        pass
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        return False


def normalize_timestamp(value: Any, *, clock: Clock | None = None) -> str:
    """
    Keep ISO-8601 values verbatim, convert Twitter's classic date format and fall
    back to the current time for anything else.
    """
    raw = _coerce_str(value)
    if raw is None:
        return iso_timestamp(clock)

    s = raw.strip()
    if _is_iso_timestamp(s):
        return raw

    try:
        parsed = datetime.strptime(s, _TWITTER_DATE_FORMAT)
    except ValueError:
        return iso_timestamp(clock)

    parsed = parsed.astimezone(timezone.utc)
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _media_type(value: Any) -> MediaType:
    key = (_coerce_str(value) or "").strip().casefold()
    return _MEDIA_TYPES.get(key, "photo")


def _media_from_entities(entries: list[Any]) -> list[PostMedia]:
    out: list[PostMedia] = []
    for m in entries:
        if not isinstance(m, Mapping):
            continue
        url = _first_str(m, "media_url_https", "media_url", "url")
        if not url:
            continue
        out.append(
            PostMedia(
                type=_media_type(m.get("type")),
                url=url,
                preview_url=_coerce_str(m.get("url")),
            )
        )
    return out


def _media_from_canonical(entries: list[Any]) -> list[PostMedia]:
    out: list[PostMedia] = []
    for m in entries:
        if not isinstance(m, Mapping):
            continue
        url = _coerce_str(m.get("url"))
        if not url:
            continue
        out.append(
            PostMedia(
                type=_media_type(m.get("type")),
                url=url,
                preview_url=_first_str(m, "previewUrl", "preview_url"),
            )
        )
    return out


def _extract_media(item: Mapping[str, Any]) -> tuple[PostMedia, ...] | None:
    entities_media = _lookup(item, "entities.media")
    if isinstance(entities_media, list):
        media = _media_from_entities(entities_media)
    elif isinstance(item.get("media"), list):
        media = _media_from_canonical(item["media"])
    else:
        media = []
    return tuple(media) if media else None


def post_record_from_raw(
    item: Mapping[str, Any],
    *,
    ids: IdGenerator | None = None,
    clock: Clock | None = None,
) -> PostRecord:
    """
    Map one loosely-typed source record onto the canonical PostRecord.

    Each field tries the known source aliases in order (Twitter archive keys,
    canonical camelCase keys, CSV snake_case/lower-cased headers) before falling
    back to a default. Only the listed aliases are read, so contact and location
    fields in the source never reach the output.
    """
    gen = ids or RandomIdGenerator(clock=clock)

    post_id = _first_id(item, "id", "id_str") or gen("tweet")

    text = _first_str(item, "text", "full_text", "content") or ""

    author_id = (
        _first_id(item, "user.id_str", "user.id", "authorId", "author_id", "authorid") or ""
    )
    author_name = _first_str(item, "user.name", "authorName", "author_name", "authorname") or ""
    author_username = (
        _first_str(
            item,
            "user.screen_name",
            "authorUsername",
            "author_username",
            "authorusername",
        )
        or ""
    )

    created_at = normalize_timestamp(
        first_present(item, "created_at", "createdAt", "createdat"),
        clock=clock,
    )

    metrics = PostMetrics(
        likes=_first_count(item, "favorite_count", "likes", "metrics.likes"),
        retweets=_first_count(item, "retweet_count", "retweets", "metrics.retweets"),
        replies=_first_count(item, "reply_count", "replies", "metrics.replies"),
    )

    return PostRecord(
        id=post_id,
        text=text,
        author_id=author_id,
        author_name=author_name,
        author_username=author_username,
        created_at=created_at,
        media=_extract_media(item),
        metrics=metrics,
    )
