from __future__ import annotations

import unittest
from datetime import datetime, timezone

from tweet_import.ids import SequentialIdGenerator
from tweet_import.normalize import first_present, normalize_timestamp, post_record_from_raw
from tweet_import.post import PostMedia, PostMetrics, PostRecord


def _fixed_clock() -> datetime:
    return datetime(2025, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class TestFirstPresent(unittest.TestCase):
    def test_skips_missing_and_blank_values(self) -> None:
        item = {"a": None, "b": "  ", "c": "x", "d": "y"}
        self.assertEqual(first_present(item, "a", "b", "c", "d"), "x")

    def test_reads_dotted_paths(self) -> None:
        item = {"user": {"screen_name": "alice"}}
        self.assertEqual(first_present(item, "user.screen_name"), "alice")
        self.assertIsNone(first_present(item, "user.name", "missing.key"))

    def test_keeps_zero(self) -> None:
        self.assertEqual(first_present({"n": 0}, "n"), 0)


class TestNormalize(unittest.TestCase):
    def test_twitter_archive_item(self) -> None:
        item = {
            "id_str": "1050118621198921728",
            "full_text": "Hello from the archive",
            "created_at": "Wed Oct 10 20:19:24 +0000 2018",
            "favorite_count": 12,
            "retweet_count": "3",
            "reply_count": 0,
            "user": {"id_str": "42", "name": "Alice", "screen_name": "alice"},
            "entities": {
                "media": [
                    {
                        "type": "animated_gif",
                        "media_url_https": "https://pbs.example.com/a.jpg",
                        "url": "https://t.co/a",
                    },
                    {"media_url": "http://pbs.example.com/b.jpg"},
                    {"type": "video"},
                ]
            },
        }

        post = post_record_from_raw(item, ids=SequentialIdGenerator(), clock=_fixed_clock)

        self.assertEqual(post.id, "1050118621198921728")
        self.assertEqual(post.text, "Hello from the archive")
        self.assertEqual(post.author_id, "42")
        self.assertEqual(post.author_name, "Alice")
        self.assertEqual(post.author_username, "alice")
        self.assertEqual(post.created_at, "2018-10-10T20:19:24.000Z")
        self.assertEqual(post.metrics, PostMetrics(likes=12, retweets=3, replies=0))
        self.assertEqual(
            post.media,
            (
                PostMedia(type="gif", url="https://pbs.example.com/a.jpg", preview_url="https://t.co/a"),
                PostMedia(type="photo", url="http://pbs.example.com/b.jpg", preview_url=None),
            ),
        )
        self.assertIsNone(post.ai_summary)
        self.assertIsNone(post.ai_topics)
        self.assertIsNone(post.ai_entities)

    def test_defaults_for_empty_item(self) -> None:
        post = post_record_from_raw({}, ids=SequentialIdGenerator(), clock=_fixed_clock)

        self.assertEqual(post.id, "tweet_1")
        self.assertEqual(post.text, "")
        self.assertEqual(post.author_id, "")
        self.assertEqual(post.author_name, "")
        self.assertEqual(post.author_username, "")
        self.assertEqual(post.created_at, "2025-03-04T05:06:07.000Z")
        self.assertIsNone(post.media)
        self.assertEqual(post.metrics, PostMetrics())

    def test_numeric_ids_are_stringified(self) -> None:
        post = post_record_from_raw({"id": 7, "user": {"id": 99}})
        self.assertEqual(post.id, "7")
        self.assertEqual(post.author_id, "99")

    def test_text_aliases_in_order(self) -> None:
        post = post_record_from_raw({"full_text": "full", "content": "content"})
        self.assertEqual(post.text, "full")
        post = post_record_from_raw({"text": "", "content": "content"})
        self.assertEqual(post.text, "content")

    def test_zero_count_falls_through_to_next_alias(self) -> None:
        post = post_record_from_raw({"favorite_count": 0, "likes": "5", "replies": "n/a"})
        self.assertEqual(post.metrics.likes, 5)
        self.assertEqual(post.metrics.replies, 0)

    def test_canonical_record_is_a_fixed_point(self) -> None:
        raw = {
            "id": "1",
            "text": "hello",
            "user": {"id_str": "9", "name": "Bob", "screen_name": "bob"},
            "created_at": "2024-01-02T03:04:05Z",
            "favorite_count": 4,
            "retweet_count": 2,
            "reply_count": 1,
            "entities": {"media": [{"type": "video", "media_url_https": "https://v", "url": "https://t.co/v"}]},
        }
        first = post_record_from_raw(raw)
        second = post_record_from_raw(first.to_dict())
        self.assertEqual(first, second)
        self.assertEqual(second.to_dict(), first.to_dict())

    def test_string_fields_keep_surrounding_whitespace(self) -> None:
        record = PostRecord(
            id=" 7 ",
            text=" hi there ",
            author_id=" 9 ",
            author_name=" Bob ",
            author_username=" bob ",
            created_at=" 2024-01-02 ",
        )
        again = post_record_from_raw(record.to_dict())
        self.assertEqual(again, record)

    def test_sensitive_fields_leave_no_trace(self) -> None:
        raw = {
            "id": "1",
            "text": "hi",
            "created_at": "2024-01-02",
            "email": "secret@example.com",
            "phone": "+1-555-0100",
            "location": "Secret City",
            "geo": {"coordinates": [12.5, 41.9]},
            "place": {"full_name": "Hidden Place"},
            "coordinates": [12.5, 41.9],
            "contributors": ["77"],
            "user_id": "88",
            "in_reply_to_user_id": "66",
            "user": {"screen_name": "alice", "location": "Secret City", "email": "secret@example.com"},
        }
        post = post_record_from_raw(raw)
        dumped = repr(post.to_dict()) + repr(post)

        for needle in ("secret@example.com", "555-0100", "Secret City", "12.5", "Hidden Place", "77", "88", "66"):
            self.assertNotIn(needle, dumped)
        for key in ("email", "phone", "location", "geo", "place", "coordinates", "contributors", "user_id"):
            self.assertNotIn(key, post.to_dict())


class TestNormalizeTimestamp(unittest.TestCase):
    def test_keeps_iso_values(self) -> None:
        for value in ("2024-01-02", "2024-01-02T03:04:05Z", "2024-01-02T03:04:05.123+02:00"):
            self.assertEqual(normalize_timestamp(value, clock=_fixed_clock), value)

    def test_unparseable_falls_back_to_clock(self) -> None:
        self.assertEqual(
            normalize_timestamp("yesterday", clock=_fixed_clock),
            "2025-03-04T05:06:07.000Z",
        )
        self.assertEqual(normalize_timestamp(None, clock=_fixed_clock), "2025-03-04T05:06:07.000Z")


if __name__ == "__main__":
    unittest.main()
