# tests/test_dedupe.py
from __future__ import annotations

import unittest

from tweet_import.dedupe import SeenKeys, dedupe_key, dedupe_posts
from tweet_import.post import PostRecord


class TestDedupe(unittest.TestCase):
    def test_dedupe_key_uses_id(self) -> None:
        self.assertEqual(dedupe_key(PostRecord(id="123")), "id:123")

    def test_keeps_first_occurrence_in_order(self) -> None:
        posts = [
            PostRecord(id="1", text="first"),
            PostRecord(id="2", text="second"),
            PostRecord(id="1", text="again"),
        ]
        out = dedupe_posts(posts)
        self.assertEqual([(p.id, p.text) for p in out], [("1", "first"), ("2", "second")])

    def test_shared_seen_keys_span_batches(self) -> None:
        seen = SeenKeys()
        dedupe_posts([PostRecord(id="1")], seen=seen)
        out = dedupe_posts([PostRecord(id="1"), PostRecord(id="2")], seen=seen)
        self.assertEqual([p.id for p in out], ["2"])
        self.assertTrue(seen.has("id:2"))


if __name__ == "__main__":
    unittest.main()
