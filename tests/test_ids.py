from __future__ import annotations

import random
import re
import unittest
from datetime import datetime, timedelta, timezone

from tweet_import.ids import RandomIdGenerator, SequentialIdGenerator, iso_timestamp


class TestIds(unittest.TestCase):
    def test_random_ids_embed_clock_millis(self) -> None:
        clock = lambda: datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)  # noqa: E731
        gen = RandomIdGenerator(clock=clock, rng=random.Random(7))

        value = gen("tweet")
        self.assertRegex(value, re.compile(r"^tweet_1704164645678_[0-9a-z]{7}$"))
        self.assertNotEqual(value, gen("tweet"))

    def test_sequential_ids(self) -> None:
        gen = SequentialIdGenerator()
        self.assertEqual([gen("md"), gen("tweet"), gen("md")], ["md_1", "tweet_2", "md_3"])

    def test_iso_timestamp_is_utc_with_z(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        clock = lambda: datetime(2024, 1, 2, 5, 0, 0, tzinfo=plus_two)  # noqa: E731
        self.assertEqual(iso_timestamp(clock), "2024-01-02T03:00:00.000Z")


if __name__ == "__main__":
    unittest.main()
