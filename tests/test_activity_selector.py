"""
Tests for daily activity selection and rerolls
"""

import random
from datetime import date

import pytest

from prasempre.config.default_activities import DEFAULT_ACTIVITIES, WEEKLY_RITUALS
from prasempre.models.activity import Activity
from prasempre.services.activity_selector import (
    activity_catalog,
    day_seed,
    fnv1a_32,
    index_for_today,
    reroll,
    ritual_for_week,
    week_of_year,
)


class TestFnv1a:
    def test_known_vectors(self):
        assert fnv1a_32("") == 0x811C9DC5
        assert fnv1a_32("a") == 0xE40C292C
        assert fnv1a_32("foobar") == 0xBF9CF968

    def test_seed_does_not_pad_month_or_day(self):
        assert day_seed("abc", date(2025, 3, 7)) == "abc_2025-3-7"


class TestIndexForToday:
    def test_stable_for_same_day(self):
        today = date(2025, 6, 1)
        first = index_for_today("page-1", 4, today)
        assert all(index_for_today("page-1", 4, today) == first for _ in range(10))

    def test_matches_hash_of_seed(self):
        today = date(2025, 12, 25)
        assert index_for_today("page-1", 7, today) == fnv1a_32("page-1_2025-12-25") % 7

    def test_always_in_range(self):
        for day in range(1, 29):
            assert 0 <= index_for_today("page-x", 3, date(2025, 2, day)) < 3

    def test_changes_across_days(self):
        indices = {index_for_today("page-1", 4, date(2025, 3, day)) for day in range(1, 29)}
        assert len(indices) > 1

    def test_empty_pool_rejected(self):
        with pytest.raises(ValueError):
            index_for_today("page-1", 0, date(2025, 6, 1))


class TestReroll:
    def test_never_repeats_current(self):
        rng = random.Random(42)
        for current in range(5):
            for _ in range(50):
                assert reroll(current, 5, rng) != current

    def test_reaches_every_other_index(self):
        rng = random.Random(7)
        seen = {reroll(2, 4, rng) for _ in range(200)}
        assert seen == {0, 1, 3}

    def test_single_item_pool(self):
        assert reroll(0, 1) == 0

    def test_out_of_range_current(self):
        assert 0 <= reroll(9, 3, random.Random(1)) < 3


class TestWeeklyRitual:
    def test_week_of_year(self):
        assert week_of_year(date(2025, 1, 1)) == 0
        assert week_of_year(date(2025, 1, 7)) == 0
        assert week_of_year(date(2025, 1, 8)) == 1

    def test_ritual_rotates_by_week(self):
        assert ritual_for_week(date(2025, 1, 1)) == WEEKLY_RITUALS[0]
        assert ritual_for_week(date(2025, 1, 8)) == WEEKLY_RITUALS[1]
        assert ritual_for_week(date(2025, 1, 2)) == ritual_for_week(date(2025, 1, 3))


class TestActivityCatalog:
    @pytest.mark.asyncio
    async def test_defaults_when_table_empty(self, db):
        pool = await activity_catalog.pool_for(db, "pet")
        assert [item["id"] for item in pool] == [item["id"] for item in DEFAULT_ACTIVITIES["pet"]]

    @pytest.mark.asyncio
    async def test_stored_activities_win(self, db):
        db.add_all([
            Activity(id="couple-b", type="couple", title="B", prompt="b"),
            Activity(id="couple-a", type="couple", title="A", prompt="a"),
            Activity(id="friends-a", type="friends", title="F", prompt="f"),
        ])
        await db.commit()

        pool = await activity_catalog.pool_for(db, "couple")
        assert [item["id"] for item in pool] == ["couple-a", "couple-b"]
