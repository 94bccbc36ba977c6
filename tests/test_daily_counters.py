"""
Tests for the lazily-resetting daily counters and activity id sets
"""

import json
from datetime import date

import pytest

from prasempre.services.daily_counters import (
    ActivitySetStore,
    DailyCounters,
    DailyCounterStore,
    InMemoryKeyValueStore,
    MAX_SET_SIZE,
    counters_key,
)

PAGE_ID = "page-1"
DAY_ONE = date(2025, 6, 1)
DAY_TWO = date(2025, 6, 2)


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


class TestDailyCounterStore:
    def test_missing_record_loads_as_zero(self, kv):
        counters = DailyCounterStore(kv).load(PAGE_ID, DAY_ONE)
        assert counters == DailyCounters(0, 0, "2025-06-01")

    def test_increment_persists(self, kv):
        store = DailyCounterStore(kv)
        store.increment(PAGE_ID, "activities", DAY_ONE)
        store.increment(PAGE_ID, "rerolls", DAY_ONE)
        store.increment(PAGE_ID, "rerolls", DAY_ONE)

        counters = store.load(PAGE_ID, DAY_ONE)
        assert counters.activities == 1
        assert counters.rerolls == 2

        raw = json.loads(kv.data[counters_key(PAGE_ID)])
        assert raw == {"activitiesCompleted": 1, "rerollsUsed": 2, "date": "2025-06-01"}

    def test_new_day_resets_without_writing(self, kv):
        store = DailyCounterStore(kv)
        store.increment(PAGE_ID, "activities", DAY_ONE)
        before = dict(kv.data)

        counters = store.load(PAGE_ID, DAY_TWO)

        assert counters == DailyCounters.zero("2025-06-02")
        assert kv.data == before

    def test_stale_record_example(self):
        stale = DailyCounters(3, 1, "2024-01-01")
        kv = InMemoryKeyValueStore({counters_key(PAGE_ID): stale.to_json()})

        assert DailyCounterStore(kv).load(PAGE_ID, date(2024, 1, 2)) == DailyCounters(0, 0, "2024-01-02")

    def test_increment_after_reset_starts_from_zero(self, kv):
        store = DailyCounterStore(kv)
        store.increment(PAGE_ID, "activities", DAY_ONE)
        store.increment(PAGE_ID, "activities", DAY_ONE)

        counters = store.increment(PAGE_ID, "activities", DAY_TWO)
        assert counters.activities == 1
        assert counters.date == "2025-06-02"

    @pytest.mark.parametrize("raw", ["not json", "{}", '{"activitiesCompleted": "x", "rerollsUsed": 0, "date": "2025-06-01"}', "[]"])
    def test_corrupt_record_loads_as_zero(self, raw):
        kv = InMemoryKeyValueStore({counters_key(PAGE_ID): raw})
        assert DailyCounterStore(kv).load(PAGE_ID, DAY_ONE) == DailyCounters.zero("2025-06-01")

    def test_pages_are_independent(self, kv):
        store = DailyCounterStore(kv)
        store.increment("page-a", "rerolls", DAY_ONE)
        assert store.load("page-b", DAY_ONE).rerolls == 0

    def test_unknown_field_rejected(self, kv):
        with pytest.raises(ValueError):
            DailyCounterStore(kv).increment(PAGE_ID, "favorites", DAY_ONE)


class TestActivitySetStore:
    def test_add_and_remove(self, kv):
        favorites = ActivitySetStore(kv, "favorites")
        assert favorites.add(PAGE_ID, "a1")
        assert not favorites.add(PAGE_ID, "a1")
        assert favorites.add(PAGE_ID, "a2")
        assert favorites.members(PAGE_ID) == ["a1", "a2"]

        assert favorites.remove(PAGE_ID, "a1")
        assert not favorites.remove(PAGE_ID, "a1")
        assert favorites.members(PAGE_ID) == ["a2"]

    def test_daily_set_forgets_previous_day(self, kv):
        completed = ActivitySetStore(kv, "completed", daily=True)
        completed.add(PAGE_ID, "a1", DAY_ONE)

        assert completed.contains(PAGE_ID, "a1", DAY_ONE)
        assert not completed.contains(PAGE_ID, "a1", DAY_TWO)
        assert completed.members(PAGE_ID, DAY_TWO) == []

    def test_unreadable_set_is_empty(self):
        kv = InMemoryKeyValueStore({"prasempre_favorites_page-1": "{broken"})
        assert ActivitySetStore(kv, "favorites").members(PAGE_ID) == []

    def test_touch_moves_to_newest(self, kv):
        history = ActivitySetStore(kv, "history")
        history.touch(PAGE_ID, "a1")
        history.touch(PAGE_ID, "a2")
        history.touch(PAGE_ID, "a1")
        assert history.members(PAGE_ID) == ["a2", "a1"]

    def test_oldest_ids_are_dropped_past_max_size(self, kv):
        history = ActivitySetStore(kv, "history", max_size=3)
        for activity_id in ("a1", "a2", "a3", "a4"):
            history.touch(PAGE_ID, activity_id)
        assert history.members(PAGE_ID) == ["a2", "a3", "a4"]
        assert history.is_full(PAGE_ID)

    def test_max_size_never_exceeds_cookie_capacity(self, kv):
        assert ActivitySetStore(kv, "history", max_size=1000).max_size == MAX_SET_SIZE
