"""
Daily Counter Store
Per-page, per-client usage counters that reset lazily on a new calendar day
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("activities", "rerolls")

# Each set is one cookie. 40 ids of up to 64 chars, JSON then base64 encoded,
# stay under the 4096-byte cookie limit
MAX_SET_SIZE = 40


class KeyValueStore(Protocol):
    """Client-side key/value storage (browser storage, cookie jar, dict)"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and scripts"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


@dataclass(frozen=True)
class DailyCounters:
    activities: int
    rerolls: int
    date: str  # YYYY-MM-DD in the viewer's timezone

    @classmethod
    def zero(cls, today: str) -> "DailyCounters":
        return cls(activities=0, rerolls=0, date=today)

    def to_json(self) -> str:
        return json.dumps({
            "activitiesCompleted": self.activities,
            "rerollsUsed": self.rerolls,
            "date": self.date,
        })

    @classmethod
    def from_json(cls, raw: str) -> "DailyCounters":
        parsed = json.loads(raw)
        return cls(
            activities=int(parsed["activitiesCompleted"]),
            rerolls=int(parsed["rerollsUsed"]),
            date=str(parsed["date"]),
        )


def today_key(today: Optional[date] = None) -> str:
    """ISO date string for the counters' day"""
    return (today or date.today()).isoformat()


def counters_key(page_id: str) -> str:
    return f"prasempre_counters_{page_id}"


class DailyCounterStore:
    """Reads and bumps daily counters in a client key/value store"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, page_id: str, today: Optional[date] = None) -> DailyCounters:
        """
        Load counters for today

        Missing, corrupt or stale records come back zeroed for today. The
        reset is not written here; the next increment persists it.
        """
        current_day = today_key(today)
        raw = self.store.get(counters_key(page_id))
        if raw:
            try:
                counters = DailyCounters.from_json(raw)
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Discarding unreadable counters for page {page_id}: {e}")
            else:
                if counters.date == current_day:
                    return counters

        return DailyCounters.zero(current_day)

    def save(self, page_id: str, counters: DailyCounters) -> None:
        self.store.set(counters_key(page_id), counters.to_json())

    def increment(self, page_id: str, field: str, today: Optional[date] = None) -> DailyCounters:
        """Add one to `activities` or `rerolls` and persist"""
        if field not in COUNTER_FIELDS:
            raise ValueError(f"Unknown counter field: {field}")

        counters = self.load(page_id, today)
        if field == "activities":
            updated = DailyCounters(counters.activities + 1, counters.rerolls, counters.date)
        else:
            updated = DailyCounters(counters.activities, counters.rerolls + 1, counters.date)

        self.save(page_id, updated)
        return updated


class ActivitySetStore:
    """
    An ordered per-page set of activity ids (favorites, completed, history)

    Date-scoped sets (completed) are dropped when the stored day is not today.
    At most `max_size` ids are kept; writes past that drop the oldest.
    """

    def __init__(self, store: KeyValueStore, name: str, daily: bool = False, max_size: int = MAX_SET_SIZE):
        self.store = store
        self.name = name
        self.daily = daily
        self.max_size = max(1, min(max_size, MAX_SET_SIZE))

    def _key(self, page_id: str) -> str:
        return f"prasempre_{self.name}_{page_id}"

    def members(self, page_id: str, today: Optional[date] = None) -> List[str]:
        raw = self.store.get(self._key(page_id))
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unreadable {self.name} set for page {page_id}")
            return []

        if self.daily:
            if not isinstance(parsed, dict) or parsed.get("date") != today_key(today):
                return []
            parsed = parsed.get("ids", [])

        if not isinstance(parsed, list):
            return []
        return [str(item) for item in parsed]

    def _write(self, page_id: str, ids: List[str], today: Optional[date]) -> None:
        ids = ids[-self.max_size:]
        if self.daily:
            payload = {"date": today_key(today), "ids": ids}
        else:
            payload = ids
        self.store.set(self._key(page_id), json.dumps(payload))

    def contains(self, page_id: str, activity_id: str, today: Optional[date] = None) -> bool:
        return activity_id in self.members(page_id, today)

    def add(self, page_id: str, activity_id: str, today: Optional[date] = None) -> bool:
        """Add an id; returns False if it was already there"""
        ids = self.members(page_id, today)
        if activity_id in ids:
            return False
        ids.append(activity_id)
        self._write(page_id, ids, today)
        return True

    def touch(self, page_id: str, activity_id: str, today: Optional[date] = None) -> None:
        """Add an id, or move it to the newest position if already there"""
        ids = [item for item in self.members(page_id, today) if item != activity_id]
        ids.append(activity_id)
        self._write(page_id, ids, today)

    def is_full(self, page_id: str, today: Optional[date] = None) -> bool:
        return len(self.members(page_id, today)) >= self.max_size

    def remove(self, page_id: str, activity_id: str, today: Optional[date] = None) -> bool:
        ids = self.members(page_id, today)
        if activity_id not in ids:
            return False
        ids.remove(activity_id)
        self._write(page_id, ids, today)
        return True
