"""
Activity Selector
Picks the "activity of the day" for a page and produces reroll candidates
"""

import logging
import random
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prasempre.config.default_activities import DEFAULT_ACTIVITIES, WEEKLY_RITUALS
from prasempre.models.activity import Activity

logger = logging.getLogger(__name__)

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 bytes of `text`"""
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def day_seed(page_id: str, today: date) -> str:
    # month and day are not zero-padded
    return f"{page_id}_{today.year}-{today.month}-{today.day}"


def index_for_today(page_id: str, pool_size: int, today: Optional[date] = None) -> int:
    """Same page, same day, same pool -> same index"""
    if pool_size <= 0:
        raise ValueError("Activity pool must not be empty")
    return fnv1a_32(day_seed(page_id, today or date.today())) % pool_size


def reroll(current_index: int, pool_size: int, rng: Optional[random.Random] = None) -> int:
    """
    Random index that differs from `current_index` whenever the pool allows it

    Quota checks happen before this is called.
    """
    if pool_size <= 0:
        raise ValueError("Activity pool must not be empty")
    if pool_size == 1:
        return 0

    rng = rng or random
    if not 0 <= current_index < pool_size:
        return rng.randrange(pool_size)

    # Draw from the pool minus the current slot, then shift past it
    candidate = rng.randrange(pool_size - 1)
    return candidate + 1 if candidate >= current_index else candidate


def week_of_year(today: date) -> int:
    """Whole weeks elapsed since January 1st"""
    return (today - date(today.year, 1, 1)).days // 7


def ritual_for_week(today: Optional[date] = None) -> dict:
    today = today or date.today()
    return WEEKLY_RITUALS[week_of_year(today) % len(WEEKLY_RITUALS)]


class ActivityCatalog:
    """Loads the activity pool shown for a page type"""

    async def pool_for(self, db: AsyncSession, page_type: str) -> List[dict]:
        result = await db.execute(
            select(Activity).where(Activity.type == page_type).order_by(Activity.id)
        )
        activities = [activity.to_dict() for activity in result.scalars().all()]

        if not activities:
            logger.info(f"No stored activities for type '{page_type}', using defaults")
            activities = [dict(item) for item in DEFAULT_ACTIVITIES.get(page_type, DEFAULT_ACTIVITIES["couple"])]

        return activities


# Global instance
activity_catalog = ActivityCatalog()
