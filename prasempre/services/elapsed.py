"""
Elapsed time since a page's start date (the "juntos há" counter)
"""

import calendar
from datetime import date
from typing import Any, Dict, Optional


def _anniversary(start: date, year: int) -> date:
    # Feb 29 falls back to Feb 28 in common years
    day = min(start.day, calendar.monthrange(year, start.month)[1])
    return date(year, start.month, day)


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def elapsed_since(start_date: date, today: Optional[date] = None) -> Dict[str, Any]:
    """Break the time since `start_date` into years/months/days plus next anniversary"""
    today = today or date.today()
    total_days = max(0, (today - start_date).days)

    total_months = (today.year - start_date.year) * 12 + (today.month - start_date.month)
    if total_months > 0 and _add_months(start_date, total_months) > today:
        total_months -= 1
    total_months = max(0, total_months)

    last_boundary = _add_months(start_date, total_months)
    days = max(0, (today - last_boundary).days)

    next_anniversary = _anniversary(start_date, today.year)
    if next_anniversary <= today:
        next_anniversary = _anniversary(start_date, today.year + 1)

    return {
        "totalDays": total_days,
        "years": total_months // 12,
        "months": total_months % 12,
        "days": days,
        "nextAnniversary": next_anniversary.isoformat(),
        "daysUntilAnniversary": (next_anniversary - today).days,
        "nextAnniversaryYears": next_anniversary.year - start_date.year,
    }
