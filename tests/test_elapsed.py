"""
Tests for the elapsed-time counter
"""

from datetime import date

from prasempre.services.elapsed import elapsed_since


def test_months_and_days_since_start():
    elapsed = elapsed_since(date(2024, 1, 15), date(2024, 3, 20))
    assert elapsed["totalDays"] == 65
    assert elapsed["years"] == 0
    assert elapsed["months"] == 2
    assert elapsed["days"] == 5
    assert elapsed["nextAnniversary"] == "2025-01-15"
    assert elapsed["daysUntilAnniversary"] == 301
    assert elapsed["nextAnniversaryYears"] == 1


def test_day_before_month_boundary():
    elapsed = elapsed_since(date(2024, 1, 15), date(2024, 2, 14))
    assert elapsed["months"] == 0
    assert elapsed["days"] == 30


def test_started_today():
    elapsed = elapsed_since(date(2025, 6, 1), date(2025, 6, 1))
    assert elapsed["totalDays"] == 0
    assert elapsed["days"] == 0
    assert elapsed["nextAnniversary"] == "2026-06-01"
    assert elapsed["daysUntilAnniversary"] == 365


def test_leap_day_start():
    elapsed = elapsed_since(date(2020, 2, 29), date(2021, 2, 28))
    assert elapsed["years"] == 1
    assert elapsed["months"] == 0
    assert elapsed["days"] == 0
    assert elapsed["nextAnniversary"] == "2022-02-28"


def test_several_years():
    elapsed = elapsed_since(date(2015, 5, 10), date(2025, 5, 9))
    assert elapsed["years"] == 9
    assert elapsed["months"] == 11
    assert elapsed["daysUntilAnniversary"] == 1
    assert elapsed["nextAnniversaryYears"] == 10
