"""
Tests for the plan catalog and quota values
"""

import pytest

from prasempre.config.plan_limits import (
    LOWEST_PLAN,
    PLAN_LIMITS,
    UNLIMITED,
    PlanId,
    Quota,
    get_plan_limits,
    get_upgrade_message,
    is_known_plan,
    plan_summary,
)


class TestQuota:
    def test_finite_quota_allows_until_limit(self):
        quota = Quota.finite(3)
        assert quota.allows(0)
        assert quota.allows(2)
        assert not quota.allows(3)
        assert quota.remaining(1) == 2
        assert quota.remaining(10) == 0

    def test_zero_quota_never_allows(self):
        assert not Quota.finite(0).allows(0)

    def test_unlimited_quota(self):
        quota = Quota.unlimited()
        assert quota.is_unlimited
        assert quota.allows(10_000)
        assert quota.remaining(10_000) == UNLIMITED
        assert quota.to_json() == UNLIMITED

    def test_negative_limit_rejected(self):
        with pytest.raises(ValueError):
            Quota.finite(-1)


class TestCatalog:
    def test_exactly_three_plans(self):
        assert set(PLAN_LIMITS) == {PlanId.PRESENTE, PlanId.INTERATIVO, PlanId.PREMIUM}
        assert LOWEST_PLAN == PlanId.PRESENTE

    def test_presente_values(self):
        limits = get_plan_limits("9_90")
        assert limits.name == "Presente"
        assert limits.max_photos == 1
        assert limits.activities_per_day == Quota.finite(1)
        assert limits.rerolls_per_day == Quota.finite(1)
        assert not limits.has_favorites
        assert not limits.has_history
        assert not limits.has_weekly_ritual
        assert limits.price_cents == 990

    def test_interativo_values(self):
        limits = get_plan_limits("19_90")
        assert limits.activities_per_day == Quota.finite(3)
        assert limits.rerolls_per_day == Quota.finite(5)
        assert limits.favorites == Quota.finite(3)
        assert limits.history_limit == Quota.finite(10)
        assert limits.has_favorites and limits.has_history
        assert not limits.has_pwa

    def test_premium_is_unlimited(self):
        limits = get_plan_limits("29_90")
        assert limits.max_photos == 3
        assert limits.activities_per_day.is_unlimited
        assert limits.rerolls_per_day.is_unlimited
        assert limits.favorites.is_unlimited
        assert limits.has_weekly_ritual and limits.has_pwa

    @pytest.mark.parametrize("plan_id", ["bogus", "", None, "9.90", 990])
    def test_unknown_plans_fall_back_to_lowest(self, plan_id):
        assert not is_known_plan(plan_id)
        assert get_plan_limits(plan_id).plan_id == PlanId.PRESENTE

    def test_enum_member_is_accepted(self):
        assert get_plan_limits(PlanId.PREMIUM).name == "Premium"


class TestUpgradeMessage:
    def test_points_to_next_tier(self):
        message = get_upgrade_message("9_90")
        assert "Interativo" in message
        assert "19,90" in message

    def test_middle_tier_points_to_premium(self):
        assert "Premium" in get_upgrade_message("19_90")

    def test_top_tier_has_no_upgrade(self):
        assert get_upgrade_message("29_90") == ""


def test_plan_summary_serializes_unlimited():
    summary = plan_summary("29_90")
    assert summary["plan"] == "29_90"
    assert summary["activitiesPerDay"] == UNLIMITED
    assert summary["hasWeeklyRitual"] is True
    assert plan_summary("9_90")["activitiesPerDay"] == 1
