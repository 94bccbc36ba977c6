"""
Tests for plan entitlement decisions
"""

import pytest

from prasempre.config.plan_limits import UNLIMITED, get_plan_limits
from prasempre.services.daily_counters import DailyCounters
from prasempre.services.entitlements import EntitlementEvaluator, QuotaExceeded


def evaluator(plan: str, activities: int = 0, rerolls: int = 0) -> EntitlementEvaluator:
    return EntitlementEvaluator(get_plan_limits(plan), DailyCounters(activities, rerolls, "2025-06-01"))


class TestEntitlementEvaluator:
    def test_presente_allows_one_activity(self):
        assert evaluator("9_90").can_complete_activity()
        assert not evaluator("9_90", activities=1).can_complete_activity()

    def test_boundary_at_three(self):
        assert [evaluator("19_90", activities=n).can_complete_activity() for n in range(4)] == [True, True, True, False]

    def test_interativo_rerolls(self):
        assert evaluator("19_90", rerolls=4).can_reroll()
        assert not evaluator("19_90", rerolls=5).can_reroll()

    def test_premium_never_runs_out(self):
        premium = evaluator("29_90", activities=500, rerolls=500)
        assert premium.can_complete_activity()
        assert premium.can_reroll()
        assert premium.can_favorite(500)
        assert premium.remaining("activities") == UNLIMITED

    def test_favorites_need_the_feature(self):
        assert not evaluator("9_90").can_favorite(0)
        assert evaluator("19_90").can_favorite(2)
        assert not evaluator("19_90").can_favorite(3)

    def test_remaining(self):
        interativo = evaluator("19_90", activities=1, rerolls=5)
        assert interativo.remaining("activities") == 2
        assert interativo.remaining("rerolls") == 0
        with pytest.raises(ValueError):
            interativo.remaining("favorites")

    def test_require_raises_with_upgrade_hint(self):
        with pytest.raises(QuotaExceeded) as exc_info:
            evaluator("9_90", activities=1).require("activities")

        error = exc_info.value
        assert error.action == "activities"
        assert error.limit == 1
        assert error.plan_name == "Presente"
        assert "Interativo" in error.message
        assert error.to_dict()["plan"] == "Presente"

    def test_require_favorites_uses_current_count(self):
        evaluator("19_90").require("favorites", current_favorite_count=2)
        with pytest.raises(QuotaExceeded):
            evaluator("19_90").require("favorites", current_favorite_count=3)

    def test_require_passes_silently_when_allowed(self):
        assert evaluator("29_90", rerolls=99).require("rerolls") is None

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            evaluator("9_90").require("photos")

    def test_snapshot(self):
        snapshot = evaluator("19_90", activities=3).snapshot(current_favorite_count=1)
        assert snapshot["plan"] == "19_90"
        assert snapshot["remainingActivities"] == 0
        assert snapshot["canDoActivity"] is False
        assert snapshot["canFavorite"] is True
        assert snapshot["showHistory"] is True
        assert snapshot["isPremium"] is False
