"""
Entitlement Evaluator
Decides whether a page's plan allows an action given today's counters
"""

import logging
from typing import Any, Dict, Union

from prasempre.config.plan_limits import PlanLimits, get_upgrade_message
from prasempre.services.daily_counters import DailyCounters

logger = logging.getLogger(__name__)

ACTION_LABELS = {
    "activities": "atividades por dia",
    "rerolls": "trocas de atividade por dia",
    "favorites": "favoritos",
}


class QuotaExceeded(Exception):
    """Raised when an action is over the plan's quota"""
    def __init__(self, message: str, action: str, limit: Union[int, str], plan_name: str):
        self.message = message
        self.action = action
        self.limit = limit
        self.plan_name = plan_name
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "action": self.action,
            "limit": self.limit,
            "plan": self.plan_name,
        }


class EntitlementEvaluator:
    """Pure checks over (plan limits, counters); holds no state of its own"""

    def __init__(self, limits: PlanLimits, counters: DailyCounters):
        self.limits = limits
        self.counters = counters

    def can_complete_activity(self) -> bool:
        return self.limits.activities_per_day.allows(self.counters.activities)

    def can_reroll(self) -> bool:
        return self.limits.rerolls_per_day.allows(self.counters.rerolls)

    def can_favorite(self, current_favorite_count: int) -> bool:
        if not self.limits.has_favorites:
            return False
        return self.limits.favorites.allows(current_favorite_count)

    def remaining(self, field: str) -> Union[int, str]:
        if field == "activities":
            return self.limits.activities_per_day.remaining(self.counters.activities)
        if field == "rerolls":
            return self.limits.rerolls_per_day.remaining(self.counters.rerolls)
        raise ValueError(f"Unknown quota field: {field}")

    def require(self, action: str, current_favorite_count: int = 0) -> None:
        """Raise QuotaExceeded unless `action` is allowed right now"""
        if action == "activities":
            allowed, quota = self.can_complete_activity(), self.limits.activities_per_day
        elif action == "rerolls":
            allowed, quota = self.can_reroll(), self.limits.rerolls_per_day
        elif action == "favorites":
            allowed, quota = self.can_favorite(current_favorite_count), self.limits.favorites
        else:
            raise ValueError(f"Unknown action: {action}")

        if allowed:
            return

        limit = quota.to_json()
        message = f"O plano {self.limits.name} permite {limit} {ACTION_LABELS[action]}."
        upgrade = get_upgrade_message(self.limits.plan_id)
        if upgrade:
            message = f"{message} {upgrade}"

        logger.info(
            f"Quota reached: action={action}, limit={limit}, plan={self.limits.plan_id.value}"
        )
        raise QuotaExceeded(message, action, limit, self.limits.name)

    def snapshot(self, current_favorite_count: int = 0) -> Dict[str, Any]:
        """Current entitlements for display"""
        return {
            "plan": self.limits.plan_id.value,
            "planName": self.limits.name,
            "date": self.counters.date,
            "activitiesUsedToday": self.counters.activities,
            "rerollsUsedToday": self.counters.rerolls,
            "remainingActivities": self.remaining("activities"),
            "remainingRerolls": self.remaining("rerolls"),
            "canDoActivity": self.can_complete_activity(),
            "canReroll": self.can_reroll(),
            "canFavorite": self.can_favorite(current_favorite_count),
            "showHistory": self.limits.has_history,
            "showFavorites": self.limits.has_favorites,
            "showWeeklyRitual": self.limits.has_weekly_ritual,
            "isPremium": self.limits.has_weekly_ritual and self.limits.has_pwa,
        }
