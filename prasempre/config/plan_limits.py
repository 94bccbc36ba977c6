"""
Plan Limits Configuration
Defines daily quotas and feature flags for each plan
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

UNLIMITED = "unlimited"


class PlanId(str, enum.Enum):
    PRESENTE = "9_90"
    INTERATIVO = "19_90"
    PREMIUM = "29_90"


@dataclass(frozen=True)
class Quota:
    """Either a finite daily allowance or unlimited (limit is None)"""
    limit: Optional[int] = None

    @classmethod
    def finite(cls, limit: int) -> "Quota":
        if limit < 0:
            raise ValueError("Quota limit cannot be negative")
        return cls(limit=limit)

    @classmethod
    def unlimited(cls) -> "Quota":
        return cls(limit=None)

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None

    def allows(self, used: int) -> bool:
        """True if one more use fits under the quota"""
        if self.limit is None:
            return True
        return used < self.limit

    def remaining(self, used: int) -> Union[int, str]:
        if self.limit is None:
            return UNLIMITED
        return max(0, self.limit - used)

    def to_json(self) -> Union[int, str]:
        return UNLIMITED if self.limit is None else self.limit


@dataclass(frozen=True)
class PlanLimits:
    plan_id: PlanId
    name: str
    max_photos: int
    activities_per_day: Quota
    rerolls_per_day: Quota
    favorites: Quota
    history_limit: Quota
    has_favorites: bool
    has_history: bool
    has_weekly_ritual: bool
    has_pwa: bool
    price_cents: int
    features: List[str] = field(default_factory=list)


# Lowest tier first; order matters for upgrade hints
PLAN_LIMITS: Dict[PlanId, PlanLimits] = {
    PlanId.PRESENTE: PlanLimits(
        plan_id=PlanId.PRESENTE,
        name="Presente",
        max_photos=1,
        activities_per_day=Quota.finite(1),
        rerolls_per_day=Quota.finite(1),
        favorites=Quota.finite(0),
        history_limit=Quota.finite(0),
        has_favorites=False,
        has_history=False,
        has_weekly_ritual=False,
        has_pwa=False,
        price_cents=990,
        features=[
            "1 atividade por dia",
            "1 troca de atividade",
            "Contador de tempo",
            "Mensagem surpresa",
        ],
    ),
    PlanId.INTERATIVO: PlanLimits(
        plan_id=PlanId.INTERATIVO,
        name="Interativo",
        max_photos=1,
        activities_per_day=Quota.finite(3),
        rerolls_per_day=Quota.finite(5),
        favorites=Quota.finite(3),
        history_limit=Quota.finite(10),
        has_favorites=True,
        has_history=True,
        has_weekly_ritual=False,
        has_pwa=False,
        price_cents=1990,
        features=[
            "3 atividades por dia",
            "5 trocas de atividade",
            "Histórico de atividades",
            "Até 3 favoritos",
            "Contador de tempo",
            "Mensagem surpresa",
        ],
    ),
    PlanId.PREMIUM: PlanLimits(
        plan_id=PlanId.PREMIUM,
        name="Premium",
        max_photos=3,
        activities_per_day=Quota.unlimited(),
        rerolls_per_day=Quota.unlimited(),
        favorites=Quota.unlimited(),
        history_limit=Quota.unlimited(),
        has_favorites=True,
        has_history=True,
        has_weekly_ritual=True,
        has_pwa=True,
        price_cents=2990,
        features=[
            "Atividades ilimitadas",
            "Trocas ilimitadas",
            "Até 3 fotos",
            "Histórico completo",
            "Favoritos ilimitados",
            "Ritual da semana",
            "Instalar como app (PWA)",
        ],
    ),
}

LOWEST_PLAN = PlanId.PRESENTE


def is_known_plan(plan_id) -> bool:
    """Check whether an identifier names one of the catalog plans"""
    try:
        PlanId(plan_id)
    except ValueError:
        return False
    return True


def get_plan_limits(plan_id) -> PlanLimits:
    """Get limits for a plan; unknown or malformed ids get the lowest tier"""
    if not is_known_plan(plan_id):
        return PLAN_LIMITS[LOWEST_PLAN]
    return PLAN_LIMITS[PlanId(plan_id)]


def get_upgrade_message(plan_id) -> str:
    """Get upgrade prompt pointing at the next tier up"""
    current = get_plan_limits(plan_id).plan_id
    tiers = list(PLAN_LIMITS)
    position = tiers.index(current)
    if position + 1 >= len(tiers):
        return ""
    upgrade = PLAN_LIMITS[tiers[position + 1]]
    price = f"{upgrade.price_cents // 100},{upgrade.price_cents % 100:02d}"
    return f"Faça upgrade para o plano {upgrade.name} (R$ {price}) para liberar mais"


def plan_summary(plan_id) -> Dict[str, object]:
    """Serializable view of a plan's limits"""
    limits = get_plan_limits(plan_id)
    return {
        "plan": limits.plan_id.value,
        "name": limits.name,
        "maxPhotos": limits.max_photos,
        "activitiesPerDay": limits.activities_per_day.to_json(),
        "rerollsPerDay": limits.rerolls_per_day.to_json(),
        "maxFavorites": limits.favorites.to_json(),
        "hasFavorites": limits.has_favorites,
        "hasHistory": limits.has_history,
        "hasWeeklyRitual": limits.has_weekly_ritual,
        "hasPWA": limits.has_pwa,
        "features": list(limits.features),
    }
