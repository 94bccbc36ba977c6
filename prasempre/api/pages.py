"""
Pages API endpoints
Page creation, public page reads and the plan-gated activity experience
"""

from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from prasempre.config.plan_limits import get_plan_limits, get_upgrade_message, plan_summary
from prasempre.middleware.client_state import CookieKeyValueStore, get_client_store
from prasempre.models.page import Page
from prasempre.services.activity_selector import activity_catalog, index_for_today, reroll, ritual_for_week
from prasempre.services.billing import BillingError, BillingRequestError, billing_service
from prasempre.services.daily_counters import MAX_SET_SIZE, ActivitySetStore, DailyCounterStore
from prasempre.services.elapsed import elapsed_since
from prasempre.services.entitlements import EntitlementEvaluator, QuotaExceeded
from prasempre.services.page_lifecycle import (
    PageDraft,
    PageValidationError,
    SlugGenerationError,
    page_lifecycle,
)
from prasempre.utils.database import get_db
from prasempre.utils.rate_limit import billing_rate_limiter, rate_limit_headers

logger = logging.getLogger(__name__)

router = APIRouter()


# Pydantic models for request/response
class PageCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    name1: str
    name2: Optional[str] = None
    occasion: Optional[str] = None
    message: str
    start_date: date = Field(alias="startDate")
    plan: str
    photo_urls: List[str] = Field(default_factory=list, alias="photoUrls")
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")


class RerollRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_index: int = Field(alias="currentIndex")
    day: Optional[date] = Field(default=None, alias="date")


class CompleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    activity_id: str = Field(alias="activityId")
    day: Optional[date] = Field(default=None, alias="date")


class PageState:
    """Everything an activity endpoint needs for one page and one visitor"""

    def __init__(self, page: Page, pool: List[dict], store: CookieKeyValueStore, today: date):
        self.page = page
        self.page_id = str(page.id)
        self.pool = pool
        self.today = today
        self.limits = get_plan_limits(page.plan)
        self.counters = DailyCounterStore(store)
        self.favorites = ActivitySetStore(store, "favorites")
        self.completed = ActivitySetStore(store, "completed", daily=True)
        history_cap = self.limits.history_limit.limit
        self.history = ActivitySetStore(store, "history", max_size=history_cap if history_cap is not None else MAX_SET_SIZE)

    def evaluator(self) -> EntitlementEvaluator:
        return EntitlementEvaluator(self.limits, self.counters.load(self.page_id, self.today))

    def favorite_ids(self) -> List[str]:
        return self.favorites.members(self.page_id)

    def find_activity(self, activity_id: str) -> Optional[dict]:
        for activity in self.pool:
            if activity["id"] == activity_id:
                return activity
        return None

    def activity_view(self, index: int) -> dict:
        activity = dict(self.pool[index])
        activity["isFavorited"] = activity["id"] in self.favorite_ids()
        activity["isCompleted"] = self.completed.contains(self.page_id, activity["id"], self.today)
        return activity

    def entitlements(self) -> dict:
        return self.evaluator().snapshot(len(self.favorite_ids()))


async def _require_public_page(db: AsyncSession, slug: str) -> Page:
    page = await page_lifecycle.get_public_page(db, slug)
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


async def _page_state(db: AsyncSession, slug: str, store: CookieKeyValueStore, today: Optional[date]) -> PageState:
    page = await _require_public_page(db, slug)
    pool = await activity_catalog.pool_for(db, page.type)
    return PageState(page, pool, store, today or date.today())


def _quota_response(error: QuotaExceeded) -> HTTPException:
    return HTTPException(status_code=429, detail=error.to_dict())


def serialize_page(page: Page, today: date) -> dict:
    return {
        "id": str(page.id),
        "slug": page.slug,
        "type": page.type,
        "title": page.title,
        "name1": page.name1,
        "name2": page.name2,
        "occasion": page.occasion,
        "message": page.message,
        "startDate": page.start_date.isoformat(),
        "photoUrls": list(page.photo_urls or []),
        "plan": page.plan,
        "planLimits": plan_summary(page.plan),
        "elapsed": elapsed_since(page.start_date, today),
        "createdAt": page.created_at.isoformat() if page.created_at else None,
    }


@router.post("", status_code=201)
async def create_page(
    payload: PageCreateRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Create a page in pending_payment and, when possible, open its checkout"""
    wants_checkout = bool(payload.customer_email) and billing_service.configured
    if wants_checkout:
        await billing_rate_limiter(request)

    draft = PageDraft(
        type=payload.type,
        name1=payload.name1,
        name2=payload.name2,
        occasion=payload.occasion,
        message=payload.message,
        start_date=payload.start_date,
        plan=payload.plan,
        photo_urls=payload.photo_urls,
    )

    try:
        page = await page_lifecycle.create(db, draft)
    except PageValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except SlugGenerationError:
        raise HTTPException(status_code=503, detail="Erro ao criar página. Tente novamente.")

    content = {"slug": page.slug}

    if wants_checkout:
        try:
            checkout = await billing_service.create_checkout(
                db,
                slug=page.slug,
                plan=page.plan,
                customer_email=payload.customer_email,
                origin=request.headers.get("origin"),
            )
        except BillingRequestError as e:
            raise HTTPException(status_code=400, detail={"message": str(e), "slug": page.slug})
        except BillingError as e:
            logger.error(f"Checkout creation failed for {page.slug}: {e}")
            raise HTTPException(
                status_code=502,
                detail={"message": "Erro ao criar pagamento. Tente novamente.", "slug": page.slug},
            )
        content["checkoutUrl"] = checkout["checkoutUrl"]

    return JSONResponse(status_code=201, content=content, headers=rate_limit_headers(request))


@router.get("/{slug}")
async def get_page(
    slug: str,
    day: Optional[date] = Query(default=None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    """Public page; pending and missing pages are both 404"""
    page = await _require_public_page(db, slug)
    return serialize_page(page, day or date.today())


@router.get("/{slug}/activity/today")
async def get_today_activity(
    slug: str,
    day: Optional[date] = Query(default=None, alias="date"),
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Activity of the day for this page, stable for the whole (viewer-local) day"""
    state = await _page_state(db, slug, store, day)
    index = index_for_today(state.page_id, len(state.pool), state.today)
    return {
        "index": index,
        "activity": state.activity_view(index),
        "entitlements": state.entitlements(),
    }


@router.post("/{slug}/activity/reroll")
async def reroll_activity(
    slug: str,
    payload: RerollRequest,
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Swap the suggestion for another one, if the plan still has rerolls today"""
    state = await _page_state(db, slug, store, payload.day)
    try:
        state.evaluator().require("rerolls")
    except QuotaExceeded as e:
        raise _quota_response(e)

    state.counters.increment(state.page_id, "rerolls", state.today)
    index = reroll(payload.current_index, len(state.pool))
    return {
        "index": index,
        "activity": state.activity_view(index),
        "entitlements": state.entitlements(),
    }


@router.post("/{slug}/activity/complete")
async def complete_activity(
    slug: str,
    payload: CompleteRequest,
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Mark an activity as done today; repeats of the same activity aren't counted again"""
    state = await _page_state(db, slug, store, payload.day)
    if not state.find_activity(payload.activity_id):
        raise HTTPException(status_code=404, detail="Atividade não encontrada")

    if state.completed.contains(state.page_id, payload.activity_id, state.today):
        return {"completed": True, "alreadyCompleted": True, "entitlements": state.entitlements()}

    try:
        state.evaluator().require("activities")
    except QuotaExceeded as e:
        raise _quota_response(e)

    state.counters.increment(state.page_id, "activities", state.today)
    state.completed.add(state.page_id, payload.activity_id, state.today)
    state.history.touch(state.page_id, payload.activity_id)

    return {"completed": True, "alreadyCompleted": False, "entitlements": state.entitlements()}


@router.post("/{slug}/favorites/{activity_id}")
async def toggle_favorite(
    slug: str,
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Add or remove a favorite; adding is limited by the plan"""
    state = await _page_state(db, slug, store, None)
    if not state.find_activity(activity_id):
        raise HTTPException(status_code=404, detail="Atividade não encontrada")

    favorites = state.favorite_ids()
    if activity_id in favorites:
        state.favorites.remove(state.page_id, activity_id)
        return {"favorited": False, "favorites": state.favorite_ids()}

    try:
        state.evaluator().require("favorites", current_favorite_count=len(favorites))
    except QuotaExceeded as e:
        raise _quota_response(e)

    if state.favorites.is_full(state.page_id):
        raise _quota_response(QuotaExceeded(
            f"Limite de {MAX_SET_SIZE} favoritos atingido.", "favorites", MAX_SET_SIZE, state.limits.name
        ))

    state.favorites.add(state.page_id, activity_id)
    return {"favorited": True, "favorites": state.favorite_ids()}


@router.get("/{slug}/history")
async def get_history(
    slug: str,
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Completed and favorite activities, for plans with history access"""
    state = await _page_state(db, slug, store, None)
    if not state.limits.has_history:
        raise HTTPException(
            status_code=403,
            detail={"message": "Histórico indisponível neste plano", "upgrade": get_upgrade_message(state.page.plan)},
        )

    done = [state.find_activity(activity_id) for activity_id in state.history.members(state.page_id)]
    done = [activity for activity in reversed(done) if activity]
    limit = state.limits.history_limit.limit
    if limit is not None:
        done = done[:limit]

    favorites = [state.find_activity(activity_id) for activity_id in state.favorite_ids()]
    return {
        "history": done,
        "favorites": [activity for activity in favorites if activity],
    }


@router.get("/{slug}/usage")
async def get_usage(
    slug: str,
    day: Optional[date] = Query(default=None, alias="date"),
    db: AsyncSession = Depends(get_db),
    store: CookieKeyValueStore = Depends(get_client_store)
):
    """Plan limits and what's left today"""
    state = await _page_state(db, slug, store, day)
    return state.entitlements()


@router.get("/{slug}/ritual")
async def get_weekly_ritual(
    slug: str,
    day: Optional[date] = Query(default=None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    """Weekly question/challenge, Premium only"""
    page = await _require_public_page(db, slug)
    limits = get_plan_limits(page.plan)
    if not limits.has_weekly_ritual:
        raise HTTPException(
            status_code=403,
            detail={
                "message": "O Ritual da Semana está disponível apenas no plano Premium.",
                "upgrade": get_upgrade_message(page.plan),
            },
        )
    return ritual_for_week(day or date.today())
