"""
Page Lifecycle Manager
Creates pages in pending_payment and activates them once payment is confirmed
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional
from urllib.parse import urlparse

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from prasempre.config.plan_limits import get_plan_limits, is_known_plan
from prasempre.models.page import Page, PageStatus, PageType
from prasempre.utils.slug_generator import generate_slug

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 5
MAX_NAME_LENGTH = 50
MAX_OCCASION_LENGTH = 100
MAX_MESSAGE_LENGTH = 300


class PageValidationError(Exception):
    """Draft rejected; `errors` maps field name -> message"""
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(f"Invalid page draft: {', '.join(sorted(errors))}")


class SlugGenerationError(Exception):
    """Every slug attempt collided with an existing page"""


class PageNotFound(Exception):
    """No page matches the given slug or billing id"""


@dataclass
class PageDraft:
    type: str
    name1: str
    message: str
    start_date: date
    plan: str
    name2: Optional[str] = None
    occasion: Optional[str] = None
    photo_urls: List[str] = field(default_factory=list)


@dataclass
class ActivationResult:
    outcome: str  # "activated" | "already_processed"
    slug: str
    status: str
    billing_id: Optional[str]

    @property
    def activated(self) -> bool:
        return self.outcome == "activated"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_slug_conflict(error: IntegrityError) -> bool:
    return "slug" in str(error.orig).lower()


class PageLifecycleManager:
    """Owns the page status field: pending_payment -> active, never backwards"""

    def __init__(
        self,
        slug_factory: Callable[[str, Optional[str]], str] = generate_slug,
        clock: Callable[[], date] = date.today,
        max_slug_attempts: int = MAX_SLUG_ATTEMPTS,
    ):
        self.slug_factory = slug_factory
        self.clock = clock
        self.max_slug_attempts = max_slug_attempts

    def validate(self, draft: PageDraft) -> PageDraft:
        """Return a cleaned copy of the draft or raise PageValidationError"""
        errors: Dict[str, str] = {}

        page_type = draft.type
        if page_type not in {t.value for t in PageType}:
            errors["type"] = "Tipo de página inválido"

        name1 = _clean(draft.name1)
        if not name1:
            errors["name1"] = "Nome obrigatório"
        elif len(name1) > MAX_NAME_LENGTH:
            errors["name1"] = f"Máximo {MAX_NAME_LENGTH} caracteres"

        name2 = _clean(draft.name2)
        if page_type == PageType.PET.value:
            name2 = None
        elif not name2:
            errors["name2"] = "Nome obrigatório"
        elif len(name2) > MAX_NAME_LENGTH:
            errors["name2"] = f"Máximo {MAX_NAME_LENGTH} caracteres"

        occasion = _clean(draft.occasion)
        if occasion and len(occasion) > MAX_OCCASION_LENGTH:
            errors["occasion"] = f"Máximo {MAX_OCCASION_LENGTH} caracteres"

        message = (draft.message or "").strip()
        if not message:
            errors["message"] = "Mensagem obrigatória"
        elif len(message) > MAX_MESSAGE_LENGTH:
            errors["message"] = f"Máximo {MAX_MESSAGE_LENGTH} caracteres"

        if draft.start_date is None:
            errors["startDate"] = "Data obrigatória"
        elif draft.start_date > self.clock():
            errors["startDate"] = "A data não pode estar no futuro"

        if not is_known_plan(draft.plan):
            errors["plan"] = "Plano inválido"

        photo_urls = [url.strip() for url in (draft.photo_urls or []) if url and url.strip()]
        max_photos = get_plan_limits(draft.plan).max_photos
        if len(photo_urls) > max_photos:
            errors["photoUrls"] = f"Este plano permite até {max_photos} foto(s)"
        elif any(not _is_http_url(url) for url in photo_urls):
            errors["photoUrls"] = "URL de foto inválida"

        if errors:
            raise PageValidationError(errors)

        return PageDraft(
            type=page_type,
            name1=name1,
            name2=name2,
            occasion=occasion,
            message=message,
            start_date=draft.start_date,
            plan=get_plan_limits(draft.plan).plan_id.value,
            photo_urls=photo_urls,
        )

    async def create(self, db: AsyncSession, draft: PageDraft) -> Page:
        """Validate and persist a new page in pending_payment"""
        cleaned = self.validate(draft)

        for attempt in range(1, self.max_slug_attempts + 1):
            slug = self.slug_factory(cleaned.name1, cleaned.name2)
            page = Page(
                slug=slug,
                type=cleaned.type,
                name1=cleaned.name1,
                name2=cleaned.name2,
                occasion=cleaned.occasion,
                message=cleaned.message,
                start_date=cleaned.start_date,
                photo_urls=cleaned.photo_urls,
                plan=cleaned.plan,
                status=PageStatus.PENDING_PAYMENT.value,
                is_active=False,
            )
            db.add(page)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                if not _is_slug_conflict(e):
                    raise
                logger.warning(f"Slug collision on '{slug}' (attempt {attempt}/{self.max_slug_attempts})")
                continue

            await db.refresh(page)
            logger.info(f"Created page {page.slug} ({page.type}, plan {page.plan}) pending payment")
            return page

        logger.error(f"Could not find a free slug after {self.max_slug_attempts} attempts")
        raise SlugGenerationError(
            f"Could not generate a unique slug after {self.max_slug_attempts} attempts"
        )

    async def get_page_by_slug(self, db: AsyncSession, slug: str) -> Optional[Page]:
        result = await db.execute(select(Page).where(Page.slug == slug))
        return result.scalar_one_or_none()

    async def get_page_by_billing_id(self, db: AsyncSession, billing_id: str) -> Optional[Page]:
        result = await db.execute(select(Page).where(Page.billing_id == billing_id))
        return result.scalar_one_or_none()

    async def get_public_page(self, db: AsyncSession, slug: str) -> Optional[Page]:
        """Active pages only; pending ones look exactly like missing ones"""
        result = await db.execute(
            select(Page).where(
                Page.slug == slug,
                Page.status == PageStatus.ACTIVE.value,
                Page.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def activate(
        self,
        db: AsyncSession,
        slug: Optional[str] = None,
        billing_id: Optional[str] = None,
    ) -> ActivationResult:
        """
        Activate a page after a confirmed payment

        Looks the page up by slug, else by billing id. Pages that are no longer
        pending are reported as already processed; the write itself only
        applies while the row is still pending, so redelivered or concurrent
        payment events flip the status once.
        """
        if slug:
            page = await self.get_page_by_slug(db, slug)
        elif billing_id:
            page = await self.get_page_by_billing_id(db, billing_id)
        else:
            raise ValueError("activate() needs a slug or a billing id")

        if not page:
            logger.warning(f"Activation target not found: slug={slug}, billing_id={billing_id}")
            raise PageNotFound(slug or billing_id)

        if page.status != PageStatus.PENDING_PAYMENT.value:
            logger.info(f"Page {page.slug} already processed, status: {page.status}")
            return ActivationResult("already_processed", page.slug, page.status, page.billing_id)

        won = await self._mark_active(db, page.id, billing_id)
        await db.refresh(page)

        if not won:
            logger.info(f"Page {page.slug} was activated by a concurrent request")
            return ActivationResult("already_processed", page.slug, page.status, page.billing_id)

        logger.info(f"Page {page.slug} activated (billing {page.billing_id})")
        return ActivationResult("activated", page.slug, page.status, page.billing_id)

    async def _mark_active(self, db: AsyncSession, page_id, billing_id: Optional[str]) -> bool:
        """Conditional pending -> active write; False when another writer got there first"""
        result = await db.execute(
            update(Page)
            .where(Page.id == page_id, Page.status == PageStatus.PENDING_PAYMENT.value)
            .values(
                status=PageStatus.ACTIVE.value,
                is_active=True,
                activated_at=func.now(),
                billing_id=func.coalesce(Page.billing_id, billing_id),
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount == 1

    async def attach_billing(self, db: AsyncSession, slug: str, billing_id: str) -> bool:
        """Record the billing id on a pending page that has none yet"""
        result = await db.execute(
            update(Page)
            .where(
                Page.slug == slug,
                Page.status == PageStatus.PENDING_PAYMENT.value,
                Page.billing_id.is_(None),
            )
            .values(billing_id=billing_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        attached = result.rowcount == 1
        if not attached:
            logger.warning(f"Billing {billing_id} not attached to page {slug}")
        return attached


# Global instance
page_lifecycle = PageLifecycleManager()
