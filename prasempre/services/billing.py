"""
Billing Service
Creates one-time AbacatePay billings (checkout sessions) for pending pages
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from prasempre.config.plan_limits import get_plan_limits, is_known_plan
from prasempre.models.page import PageStatus
from prasempre.services.page_lifecycle import PageLifecycleManager, PageNotFound, page_lifecycle
from prasempre.utils.slug_generator import is_valid_slug

logger = logging.getLogger(__name__)

ABACATEPAY_API_URL = "https://api.abacatepay.com/v1"
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_EMAIL_LENGTH = 254


class BillingError(Exception):
    """The payment provider refused or failed to create the billing"""


class BillingNotConfigured(BillingError):
    """ABACATEPAY_API_KEY is not set"""


class BillingRequestError(Exception):
    """The checkout request itself is invalid (bad email, plan, page state)"""


def mask_email(email: str) -> str:
    return f"{email[:5]}***"


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Trimmed lowercase email, or None if it doesn't look like one"""
    if not isinstance(email, str):
        return None
    cleaned = email.strip().lower()
    if not cleaned or len(cleaned) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(cleaned):
        return None
    return cleaned


class AbacatePayClient:
    """Thin async client for the AbacatePay REST API"""

    def __init__(self, api_key: Optional[str] = None, base_url: str = ABACATEPAY_API_URL, transport=None):
        self.api_key = api_key if api_key is not None else os.getenv("ABACATEPAY_API_KEY")
        self.base_url = base_url
        self.transport = transport

        if not self.api_key:
            logger.warning("ABACATEPAY_API_KEY not configured - checkout creation disabled")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise BillingNotConfigured("Payment service not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport, timeout=15.0) as client:
                response = await client.post(path, json=payload, headers=headers)
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"AbacatePay request to {path} failed: {e}")
            raise BillingError(f"Payment provider unavailable: {e}") from e

        if not isinstance(data, dict):
            raise BillingError("Unexpected response from payment provider")
        return data

    async def create_customer(self, email: str) -> Optional[str]:
        """Create a customer; returns its id, or None when the provider didn't give one"""
        data = await self._post("/customer/create", {"email": email, "name": "Cliente PraSempre"})
        customer = data.get("data") or {}
        return customer.get("id") if isinstance(customer, dict) else None

    async def create_billing(
        self,
        slug: str,
        plan: str,
        return_url: str,
        customer_id: Optional[str] = None,
    ) -> Dict[str, str]:
        """Create a one-time billing whose product externalId is the page slug"""
        limits = get_plan_limits(plan)
        payload: Dict[str, Any] = {
            "frequency": "ONE_TIME",
            "methods": ["PIX", "CREDIT_CARD"],
            "products": [
                {
                    "externalId": slug,
                    "name": f"PraSempre - Plano {limits.name}",
                    "quantity": 1,
                    "price": limits.price_cents,
                }
            ],
            "returnUrl": return_url,
            "completionUrl": return_url,
        }
        if customer_id:
            payload["customerId"] = customer_id

        data = await self._post("/billing/create", payload)

        if data.get("error"):
            logger.error(f"AbacatePay error: {data['error']}")
            raise BillingError(str(data["error"]))

        billing = data.get("data") or {}
        if not isinstance(billing, dict) or not billing.get("url") or not billing.get("id"):
            logger.error(f"No billing URL in response: {data}")
            raise BillingError("Failed to create billing - no URL returned")

        return {"url": billing["url"], "id": billing["id"]}


class BillingService:
    """Checks the page can be paid for and opens a checkout for it"""

    def __init__(
        self,
        client: Optional[AbacatePayClient] = None,
        lifecycle: Optional[PageLifecycleManager] = None,
        app_base_url: Optional[str] = None,
        allowed_origins: Optional[List[str]] = None,
    ):
        self.client = client or AbacatePayClient()
        self.lifecycle = lifecycle or page_lifecycle
        self.app_base_url = (app_base_url or os.getenv("APP_BASE_URL", "http://localhost:8080")).rstrip("/")
        if allowed_origins is None:
            raw = os.getenv("ALLOWED_ORIGINS", "")
            allowed_origins = [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]
        self.allowed_origins = allowed_origins or [self.app_base_url]

    @property
    def configured(self) -> bool:
        return self.client.configured

    def return_url(self, slug: str, origin: Optional[str]) -> str:
        """Success page URL on an allow-listed origin"""
        base = self.app_base_url
        if origin and origin.rstrip("/") in self.allowed_origins:
            base = origin.rstrip("/")
        return f"{base}/sucesso?slug={quote(slug)}"

    async def create_checkout(
        self,
        db: AsyncSession,
        slug: str,
        plan: str,
        customer_email: Optional[str],
        origin: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Open a checkout for a pending page

        Returns {"checkoutUrl", "billingId"}. Raises BillingRequestError for
        bad input or a page that can't be paid, PageNotFound for an unknown
        slug, and BillingError when the provider fails.
        """
        email = normalize_email(customer_email)
        if not email:
            raise BillingRequestError("Email inválido")
        if not is_known_plan(plan):
            raise BillingRequestError("Plano inválido")
        if not is_valid_slug(slug):
            raise BillingRequestError("Slug inválido")

        page = await self.lifecycle.get_page_by_slug(db, slug)
        if not page:
            raise PageNotFound(slug)
        if page.status != PageStatus.PENDING_PAYMENT.value:
            logger.warning(f"Checkout requested for already processed page {slug} ({page.status})")
            raise BillingRequestError("Esta página já foi processada")
        if plan != page.plan:
            raise BillingRequestError("Plano não corresponde à página")
        if page.billing_id:
            logger.warning(f"Checkout requested for page {slug} that already has billing")
            raise BillingRequestError("Já existe um pagamento para esta página")

        logger.info(f"Creating billing for: slug={slug}, plan={plan}, email={mask_email(email)}")

        try:
            customer_id = await self.client.create_customer(email)
        except BillingNotConfigured:
            raise
        except BillingError as e:
            logger.warning(f"Customer creation failed, continuing without customer: {e}")
            customer_id = None

        billing = await self.client.create_billing(
            slug=slug,
            plan=plan,
            return_url=self.return_url(slug, origin),
            customer_id=customer_id,
        )

        attached = await self.lifecycle.attach_billing(db, slug, billing["id"])
        if not attached:
            # Payment can still go through; the webhook falls back to the slug
            logger.error(f"Error recording billing {billing['id']} on page {slug}")

        return {"checkoutUrl": billing["url"], "billingId": billing["id"]}


# Global instance
billing_service = BillingService()
