"""
AbacatePay Webhook Handler
Verifies payment notifications and activates the paid page
"""

import hashlib
import hmac
import json
import logging
import os
import re
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from prasempre.services.page_lifecycle import PageLifecycleManager, page_lifecycle
from prasempre.utils.slug_generator import is_valid_slug

logger = logging.getLogger(__name__)

SIGNATURE_HEADERS = ("x-webhook-signature", "x-signature", "x-hub-signature-256")

# The provider has sent both spellings over time
PAYMENT_COMPLETED_EVENTS = {"billing.paid", "BILLING_PAID"}

BILLING_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{5,100}$")


class WebhookSignatureError(Exception):
    """Signature missing or not matching the shared secret"""


class WebhookPayloadError(Exception):
    """An identifier in the payload is present but malformed"""


def compute_signature(payload: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def extract_signature(headers) -> Optional[str]:
    for name in SIGNATURE_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return None


class BillingWebhookHandler:
    """Handles AbacatePay webhook events"""

    def __init__(self, webhook_secret: Optional[str] = None, lifecycle: Optional[PageLifecycleManager] = None):
        self.webhook_secret = webhook_secret if webhook_secret is not None else os.getenv("ABACATEPAY_WEBHOOK_SECRET")
        self.lifecycle = lifecycle or page_lifecycle
        if not self.webhook_secret:
            logger.warning("ABACATEPAY_WEBHOOK_SECRET not configured - signature verification skipped")

    def verify_signature(self, payload: bytes, signature: Optional[str]) -> None:
        """Raise WebhookSignatureError unless the body is signed with our secret"""
        if not self.webhook_secret:
            return

        if not signature:
            logger.error("Missing webhook signature - rejecting request")
            raise WebhookSignatureError("Missing signature")

        expected = compute_signature(payload, self.webhook_secret)
        candidate = signature.strip()
        if candidate.startswith("sha256="):
            candidate = candidate[len("sha256="):]

        if not hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8")):
            logger.error("Invalid webhook signature - rejecting request")
            raise WebhookSignatureError("Invalid signature")

    def parse_payload(self, payload: bytes) -> Optional[Dict[str, Any]]:
        """Decode the {event, data} envelope; None when the shape is off"""
        try:
            body = json.loads(payload)
        except (ValueError, UnicodeDecodeError):
            return None

        if not isinstance(body, dict):
            return None
        if not isinstance(body.get("event"), str) or not body["event"]:
            return None
        if not isinstance(body.get("data"), dict):
            return None
        return body

    def _extract_identifiers(self, data: Dict[str, Any]):
        """Return (slug, billing_id) from the billing data, validated"""
        slug = None
        products = data.get("products")
        if isinstance(products, list) and products and isinstance(products[0], dict):
            slug = products[0].get("externalId") or None

        billing_id = data.get("id") or None

        if slug is not None and not is_valid_slug(slug):
            logger.error(f"Invalid slug format: {slug!r}")
            raise WebhookPayloadError("Invalid slug format")

        if billing_id is not None and (
            not isinstance(billing_id, str) or not BILLING_ID_PATTERN.match(billing_id)
        ):
            logger.error(f"Invalid billing ID format: {billing_id!r}")
            raise WebhookPayloadError("Invalid billing ID")

        return slug, billing_id

    async def handle_event(self, db: AsyncSession, payload: bytes) -> Dict[str, Any]:
        """
        Route a verified webhook body

        Returns the JSON response body. Raises WebhookPayloadError for
        malformed identifiers and PageNotFound when no page matches.
        """
        body = self.parse_payload(payload)
        if body is None:
            logger.info("Invalid webhook payload - missing event or data")
            return {"received": True, "message": "Invalid payload"}

        event = body["event"]
        data = body["data"]
        logger.info(f"Processing AbacatePay event: {event}")

        if event not in PAYMENT_COMPLETED_EVENTS:
            logger.info(f"Event not processed (not a payment event): {event}")
            return {"received": True, "message": f"Event {event} received but not processed"}

        slug, billing_id = self._extract_identifiers(data)
        if not slug and not billing_id:
            logger.warning("No slug or billing id found in webhook data")
            return {"received": True, "message": "No identifier found"}

        logger.info(f"Processing payment for billing: {billing_id} slug: {slug}")
        result = await self.lifecycle.activate(db, slug=slug, billing_id=billing_id)

        if not result.activated:
            return {
                "received": True,
                "message": "Page already processed",
                "currentStatus": result.status,
            }

        return {
            "received": True,
            "message": "Payment processed successfully",
            "slug": result.slug,
            "billingId": result.billing_id,
        }


# Global handler instance
webhook_handler = BillingWebhookHandler()
