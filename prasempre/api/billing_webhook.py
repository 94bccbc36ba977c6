"""
AbacatePay Webhook API Endpoint
Receives payment notifications and activates the paid page
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from prasempre.utils.database import get_db
from prasempre.services.billing_webhook import (
    WebhookPayloadError,
    WebhookSignatureError,
    extract_signature,
    webhook_handler,
)
from prasempre.services.page_lifecycle import PageNotFound

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/abacatepay/webhook")
async def abacatepay_webhook(request: Request, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Handle AbacatePay webhook events

    Only billing.paid changes anything: it moves the matching page from
    pending_payment to active. Redeliveries are acknowledged without
    touching the page again.
    """
    payload = await request.body()

    try:
        webhook_handler.verify_signature(payload, extract_signature(request.headers))
    except WebhookSignatureError as e:
        return JSONResponse(status_code=401, content={"received": False, "message": str(e)})

    try:
        result = await webhook_handler.handle_event(db, payload)
    except WebhookPayloadError as e:
        return JSONResponse(status_code=400, content={"received": False, "message": str(e)})
    except PageNotFound as e:
        logger.error(f"Webhook for unknown page: {e}")
        return JSONResponse(status_code=404, content={"received": False, "message": "Page not found"})
    except Exception:
        logger.exception("Webhook processing error")
        # Non-2xx so the provider retries
        return JSONResponse(status_code=500, content={"received": False, "message": "Internal server error"})

    logger.info(f"Webhook processed: {result['message']}")
    return JSONResponse(status_code=200, content=result)


@router.get("/abacatepay/webhook/test")
async def test_webhook_endpoint():
    """Test endpoint to verify webhook URL is accessible"""
    return {"status": "ok", "message": "Webhook endpoint is accessible"}
