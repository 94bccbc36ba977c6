"""
Billing API endpoints
Opens AbacatePay checkouts for pages waiting on payment
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import logging

from prasempre.utils.database import get_db
from prasempre.utils.rate_limit import billing_rate_limiter, rate_limit_headers
from prasempre.services.billing import (
    BillingError,
    BillingNotConfigured,
    BillingRequestError,
    billing_service,
)
from prasempre.services.page_lifecycle import PageNotFound

logger = logging.getLogger(__name__)

router = APIRouter()


# Pydantic models
class BillingCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    plan: str
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")


@router.post("/create", dependencies=[Depends(billing_rate_limiter)])
async def create_billing(
    billing_request: BillingCreateRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Create a one-time billing for a pending page and return its checkout URL"""
    try:
        checkout = await billing_service.create_checkout(
            db,
            slug=billing_request.slug,
            plan=billing_request.plan,
            customer_email=billing_request.customer_email,
            origin=request.headers.get("origin"),
        )
    except BillingRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PageNotFound:
        raise HTTPException(status_code=404, detail="Página não encontrada")
    except BillingNotConfigured:
        raise HTTPException(status_code=503, detail="Serviço de pagamento não configurado")
    except BillingError as e:
        logger.error(f"Error creating billing for {billing_request.slug}: {e}")
        raise HTTPException(status_code=502, detail="Erro ao criar pagamento. Tente novamente.")

    return JSONResponse(
        status_code=200,
        content=checkout,
        headers=rate_limit_headers(request),
    )
