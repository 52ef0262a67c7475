"""Storefront back in stock signup, served through the Shopify app proxy."""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from restock_service.api.dependencies import get_authenticator
from restock_service.infrastructure.shopify import ShopifyAuthenticator
from restock_service.services.notification_requests import NotificationRequestRepository

router = APIRouter()
logger = structlog.get_logger()


class NotifyResponse(BaseModel):
    """Successful signup."""

    success: bool = True


@router.post("/notify", response_model=NotifyResponse)
async def create_back_in_stock_request(
    request: Request,
    authenticator: ShopifyAuthenticator = Depends(get_authenticator),
):
    """
    Register a customer's interest in an out of stock variant.

    Body: ``{"email", "product_id", "variant_id"}``, all required. The
    request is stored as a pending ``back_in_stock_request`` metaobject and
    picked up by the inventory webhook once the variant is restocked.
    """
    try:
        body = await request.json()
        body = body if isinstance(body, dict) else {}
        email = body.get("email")
        product_id = body.get("product_id")
        variant_id = body.get("variant_id")

        if not email or not product_id or not variant_id:
            return JSONResponse({"error": "Missing required fields"}, status_code=400)

        context = authenticator.authenticate_app_proxy(request)
        repository = NotificationRequestRepository(context.admin)
        user_errors = await repository.create_request(email, product_id, variant_id)

        if user_errors:
            return JSONResponse({"errors": user_errors}, status_code=400)

        return NotifyResponse()
    except Exception as e:
        logger.exception("Notify error", error=str(e))
        return JSONResponse({"error": "Internal server error"}, status_code=500)
