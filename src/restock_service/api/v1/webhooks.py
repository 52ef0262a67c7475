"""Shopify webhook endpoints."""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from restock_service.api.dependencies import get_authenticator, get_marketing_client
from restock_service.config import Settings, get_settings
from restock_service.infrastructure.clevertap import CleverTapClient
from restock_service.infrastructure.shopify import ShopifyAuthenticator
from restock_service.infrastructure.shopify.auth import SHOP_DOMAIN_HEADER
from restock_service.models import InventoryEvent
from restock_service.services.restock_pipeline import RestockPipeline
from shared.constants import WEBHOOK_ACK_ERROR, WEBHOOK_ACK_OK

router = APIRouter()
logger = structlog.get_logger()


@router.post("/inventory_levels/update", response_class=PlainTextResponse)
async def inventory_levels_update(
    request: Request,
    authenticator: ShopifyAuthenticator = Depends(get_authenticator),
    marketing: CleverTapClient = Depends(get_marketing_client),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """
    Notify customers waiting on a variant that just came back in stock.

    Every handled event is acknowledged with ``200 OK``, whether or not any
    notification went out. Only failures (bad signature, Admin API or
    CleverTap errors) answer ``500``.
    """
    shop = request.headers.get(SHOP_DOMAIN_HEADER)
    payload_excerpt: dict = {}

    try:
        context = await authenticator.authenticate_webhook(request)
        shop = context.shop
        payload_excerpt = {
            "inventory_item_id": context.payload.get("inventory_item_id"),
            "available": context.payload.get("available"),
        }
        logger.info("Inventory webhook received", shop=shop, topic=context.topic, **payload_excerpt)

        event = InventoryEvent.model_validate(context.payload)
        pipeline = RestockPipeline(
            admin=context.admin,
            marketing=marketing,
            shop=shop,
            page_size=settings.metaobject_page_size,
        )
        result = await pipeline.process(event)
    except Exception as e:
        logger.exception("Inventory webhook error", shop=shop, error=str(e), **payload_excerpt)
        return PlainTextResponse(WEBHOOK_ACK_ERROR, status_code=500)

    if not result.succeeded:
        logger.error(
            "Inventory webhook failed",
            shop=shop,
            **payload_excerpt,
            **result.report.to_dict(),
        )
        return PlainTextResponse(WEBHOOK_ACK_ERROR, status_code=500)

    logger.info("Inventory webhook handled", shop=shop, outcome=result.outcome.value)
    return PlainTextResponse(WEBHOOK_ACK_OK, status_code=200)
