"""Back In Stock marketing events."""

from typing import Any

import structlog

from restock_service.models import MarketingConfig, NotificationRequest, Variant
from restock_service.services.protocols import MarketingAPI
from shared.constants import BACK_IN_STOCK_EVENT_NAME

logger = structlog.get_logger()


def product_url(shop: str, handle: str) -> str:
    return f"https://{shop}/products/{handle}"


def build_back_in_stock_event(
    email: str, variant: Variant, url: str
) -> dict[str, Any]:
    """Single CleverTap event record identifying the customer by email."""
    evt_data: dict[str, Any] = {
        "product_id": variant.product_id,
        "variant_id": variant.variant_id,
        "product_title": variant.product_title,
        "product_url": url,
    }
    if variant.image_url:
        evt_data["product_image"] = variant.image_url

    return {
        "identity": email,
        "type": "event",
        "evtName": BACK_IN_STOCK_EVENT_NAME,
        "evtData": evt_data,
        "profileData": {"Email": email},
    }


class BackInStockNotifier:
    """Sends one Back In Stock event per request to the shop's CleverTap account."""

    def __init__(self, marketing: MarketingAPI, config: MarketingConfig, shop: str):
        if not config.is_complete:
            raise ValueError("CleverTap config is incomplete")
        self.marketing = marketing
        self.config = config
        self.shop = shop

    async def notify(self, request: NotificationRequest, variant: Variant) -> None:
        """
        Send the event for one request.

        Raises:
            CleverTapAPIError: If CleverTap answers with a non-2xx status
        """
        event = build_back_in_stock_event(
            request.email, variant, product_url(self.shop, variant.product_handle)
        )
        await self.marketing.upload(
            account_id=self.config.account_id,
            passcode=self.config.passcode,
            region=self.config.region,
            records=[event],
        )
        logger.info(
            "CleverTap event sent",
            request_id=request.id,
            variant_id=variant.variant_id,
        )
