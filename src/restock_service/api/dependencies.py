"""FastAPI dependencies shared by the route modules."""

from fastapi import Depends

from restock_service.config import Settings, get_settings
from restock_service.infrastructure.clevertap import CleverTapClient
from restock_service.infrastructure.http import get_http_client
from restock_service.infrastructure.shopify import ShopifyAuthenticator


def get_authenticator(settings: Settings = Depends(get_settings)) -> ShopifyAuthenticator:
    return ShopifyAuthenticator(
        api_secret=settings.shopify_api_secret,
        api_version=settings.shopify_api_version,
        shop_tokens=settings.shop_access_tokens,
        http_client=get_http_client(),
    )


def get_marketing_client(settings: Settings = Depends(get_settings)) -> CleverTapClient:
    return CleverTapClient(
        http_client=get_http_client(),
        url_template=settings.clevertap_upload_url_template,
    )
