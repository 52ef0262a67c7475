"""Shopify Admin API integration."""

from restock_service.infrastructure.shopify.auth import (
    AppProxyAuthenticationError,
    AppProxyContext,
    ShopifyAuthenticator,
    WebhookAuthenticationError,
    WebhookContext,
)
from restock_service.infrastructure.shopify.client import (
    AdminGraphQLClient,
    ShopifyGraphQLError,
    ShopifyUserError,
)

__all__ = [
    "AdminGraphQLClient",
    "AppProxyAuthenticationError",
    "AppProxyContext",
    "ShopifyAuthenticator",
    "ShopifyGraphQLError",
    "ShopifyUserError",
    "WebhookAuthenticationError",
    "WebhookContext",
]


def parse_gid(gid: str) -> str:
    """Trailing id segment of a global id, ``gid://shopify/ProductVariant/42`` -> ``42``."""
    return gid.rstrip("/").rsplit("/", 1)[-1]


def build_gid(resource_type: str, resource_id: str | int) -> str:
    return f"gid://shopify/{resource_type}/{resource_id}"
