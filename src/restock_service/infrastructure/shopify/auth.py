"""Request authentication for Shopify webhooks and app proxy calls.

Webhooks are signed with a base64 HMAC-SHA256 of the raw body in the
``X-Shopify-Hmac-Sha256`` header. App proxy requests carry a hex HMAC-SHA256
``signature`` query parameter computed over the remaining parameters. Both
use the app's API secret, and both only succeed for shops that have an
offline session.
"""

import base64
import hashlib
import hmac
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx
import orjson
import structlog
from starlette.requests import Request

from restock_service.infrastructure.shopify.client import AdminGraphQLClient

logger = structlog.get_logger()

HMAC_HEADER = "x-shopify-hmac-sha256"
SHOP_DOMAIN_HEADER = "x-shopify-shop-domain"
TOPIC_HEADER = "x-shopify-topic"


class WebhookAuthenticationError(Exception):
    """Webhook signature or shop session could not be verified."""


class AppProxyAuthenticationError(Exception):
    """App proxy signature or shop session could not be verified."""


@dataclass
class WebhookContext:
    """An authenticated webhook delivery."""

    shop: str
    topic: str | None
    payload: dict[str, Any]
    admin: AdminGraphQLClient


@dataclass
class AppProxyContext:
    """An authenticated app proxy request."""

    shop: str
    admin: AdminGraphQLClient


def verify_webhook_hmac(body: bytes, signature_header: str | None, secret: str) -> bool:
    """Verify a webhook body against its base64 HMAC-SHA256 header."""
    if not secret or not signature_header:
        return False

    computed = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    computed_b64 = base64.b64encode(computed).decode("utf-8")
    return hmac.compare_digest(computed_b64, signature_header)


def compute_app_proxy_signature(params: Iterable[tuple[str, str]], secret: str) -> str:
    """Hex HMAC-SHA256 over sorted ``key=value`` pairs, repeated keys joined by ``,``."""
    grouped: dict[str, list[str]] = defaultdict(list)
    for key, value in params:
        if key != "signature":
            grouped[key].append(value)

    message = "".join(
        f"{key}={','.join(values)}" for key, values in sorted(grouped.items())
    )
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_app_proxy_signature(params: Iterable[tuple[str, str]], secret: str) -> bool:
    """Verify the ``signature`` query parameter of an app proxy request."""
    params = list(params)
    signature = next((value for key, value in params if key == "signature"), None)
    if not secret or not signature:
        return False
    return hmac.compare_digest(compute_app_proxy_signature(params, secret), signature)


class ShopifyAuthenticator:
    """Authenticates inbound Shopify traffic and hands out Admin API clients."""

    def __init__(
        self,
        api_secret: str,
        api_version: str,
        shop_tokens: dict[str, str],
        http_client: httpx.AsyncClient,
    ):
        self.api_secret = api_secret
        self.api_version = api_version
        self.shop_tokens = {shop.lower(): token for shop, token in shop_tokens.items()}
        self.http_client = http_client

    def has_session(self, shop: str) -> bool:
        return shop.lower() in self.shop_tokens

    def admin_for(self, shop: str) -> AdminGraphQLClient | None:
        """Admin client for a shop with an offline session, else None."""
        token = self.shop_tokens.get(shop.lower())
        if token is None:
            return None
        return AdminGraphQLClient(
            shop=shop.lower(),
            access_token=token,
            api_version=self.api_version,
            http_client=self.http_client,
        )

    async def authenticate_webhook(self, request: Request) -> WebhookContext:
        body = await request.body()
        if not verify_webhook_hmac(body, request.headers.get(HMAC_HEADER), self.api_secret):
            raise WebhookAuthenticationError("Invalid webhook HMAC")

        shop = request.headers.get(SHOP_DOMAIN_HEADER, "")
        admin = self.admin_for(shop) if shop else None
        if admin is None:
            raise WebhookAuthenticationError(f"No session for shop {shop!r}")

        payload = orjson.loads(body)
        if not isinstance(payload, dict):
            raise WebhookAuthenticationError("Webhook payload is not an object")

        return WebhookContext(
            shop=admin.shop,
            topic=request.headers.get(TOPIC_HEADER),
            payload=payload,
            admin=admin,
        )

    def authenticate_app_proxy(self, request: Request) -> AppProxyContext:
        params = list(request.query_params.multi_items())
        if not verify_app_proxy_signature(params, self.api_secret):
            raise AppProxyAuthenticationError("Invalid app proxy signature")

        shop = request.query_params.get("shop", "")
        admin = self.admin_for(shop) if shop else None
        if admin is None:
            raise AppProxyAuthenticationError(f"No session for shop {shop!r}")

        return AppProxyContext(shop=admin.shop, admin=admin)
