"""Pytest configuration and fixtures."""

import base64
import hashlib
import hmac
from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient

from restock_service.api.dependencies import get_authenticator, get_marketing_client
from restock_service.config import Settings, get_settings
from restock_service.main import create_app
from tests.fakes import TEST_SECRET, TEST_SHOP, FakeAuthenticator, FakeMarketing, FakeShopifyAdmin


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        app_env="test",
        debug=True,
        shopify_api_secret=TEST_SECRET,
        shopify_shop_tokens=f"{TEST_SHOP}=shpat_test",
        clevertap_upload_url_template="https://{region}.api.clevertap.test/1/upload",
        metaobject_page_size=2,
    )


@pytest.fixture
def admin() -> FakeShopifyAdmin:
    return FakeShopifyAdmin()


@pytest.fixture
def marketing() -> FakeMarketing:
    return FakeMarketing()


@pytest.fixture
def app(test_settings: Settings, admin: FakeShopifyAdmin, marketing: FakeMarketing) -> Any:
    """Create test application wired to the fakes."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_authenticator] = lambda: FakeAuthenticator(admin, test_settings)
    app.dependency_overrides[get_marketing_client] = lambda: marketing
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def webhook_headers() -> Callable[..., dict[str, str]]:
    """Build signed webhook headers for a raw body."""

    def build(body: bytes, shop: str = TEST_SHOP, secret: str = TEST_SECRET) -> dict[str, str]:
        digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
        return {
            "Content-Type": "application/json",
            "X-Shopify-Hmac-Sha256": base64.b64encode(digest).decode(),
            "X-Shopify-Shop-Domain": shop,
            "X-Shopify-Topic": "inventory_levels/update",
        }

    return build


@pytest.fixture
def restock_scenario(admin: FakeShopifyAdmin) -> dict[str, str]:
    """Wool Sweater restock: two pending requests on variant 42, one on 43."""
    admin.add_variant("111", "42", "99", "Wool Sweater", "wool-sweater")
    admin.configure_clevertap()
    return {
        "a": admin.add_request("a@x.com", "42"),
        "b": admin.add_request("b@x.com", "42"),
        "other": admin.add_request("c@x.com", "43", product_id="100"),
    }
