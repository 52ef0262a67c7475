"""Unit tests for the inventory webhook endpoint."""

import json

from fastapi.testclient import TestClient

from tests.fakes import FakeMarketing, FakeShopifyAdmin

WEBHOOK_PATH = "/webhooks/inventory_levels/update"


def _post(client: TestClient, webhook_headers, payload: dict, **header_kwargs):
    body = json.dumps(payload).encode()
    return client.post(WEBHOOK_PATH, content=body, headers=webhook_headers(body, **header_kwargs))


def test_restock_notifies_waiting_customers(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    """Wool Sweater back in stock: two customers notified, variant 43 untouched."""
    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 5})

    assert response.status_code == 200
    assert response.text == "OK"
    assert sorted(marketing.emails) == ["a@x.com", "b@x.com"]
    assert len(admin.operations("markNotified")) == 2
    assert admin.field(restock_scenario["a"], "status") == "notified"
    assert admin.field(restock_scenario["b"], "status") == "notified"
    assert admin.field(restock_scenario["other"], "status") == "pending"


def test_numeric_inventory_item_id(
    client: TestClient, webhook_headers, marketing: FakeMarketing, restock_scenario: dict
) -> None:
    response = _post(client, webhook_headers, {"inventory_item_id": 111, "available": 1})

    assert response.status_code == 200
    assert len(marketing.uploads) == 2


def test_out_of_stock_acknowledged(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    for payload in (
        {"inventory_item_id": "111", "available": 0},
        {"inventory_item_id": "111", "available": -2},
        {"inventory_item_id": "111"},
    ):
        response = _post(client, webhook_headers, payload)
        assert response.status_code == 200
        assert response.text == "OK"

    assert admin.calls == []
    assert marketing.uploads == []


def test_unconfigured_shop_acknowledged(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    admin.metafields.clear()

    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 5})

    assert response.status_code == 200
    assert marketing.uploads == []
    assert admin.operations("markNotified") == []


def test_invalid_signature_fails(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    response = _post(
        client,
        webhook_headers,
        {"inventory_item_id": "111", "available": 5},
        secret="wrong-secret",
    )

    assert response.status_code == 500
    assert response.text == "Webhook error"
    assert admin.calls == []
    assert marketing.uploads == []


def test_unknown_shop_fails(
    client: TestClient, webhook_headers, marketing: FakeMarketing, restock_scenario: dict
) -> None:
    response = _post(
        client,
        webhook_headers,
        {"inventory_item_id": "111", "available": 5},
        shop="stranger.myshopify.com",
    )

    assert response.status_code == 500
    assert marketing.uploads == []


def test_dispatch_failure_reports_error(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    marketing.fail_on_call = 2

    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 5})

    assert response.status_code == 500
    assert response.text == "Webhook error"
    assert admin.field(restock_scenario["a"], "status") == "notified"
    assert admin.field(restock_scenario["b"], "status") == "pending"


def test_admin_api_error_reports_error(
    client: TestClient, webhook_headers, admin: FakeShopifyAdmin, restock_scenario: dict
) -> None:
    def broken(variables):
        raise KeyError("inventoryItem")

    admin._op_getInventoryItem = broken

    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 5})

    assert response.status_code == 500


def test_redelivery_sends_nothing_new(
    client: TestClient, webhook_headers, marketing: FakeMarketing, restock_scenario: dict
) -> None:
    payload = {"inventory_item_id": "111", "available": 5}
    assert _post(client, webhook_headers, payload).status_code == 200
    assert _post(client, webhook_headers, payload).status_code == 200

    assert len(marketing.uploads) == 2


def test_response_carries_request_id(client: TestClient, webhook_headers) -> None:
    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 0})

    assert "X-Request-ID" in response.headers
    assert "X-Response-Time-Ms" in response.headers


def test_out_of_stock_without_item_id_acknowledged(
    client: TestClient, webhook_headers, admin: FakeShopifyAdmin, marketing: FakeMarketing
) -> None:
    for payload in ({"available": 0}, {"inventory_item_id": None, "available": 0}):
        response = _post(client, webhook_headers, payload)
        assert response.status_code == 200
        assert response.text == "OK"

    assert admin.calls == []
    assert marketing.uploads == []


def test_in_stock_without_item_id_acknowledged(
    client: TestClient, webhook_headers, admin: FakeShopifyAdmin, marketing: FakeMarketing
) -> None:
    response = _post(client, webhook_headers, {"inventory_item_id": None, "available": 3})

    assert response.status_code == 200
    assert admin.calls == []
    assert marketing.uploads == []


def test_malformed_request_for_other_variant_does_not_block(
    client: TestClient,
    webhook_headers,
    admin: FakeShopifyAdmin,
    marketing: FakeMarketing,
    restock_scenario: dict,
) -> None:
    admin.add_request("broken@x.com", "43", status=...)

    response = _post(client, webhook_headers, {"inventory_item_id": "111", "available": 5})

    assert response.status_code == 200
    assert sorted(marketing.emails) == ["a@x.com", "b@x.com"]
