"""Back in stock request storage on Shopify metaobjects.

Requests live as ``back_in_stock_request`` metaobjects whose fields are a
key/value list. The Admin API cannot filter metaobjects by field value, so
matching happens client-side over every page.
"""

from collections.abc import AsyncIterator
from datetime import date, datetime, timezone
from typing import Any

import structlog

from restock_service.infrastructure.shopify import ShopifyUserError
from restock_service.models import (
    MalformedNotificationRequestError,
    NotificationRequest,
    RequestStatus,
)
from restock_service.services.protocols import AdminAPI
from shared.constants import BACK_IN_STOCK_REQUEST_TYPE, DEFAULT_METAOBJECT_PAGE_SIZE

logger = structlog.get_logger()

LIST_REQUESTS_QUERY = """
query listBackInStockRequests($type: String!, $first: Int!, $after: String) {
  metaobjects(type: $type, first: $first, after: $after) {
    nodes {
      id
      fields { key value }
    }
    pageInfo { hasNextPage endCursor }
  }
}
"""

REQUEST_STATUS_QUERY = """
query backInStockRequestStatus($id: ID!) {
  metaobject(id: $id) {
    id
    status: field(key: "status") { value }
  }
}
"""

MARK_NOTIFIED_MUTATION = """
mutation markNotified($id: ID!, $metaobject: MetaobjectUpdateInput!) {
  metaobjectUpdate(id: $id, metaobject: $metaobject) {
    metaobject { id }
    userErrors { field message }
  }
}
"""

CREATE_REQUEST_MUTATION = """
mutation CreateBackInStockRequest($metaobject: MetaobjectCreateInput!) {
  metaobjectCreate(metaobject: $metaobject) {
    metaobject { id }
    userErrors { field message }
  }
}
"""


class NotificationRequestRepository:
    """Reads and writes back in stock requests for one shop."""

    def __init__(self, admin: AdminAPI, page_size: int = DEFAULT_METAOBJECT_PAGE_SIZE):
        self.admin = admin
        self.page_size = page_size

    async def iter_nodes(self) -> AsyncIterator[dict[str, Any]]:
        """Yield every raw metaobject node, following pagination to the end."""
        cursor: str | None = None
        pages = 0

        while True:
            data = await self.admin.graphql(
                LIST_REQUESTS_QUERY,
                {
                    "type": BACK_IN_STOCK_REQUEST_TYPE,
                    "first": self.page_size,
                    "after": cursor,
                },
            )
            connection = data["metaobjects"]
            pages += 1

            for node in connection["nodes"]:
                yield node

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info["endCursor"]

        logger.debug("Back in stock requests listed", pages=pages)

    async def iter_requests(self) -> AsyncIterator[NotificationRequest]:
        """Yield every stored request, decoded."""
        async for node in self.iter_nodes():
            yield _decode(node)

    async def find_pending_for_variant(self, variant_id: str | int) -> list[NotificationRequest]:
        """
        All pending requests for a variant.

        Only records whose ``variant_id`` field matches are decoded, so a
        malformed record for another variant does not block this one.

        Raises:
            MalformedNotificationRequestError: If a record for this variant is malformed
        """
        total = 0
        matches = []
        async for node in self.iter_nodes():
            total += 1
            if str(_field_value(node, "variant_id")) != str(variant_id):
                continue
            request = _decode(node)
            if request.matches(variant_id):
                matches.append(request)

        logger.info(
            "Matching back in stock requests found",
            variant_id=str(variant_id),
            fetched=total,
            matching=len(matches),
        )
        return matches

    async def get_status(self, request_id: str) -> RequestStatus | None:
        """Current stored status, or None if the request no longer exists."""
        data = await self.admin.graphql(REQUEST_STATUS_QUERY, {"id": request_id})
        metaobject = data.get("metaobject")
        if not metaobject:
            return None
        value = (metaobject.get("status") or {}).get("value")
        return RequestStatus(value) if value else None

    async def mark_notified(self, request_id: str) -> None:
        """Set the request's status field to notified."""
        data = await self.admin.graphql(
            MARK_NOTIFIED_MUTATION,
            {
                "id": request_id,
                "metaobject": {
                    "fields": [{"key": "status", "value": RequestStatus.NOTIFIED.value}]
                },
            },
        )
        _raise_for_user_errors("metaobjectUpdate", data)
        logger.info("Back in stock request marked notified", request_id=request_id)

    async def create_request(
        self,
        email: str,
        product_id: str | int,
        variant_id: str | int,
        created_on: date | None = None,
    ) -> list[dict[str, Any]]:
        """
        Store a new pending request.

        Returns:
            list: userErrors reported by the Admin API, empty on success
        """
        created_on = created_on or datetime.now(timezone.utc).date()
        data = await self.admin.graphql(
            CREATE_REQUEST_MUTATION,
            {
                "metaobject": {
                    "type": BACK_IN_STOCK_REQUEST_TYPE,
                    "fields": [
                        {"key": "email", "value": email},
                        {"key": "product_id", "value": str(product_id)},
                        {"key": "variant_id", "value": str(variant_id)},
                        {"key": "status", "value": RequestStatus.PENDING.value},
                        {"key": "created_at", "value": created_on.isoformat()},
                    ],
                }
            },
        )
        user_errors = (data.get("metaobjectCreate") or {}).get("userErrors") or []
        if user_errors:
            logger.warning("Back in stock request rejected", user_errors=user_errors)
        else:
            logger.info(
                "Back in stock request created",
                product_id=str(product_id),
                variant_id=str(variant_id),
            )
        return user_errors


def _raise_for_user_errors(mutation: str, data: dict[str, Any]) -> None:
    user_errors = (data.get(mutation) or {}).get("userErrors") or []
    if user_errors:
        raise ShopifyUserError(mutation, user_errors)


def _field_value(node: dict[str, Any], key: str) -> str | None:
    for f in node.get("fields") or []:
        if f.get("key") == key:
            return f.get("value")
    return None


def _decode(node: dict[str, Any]) -> NotificationRequest:
    try:
        return NotificationRequest.from_metaobject(node)
    except MalformedNotificationRequestError as e:
        logger.error("Malformed back in stock request", request_id=e.request_id, error=str(e))
        raise
