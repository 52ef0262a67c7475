"""Domain models for back in stock processing."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from shared.constants import REQUEST_FIELD_KEYS


class RequestStatus(str, Enum):
    """Lifecycle of a back in stock request."""

    PENDING = "pending"
    NOTIFIED = "notified"


class MalformedNotificationRequestError(Exception):
    """A back_in_stock_request metaobject is missing fields or holds bad values."""

    def __init__(self, request_id: str, reason: str):
        self.request_id = request_id
        super().__init__(f"Malformed back in stock request {request_id}: {reason}")


class InventoryEvent(BaseModel):
    """Payload of an ``inventory_levels/update`` webhook."""

    inventory_item_id: str | None = None
    available: int | None = None

    @field_validator("inventory_item_id", mode="before")
    @classmethod
    def coerce_item_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @property
    def is_in_stock(self) -> bool:
        return bool(self.available) and self.available > 0


class Variant(BaseModel):
    """A product variant resolved from an inventory item."""

    variant_id: str
    product_id: str
    product_title: str
    product_handle: str
    image_url: str | None = None


class MarketingConfig(BaseModel):
    """Per-shop CleverTap credentials; any field may be unset."""

    account_id: str | None = None
    passcode: str | None = None
    region: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.account_id and self.passcode and self.region)


class NotificationRequest(BaseModel):
    """A customer's request to hear when a variant is back in stock."""

    id: str
    email: str
    product_id: str
    variant_id: str
    status: RequestStatus
    created_at: date

    @classmethod
    def from_metaobject(cls, node: dict[str, Any]) -> "NotificationRequest":
        """
        Decode a metaobject node (``id`` plus a ``fields`` key/value list).

        Every field in REQUEST_FIELD_KEYS must be present and non-null.

        Raises:
            MalformedNotificationRequestError: On missing keys or invalid values
        """
        request_id = node.get("id") or "<unknown>"
        fields = {f["key"]: f.get("value") for f in node.get("fields") or []}

        missing = [key for key in REQUEST_FIELD_KEYS if fields.get(key) in (None, "")]
        if missing:
            raise MalformedNotificationRequestError(
                request_id, f"missing fields {', '.join(missing)}"
            )

        try:
            return cls(id=request_id, **{key: fields[key] for key in REQUEST_FIELD_KEYS})
        except ValidationError as e:
            raise MalformedNotificationRequestError(request_id, str(e)) from e

    def matches(self, variant_id: str | int) -> bool:
        """Pending and for the given variant, compared as strings."""
        return (
            str(self.variant_id) == str(variant_id)
            and self.status == RequestStatus.PENDING
        )
