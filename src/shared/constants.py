"""Shared constants across the application."""

# Metaobject definition holding back in stock requests
BACK_IN_STOCK_REQUEST_TYPE = "back_in_stock_request"

# Request lifecycle
STATUS_PENDING = "pending"
STATUS_NOTIFIED = "notified"

# Fields every back_in_stock_request metaobject carries
REQUEST_FIELD_KEYS = ("email", "product_id", "variant_id", "status", "created_at")

# Shop metafields holding CleverTap credentials
CLEVERTAP_METAFIELD_NAMESPACE = "clevertap"
CLEVERTAP_METAFIELD_KEYS = ("account_id", "passcode", "region")

# Marketing event
BACK_IN_STOCK_EVENT_NAME = "Back In Stock"

# Page sizes (Shopify caps connections at 250 nodes)
DEFAULT_METAOBJECT_PAGE_SIZE = 100
MAX_METAOBJECT_PAGE_SIZE = 250

# Webhook acknowledgments
WEBHOOK_ACK_OK = "OK"
WEBHOOK_ACK_ERROR = "Webhook error"
