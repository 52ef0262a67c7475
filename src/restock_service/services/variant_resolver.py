"""Inventory item to product variant resolution."""

import structlog

from restock_service.infrastructure.shopify import build_gid, parse_gid
from restock_service.models import Variant
from restock_service.services.protocols import AdminAPI

logger = structlog.get_logger()

VARIANT_BY_INVENTORY_ITEM_QUERY = """
query getInventoryItem($id: ID!) {
  inventoryItem(id: $id) {
    variant {
      id
      image { url }
      product {
        id
        title
        handle
        featuredImage { url }
      }
    }
  }
}
"""


async def resolve_variant(admin: AdminAPI, inventory_item_id: str | int) -> Variant | None:
    """
    Find the variant tracked by an inventory item.

    Args:
        admin: Admin API client for the shop
        inventory_item_id: Numeric inventory item id from the webhook

    Returns:
        Variant, or None if the item has no variant
    """
    data = await admin.graphql(
        VARIANT_BY_INVENTORY_ITEM_QUERY,
        {"id": build_gid("InventoryItem", inventory_item_id)},
    )
    variant = (data.get("inventoryItem") or {}).get("variant")
    if not variant:
        logger.info("Variant not found", inventory_item_id=str(inventory_item_id))
        return None

    product = variant["product"]
    image_url = (variant.get("image") or {}).get("url") or (
        product.get("featuredImage") or {}
    ).get("url")

    resolved = Variant(
        variant_id=parse_gid(variant["id"]),
        product_id=parse_gid(product["id"]),
        product_title=product["title"],
        product_handle=product["handle"],
        image_url=image_url,
    )
    logger.info(
        "Variant resolved",
        variant_id=resolved.variant_id,
        product_title=resolved.product_title,
    )
    return resolved
