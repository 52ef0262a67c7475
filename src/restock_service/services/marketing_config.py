"""Per-shop CleverTap credentials stored as shop metafields."""

import structlog

from restock_service.models import MarketingConfig
from restock_service.services.protocols import AdminAPI
from shared.constants import CLEVERTAP_METAFIELD_NAMESPACE

logger = structlog.get_logger()

MARKETING_CONFIG_QUERY = """
query marketingConfig($namespace: String!) {
  shop {
    accountId: metafield(namespace: $namespace, key: "account_id") { value }
    passcode: metafield(namespace: $namespace, key: "passcode") { value }
    region: metafield(namespace: $namespace, key: "region") { value }
  }
}
"""


async def get_marketing_config(admin: AdminAPI) -> MarketingConfig:
    """Read the shop's CleverTap account id, passcode and region."""
    data = await admin.graphql(
        MARKETING_CONFIG_QUERY,
        {"namespace": CLEVERTAP_METAFIELD_NAMESPACE},
    )
    shop = data.get("shop") or {}

    def value(alias: str) -> str | None:
        metafield = shop.get(alias) or {}
        return metafield.get("value") or None

    config = MarketingConfig(
        account_id=value("accountId"),
        passcode=value("passcode"),
        region=value("region"),
    )
    logger.debug("Marketing config resolved", complete=config.is_complete)
    return config
