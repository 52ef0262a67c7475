"""Business logic services."""

from restock_service.services.dispatcher import BackInStockNotifier
from restock_service.services.marketing_config import get_marketing_config
from restock_service.services.notification_requests import NotificationRequestRepository
from restock_service.services.restock_pipeline import (
    BatchReport,
    RestockOutcome,
    RestockPipeline,
    RestockResult,
)
from restock_service.services.variant_resolver import resolve_variant

__all__ = [
    "BackInStockNotifier",
    "BatchReport",
    "NotificationRequestRepository",
    "RestockOutcome",
    "RestockPipeline",
    "RestockResult",
    "get_marketing_config",
    "resolve_variant",
]
