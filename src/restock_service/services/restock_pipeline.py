"""Restock notification pipeline.

One inventory event runs through:

1. stock check (``available`` must be positive)
2. variant resolution (an event without an inventory item resolves to none)
3. CleverTap config lookup
4. pending request matching
5. per request: status re-check, dispatch, mark notified

Steps 1-4 end the run early with a benign outcome. Step 5 is sequential and
not transactional: the first failure stops the batch, requests already
handled stay notified and the rest stay pending.
"""

from dataclasses import dataclass, field
from enum import Enum

import structlog

from restock_service.models import InventoryEvent, NotificationRequest, RequestStatus, Variant
from restock_service.services.dispatcher import BackInStockNotifier
from restock_service.services.marketing_config import get_marketing_config
from restock_service.services.notification_requests import NotificationRequestRepository
from restock_service.services.protocols import AdminAPI, MarketingAPI
from restock_service.services.variant_resolver import resolve_variant
from shared.constants import DEFAULT_METAOBJECT_PAGE_SIZE

logger = structlog.get_logger()


class RestockOutcome(str, Enum):
    """How a single inventory event was handled."""

    OUT_OF_STOCK = "out_of_stock"
    VARIANT_NOT_FOUND = "variant_not_found"
    NOT_CONFIGURED = "not_configured"
    NO_MATCHES = "no_matches"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BatchReport:
    """Per-request results of one dispatch batch."""

    notified: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    not_attempted: list[str] = field(default_factory=list)
    failed: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.failed is None

    def to_dict(self) -> dict:
        return {
            "notified": self.notified,
            "skipped": self.skipped,
            "not_attempted": self.not_attempted,
            "failed": self.failed,
            "error": self.error,
        }


@dataclass
class RestockResult:
    outcome: RestockOutcome
    variant: Variant | None = None
    report: BatchReport | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome != RestockOutcome.FAILED


class RestockPipeline:
    """Handles inventory events for one shop."""

    def __init__(
        self,
        admin: AdminAPI,
        marketing: MarketingAPI,
        shop: str,
        page_size: int = DEFAULT_METAOBJECT_PAGE_SIZE,
    ):
        self.admin = admin
        self.marketing = marketing
        self.shop = shop
        self.requests = NotificationRequestRepository(admin, page_size=page_size)

    async def process(self, event: InventoryEvent) -> RestockResult:
        """
        Run one inventory event through the pipeline.

        Errors outside the dispatch batch (Admin API failures, malformed
        requests) propagate to the caller.
        """
        if not event.is_in_stock:
            logger.info("Inventory still out of stock", available=event.available)
            return RestockResult(RestockOutcome.OUT_OF_STOCK)

        if not event.inventory_item_id:
            logger.warning("Inventory event without inventory_item_id", available=event.available)
            return RestockResult(RestockOutcome.VARIANT_NOT_FOUND)

        variant = await resolve_variant(self.admin, event.inventory_item_id)
        if variant is None:
            return RestockResult(RestockOutcome.VARIANT_NOT_FOUND)

        config = await get_marketing_config(self.admin)
        if not config.is_complete:
            logger.info("CleverTap not configured for this store", shop=self.shop)
            return RestockResult(RestockOutcome.NOT_CONFIGURED, variant=variant)

        matches = await self.requests.find_pending_for_variant(variant.variant_id)
        if not matches:
            return RestockResult(RestockOutcome.NO_MATCHES, variant=variant)

        notifier = BackInStockNotifier(self.marketing, config, self.shop)
        report = await self.notify_all(matches, variant, notifier)

        outcome = RestockOutcome.COMPLETED if report.succeeded else RestockOutcome.FAILED
        logger.info("Back in stock batch processed", outcome=outcome.value, **report.to_dict())
        return RestockResult(outcome, variant=variant, report=report)

    async def notify_all(
        self,
        matches: list[NotificationRequest],
        variant: Variant,
        notifier: BackInStockNotifier,
    ) -> BatchReport:
        """Dispatch then mark each request, stopping at the first failure."""
        report = BatchReport()

        for index, request in enumerate(matches):
            try:
                # Another delivery may have handled it since the listing
                current = await self.requests.get_status(request.id)
                if current != RequestStatus.PENDING:
                    logger.info(
                        "Skipping request no longer pending",
                        request_id=request.id,
                        status=current.value if current else None,
                    )
                    report.skipped.append(request.id)
                    continue

                await notifier.notify(request, variant)
                await self.requests.mark_notified(request.id)
                report.notified.append(request.id)
            except Exception as e:
                logger.error(
                    "Back in stock notification failed",
                    request_id=request.id,
                    error=str(e),
                )
                report.failed = request.id
                report.error = str(e)
                report.not_attempted = [r.id for r in matches[index + 1 :]]
                break

        return report
