"""Interfaces the services depend on."""

from typing import Any, Protocol


class AdminAPI(Protocol):
    """Anything that can run an Admin GraphQL operation for one shop."""

    async def graphql(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


class MarketingAPI(Protocol):
    """Anything that can upload CleverTap records."""

    async def upload(
        self,
        account_id: str,
        passcode: str,
        region: str,
        records: list[dict[str, Any]],
    ) -> dict[str, Any]: ...
