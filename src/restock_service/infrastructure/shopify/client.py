"""Async client for the Shopify Admin GraphQL API."""

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


class ShopifyGraphQLError(Exception):
    """The Admin API answered with top-level GraphQL errors."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        message = "GraphQL query failed with errors:\n"
        for error in errors:
            msg = error.get("message", "Unknown error")
            path = error.get("path", [])
            message += f"- Message: {msg}, Path: {path}\n"
        super().__init__(message)


class ShopifyUserError(Exception):
    """A mutation was rejected with userErrors."""

    def __init__(self, mutation: str, user_errors: list[dict[str, Any]]):
        self.mutation = mutation
        self.user_errors = user_errors
        messages = "; ".join(e.get("message", "Unknown error") for e in user_errors)
        super().__init__(f"{mutation} rejected: {messages}")


class AdminGraphQLClient:
    """Admin API client bound to a single shop."""

    def __init__(
        self,
        shop: str,
        access_token: str,
        api_version: str,
        http_client: httpx.AsyncClient,
    ):
        self.shop = shop
        self.graphql_url = f"https://{shop}/admin/api/{api_version}/graphql.json"
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        }
        self.http_client = http_client

    async def graphql(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Execute a query or mutation and return its ``data`` object.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            ShopifyGraphQLError: When the response carries ``errors``.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        response = await self.http_client.post(
            self.graphql_url, headers=self.headers, json=payload
        )
        response.raise_for_status()
        body = response.json()

        if body.get("errors"):
            logger.warning("GraphQL errors", shop=self.shop, errors=body["errors"])
            raise ShopifyGraphQLError(body["errors"])

        return body.get("data") or {}
