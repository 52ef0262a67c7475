"""Shared outbound HTTP client."""

import httpx
import structlog

from restock_service.config import get_settings

logger = structlog.get_logger()

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the global async HTTP client."""
    global _http_client
    if _http_client is None:
        settings = get_settings()
        _http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        logger.info("HTTP client created", timeout=settings.http_timeout_seconds)
    return _http_client


async def close_http_client() -> None:
    """Close the HTTP client on shutdown."""
    global _http_client
    if _http_client:
        await _http_client.aclose()
        _http_client = None
