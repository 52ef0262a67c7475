"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import DEFAULT_METAOBJECT_PAGE_SIZE, MAX_METAOBJECT_PAGE_SIZE


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "restock-notifier"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Settings
    # -------------------------------------------------------------------------
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4

    # -------------------------------------------------------------------------
    # Shopify Admin API
    # -------------------------------------------------------------------------
    shopify_api_version: str = "2025-01"
    shopify_api_secret: str = ""
    # Offline access tokens, "shop.myshopify.com=shpat_...,other.myshopify.com=..."
    shopify_shop_tokens: str = ""

    @field_validator("shopify_api_secret", "shopify_shop_tokens", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @property
    def shop_access_tokens(self) -> dict[str, str]:
        """Parse the configured offline access tokens keyed by shop domain."""
        tokens: dict[str, str] = {}
        for pair in self.shopify_shop_tokens.split(","):
            shop, _, token = pair.partition("=")
            if shop.strip() and token.strip():
                tokens[shop.strip().lower()] = token.strip()
        return tokens

    # -------------------------------------------------------------------------
    # CleverTap
    # -------------------------------------------------------------------------
    clevertap_upload_url_template: str = "https://{region}.api.clevertap.com/1/upload"

    # -------------------------------------------------------------------------
    # Outbound HTTP
    # -------------------------------------------------------------------------
    http_timeout_seconds: float = 30.0

    # -------------------------------------------------------------------------
    # Back In Stock Settings
    # -------------------------------------------------------------------------
    metaobject_page_size: int = Field(
        default=DEFAULT_METAOBJECT_PAGE_SIZE, ge=1, le=MAX_METAOBJECT_PAGE_SIZE
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
