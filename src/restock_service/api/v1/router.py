"""Routers that aggregate all endpoint modules."""

from fastapi import APIRouter

from restock_service.api.v1 import health, notify, webhooks

api_router = APIRouter()

api_router.include_router(
    health.router,
    tags=["Health"],
)

# Shopify-facing routes keep the paths configured in the app's toml
shopify_router = APIRouter()

shopify_router.include_router(
    webhooks.router,
    prefix="/webhooks",
    tags=["Webhooks"],
)

shopify_router.include_router(
    notify.router,
    tags=["App Proxy"],
)
