"""Back in stock notifications for Shopify stores."""

__version__ = "1.0.0"
