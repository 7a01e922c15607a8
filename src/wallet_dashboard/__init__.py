"""Read-only wallet dashboard: session and data-aggregation layer."""

__version__ = "0.1.0"
