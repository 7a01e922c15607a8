"""Transaction-history backends."""
from .base import HistoryAdapter, HttpHistoryAdapter
from .explorer import ExplorerAdapter
from .indexer import IndexerAdapter
from .mock import MockAdapter, mock_transactions
from .selector import BackendSelector, fetch_with_fallback

__all__ = [
    "HistoryAdapter",
    "HttpHistoryAdapter",
    "ExplorerAdapter",
    "IndexerAdapter",
    "MockAdapter",
    "mock_transactions",
    "BackendSelector",
    "fetch_with_fallback",
]
