"""Session state and aggregation."""
from .aggregator import SessionAggregator, connect_error_message
from .state import Session

__all__ = ["Session", "SessionAggregator", "connect_error_message"]
