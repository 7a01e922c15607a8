"""Generated demo history, used when no real backend answers."""
import logging
import time
from typing import Callable, List

from ..models import TransactionRecord
from .base import HistoryAdapter

DEMO_COUNTERPARTY = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


def mock_transactions(address: str, now: float) -> List[TransactionRecord]:
    """Three illustrative records for ``address``, salted with ``now``."""
    stamp = int(now * 1000)
    return [
        TransactionRecord(
            hash=f"0x1a2b3c4d5e6f{stamp:x}",
            from_address=address,
            to_address=DEMO_COUNTERPARTY,
            value_eth="0.0015",
            block_number="18945678",
        ),
        TransactionRecord(
            hash=f"0x2b3c4d5e6f{stamp + 1:x}",
            from_address=DEMO_COUNTERPARTY,
            to_address=address,
            value_eth="0.0250",
            block_number="18945672",
        ),
        TransactionRecord(
            hash=f"0x3c4d5e6f{stamp + 2:x}",
            from_address=address,
            to_address=None,
            value_eth="0.0000",
            block_number="18945665",
        ),
    ]


class MockAdapter(HistoryAdapter):
    """Terminal fallback. Never fails."""

    name = "mock"

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    async def fetch_recent(
        self, address: str, chain_id: int, limit: int
    ) -> List[TransactionRecord]:
        logging.info("Using mock transactions data")
        return mock_transactions(address, self.clock())
