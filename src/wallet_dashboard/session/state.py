"""In-memory record of the connected account and its fetched data."""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from ..models import TransactionRecord


@dataclass
class Session:
    """
    Current dashboard session.

    Written only by the session aggregator; the presentation layer reads
    it through ``to_dict``. ``balance``, ``gas_price_gwei``,
    ``block_height`` and ``transactions`` are only populated while
    ``address`` is set.
    """

    address: Optional[str] = None
    balance: Optional[str] = None
    gas_price_gwei: Optional[str] = None
    block_height: Optional[str] = None
    transactions: List[TransactionRecord] = field(default_factory=list)
    connecting: bool = False
    loading_transactions: bool = False
    last_error: Optional[str] = None
    chain_id: Optional[int] = None
    history_source: Optional[str] = None

    def reset(self) -> None:
        """Restore the initial empty state."""
        empty = Session()
        for f in fields(self):
            setattr(self, f.name, getattr(empty, f.name))

    def is_empty(self) -> bool:
        return self == Session()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "balance": self.balance,
            "gasPriceGwei": self.gas_price_gwei,
            "blockHeight": self.block_height,
            "transactions": [tx.to_dict() for tx in self.transactions],
            "connecting": self.connecting,
            "loadingTransactions": self.loading_transactions,
            "lastError": self.last_error,
            "chainId": self.chain_id,
            "historySource": self.history_source,
        }
