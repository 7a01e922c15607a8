"""Block-explorer (Etherscan-compatible) history backend."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import AdapterError, MissingCredentialError
from ..models import (
    TransactionRecord,
    chain_descriptor,
    dedupe_by_hash,
    normalize_to_address,
)
from ..units import format_block_number, format_ether
from .base import HttpHistoryAdapter

NO_TRANSACTIONS_MESSAGE = "No transactions found"


class ExplorerAdapter(HttpHistoryAdapter):
    """
    Fetches the account transaction list from an Etherscan-style REST API.
    The network endpoint is picked from the chain table.
    """

    name = "explorer"

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 15.0,
    ):
        super().__init__(client=client, timeout=timeout)
        self.api_key = api_key

    def _params(self, address: str, limit: int) -> Dict[str, Any]:
        return {
            "module": "account",
            "action": "txlist",
            "address": address,
            "page": 1,
            "offset": limit,
            "sort": "desc",
            "apikey": self.api_key,
        }

    async def fetch_recent(
        self, address: str, chain_id: int, limit: int
    ) -> List[TransactionRecord]:
        if not self.api_key:
            raise MissingCredentialError("Explorer API key is not configured")

        chain = chain_descriptor(chain_id)
        data = await self._send("GET", chain.backend_base_url, params=self._params(address, limit))
        if not isinstance(data, dict):
            raise AdapterError("explorer: unexpected response format")

        if str(data.get("status")) == "0":
            message = data.get("message") or ""
            if message == NO_TRANSACTIONS_MESSAGE:
                logging.info(f"No explorer transactions for {address} on {chain.name}")
                return []
            raise AdapterError(f"explorer: API error: {message or data.get('result')}")

        result = data.get("result")
        if not isinstance(result, list):
            raise AdapterError("explorer: result is not a list")

        records = [self._normalize(tx) for tx in result]
        return dedupe_by_hash(records)[:limit]

    @staticmethod
    def _normalize(tx: Any) -> TransactionRecord:
        try:
            return TransactionRecord(
                hash=str(tx["hash"]),
                from_address=str(tx["from"]),
                to_address=normalize_to_address(tx.get("to")),
                value_eth=format_ether(tx.get("value") or "0"),
                block_number=format_block_number(tx["blockNumber"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise AdapterError(f"explorer: malformed transaction entry: {e}") from e
