"""Indexer (Alchemy asset transfers) history backend."""
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..errors import AdapterError, MissingCredentialError
from ..models import MAINNET_CHAIN_ID, TransactionRecord, dedupe_by_hash, normalize_to_address
from ..units import format_block_number, format_ether
from .base import HttpHistoryAdapter

DEFAULT_ENDPOINT = "https://eth-mainnet.g.alchemy.com/v2/{key}"
DEFAULT_CATEGORIES = ("external", "internal")


class IndexerAdapter(HttpHistoryAdapter):
    """
    Fetches outgoing transfers with ``alchemy_getAssetTransfers``.
    The endpoint serves mainnet only.
    """

    name = "indexer"

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = 15.0,
        categories: Sequence[str] = DEFAULT_CATEGORIES,
    ):
        super().__init__(client=client, timeout=timeout)
        self.api_key = api_key
        self.endpoint = endpoint or DEFAULT_ENDPOINT
        self.categories = list(categories)

    def supports(self, chain_id: int) -> bool:
        return chain_id == MAINNET_CHAIN_ID

    def _body(self, address: str, limit: int) -> Dict[str, Any]:
        return {
            "id": 1,
            "jsonrpc": "2.0",
            "method": "alchemy_getAssetTransfers",
            "params": [
                {
                    "fromAddress": address,
                    "category": self.categories,
                    "maxCount": hex(limit),
                    "order": "desc",
                }
            ],
        }

    async def fetch_recent(
        self, address: str, chain_id: int, limit: int
    ) -> List[TransactionRecord]:
        if not self.api_key:
            raise MissingCredentialError("Indexer API key is not configured")

        url = self.endpoint.format(key=self.api_key)
        data = await self._send("POST", url, json=self._body(address, limit))
        if not isinstance(data, dict):
            raise AdapterError("indexer: unexpected response format")
        if data.get("error"):
            raise AdapterError(f"indexer: RPC error: {data['error']}")

        result = data.get("result")
        transfers = result.get("transfers") if isinstance(result, dict) else None
        if not isinstance(transfers, list):
            raise AdapterError("indexer: transfers are missing from the response")

        records = [self._normalize(transfer) for transfer in transfers]
        return dedupe_by_hash(records)[:limit]

    @staticmethod
    def _normalize(transfer: Any) -> TransactionRecord:
        try:
            # rawContract.value is hex wei; bare value is read as smallest units
            raw = (transfer.get("rawContract") or {}).get("value")
            value = raw if raw is not None else transfer.get("value")
            return TransactionRecord(
                hash=str(transfer["hash"]),
                from_address=str(transfer["from"]),
                to_address=normalize_to_address(transfer.get("to")),
                value_eth=format_ether(value if value is not None else 0),
                block_number=format_block_number(transfer["blockNum"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise AdapterError(f"indexer: malformed transfer entry: {e}") from e
