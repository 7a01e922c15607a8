"""Backend selection and the history fallback chain."""
import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

import httpx

from ..config import Settings
from ..errors import AdapterError, MissingCredentialError
from ..models import TransactionRecord
from .base import HistoryAdapter
from .explorer import ExplorerAdapter
from .indexer import IndexerAdapter
from .mock import MockAdapter


class BackendSelector:
    """
    Chooses the history backends to try for a network.

    Order: explorer (when its key is set), indexer (when its key is set
    and it serves the chain), then the mock generator, which never fails.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        mock: Optional[MockAdapter] = None,
    ):
        self.settings = settings
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=settings.request_timeout)
        self.explorer = ExplorerAdapter(settings.etherscan_api_key, client=self.client)
        self.indexer = IndexerAdapter(settings.alchemy_api_key, client=self.client)
        self.mock = mock or MockAdapter()

    def resolve(self, chain_id: int) -> List[HistoryAdapter]:
        """Ordered candidates for ``chain_id``, always ending with the mock adapter."""
        candidates: List[HistoryAdapter] = []
        if self.settings.etherscan_api_key:
            candidates.append(self.explorer)
        else:
            logging.debug("Explorer API key not found, skipping explorer backend")
        if self.settings.alchemy_api_key and self.indexer.supports(chain_id):
            candidates.append(self.indexer)
        candidates.append(self.mock)
        return candidates

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


async def fetch_with_fallback(
    adapters: Sequence[HistoryAdapter],
    address: str,
    chain_id: int,
    limit: int,
    timeout: Optional[float] = None,
) -> Tuple[str, List[TransactionRecord]]:
    """
    Try each adapter in order and return the first successful result.

    Returns
    -------
    Tuple[str, List[TransactionRecord]]
        Name of the adapter that answered and its records, or
        ``("none", [])`` when every adapter failed.
    """
    for adapter in adapters:
        try:
            records = await asyncio.wait_for(
                adapter.fetch_recent(address, chain_id, limit), timeout
            )
        except MissingCredentialError as e:
            logging.debug(f"Skipping {adapter.name} backend: {e}")
            continue
        except AdapterError as e:
            logging.warning(f"{adapter.name} backend failed: {e}")
            continue
        except asyncio.TimeoutError:
            logging.warning(f"{adapter.name} backend timed out after {timeout}s")
            continue
        except Exception as e:
            logging.exception(f"Unexpected error in {adapter.name} backend: {e}")
            continue

        logging.info(f"Fetched {len(records)} transactions from {adapter.name} backend")
        return adapter.name, records

    logging.error(f"Every history backend failed for {address}")
    return "none", []
