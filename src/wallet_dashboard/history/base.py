"""Base interface for transaction-history backends."""
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx

from ..errors import AdapterError
from ..models import TransactionRecord


class HistoryAdapter(ABC):
    """
    Abstract base class for transaction-history backends.

    Each adapter normalizes its upstream response into
    ``TransactionRecord`` values and signals its own failure with
    ``AdapterError`` or ``MissingCredentialError``.
    """

    name = "base"

    def supports(self, chain_id: int) -> bool:
        """Whether the backend can serve ``chain_id``."""
        return True

    @abstractmethod
    async def fetch_recent(
        self, address: str, chain_id: int, limit: int
    ) -> List[TransactionRecord]:
        """
        Fetch recent transactions for an address.

        Parameters
        ----------
        address : str
            Account address.
        chain_id : int
            Connected chain ID.
        limit : int
            Maximum number of records.

        Returns
        -------
        List[TransactionRecord]
            Records, most recent first.
        """
        pass


class HttpHistoryAdapter(HistoryAdapter):
    """History adapter talking to an HTTP backend through httpx."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = 15.0):
        self.client = client
        self.timeout = timeout

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and decode its JSON body."""
        try:
            if self.client is not None:
                response = await self.client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise AdapterError(f"{self.name}: HTTP error {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AdapterError(f"{self.name}: transport error: {e}") from e
        except ValueError as e:
            raise AdapterError(f"{self.name}: response is not valid JSON") from e
