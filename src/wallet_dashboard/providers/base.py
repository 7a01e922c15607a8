"""Base wallet provider interface for the wallet dashboard."""
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class EthereumProvider(ABC):
    """
    Abstract base class for EIP-1193 style wallet providers.

    A provider answers ``request(method, params)`` calls. Account methods
    may trigger a permission prompt in the user's wallet.
    """

    @abstractmethod
    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Send a JSON-RPC request through the provider.

        Parameters
        ----------
        method : str
            RPC method name, e.g. ``eth_requestAccounts``.
        params : Optional[Sequence[Any]]
            Positional RPC parameters.

        Returns
        -------
        Any
            Raw RPC result.

        Raises
        ------
        ProviderError
            On transport or provider fault. ``code`` carries the
            upstream error code when there is one.
        """
        pass

    async def close(self) -> None:
        """Release any transport held by the provider."""
        pass
