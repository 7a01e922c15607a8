"""Node-backed provider for read-only RPC queries."""
import logging
import os
from typing import Any, List, Optional, Sequence

from web3 import AsyncWeb3

from ..errors import ProviderError
from .base import EthereumProvider

ACCOUNT_METHODS = ("eth_requestAccounts", "eth_accounts")


class Web3Provider(EthereumProvider):
    """
    Provider that forwards JSON-RPC requests to an Ethereum node.

    It holds no keys. Account requests are answered from a watch-only
    address list, so it can stand in for a browser wallet when the
    dashboard runs against a node directly.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        accounts: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the node provider.

        Parameters
        ----------
        rpc_url : Optional[str]
            RPC endpoint URL. Defaults to the ETH_RPC_URL environment variable.
        accounts : Optional[Sequence[str]]
            Watch-only addresses returned for account requests.
        """
        self.rpc_url = rpc_url or os.environ.get("ETH_RPC_URL")
        if not self.rpc_url:
            raise ValueError("ETH_RPC_URL is not set")

        self.accounts: List[str] = [a for a in (accounts or []) if a]
        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.rpc_url))
        logging.info(f"Web3 provider using node: {self.rpc_url}")

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        if method in ACCOUNT_METHODS:
            return list(self.accounts)

        try:
            response = await self.w3.provider.make_request(method, list(params or []))
        except Exception as e:
            raise ProviderError(f"RPC transport error on {method}: {e}") from e

        if response.get("error"):
            error = response["error"]
            if isinstance(error, dict):
                raise ProviderError(
                    error.get("message") or f"RPC error on {method}",
                    code=error.get("code"),
                )
            raise ProviderError(str(error))

        if "result" not in response:
            raise ProviderError(f"Malformed RPC response for {method}")
        return response["result"]

    async def close(self) -> None:
        await self.w3.provider.disconnect()
        logging.info("Web3 provider disconnected")
