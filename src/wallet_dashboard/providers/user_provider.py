"""User wallet provider for browser-based wallet interactions."""
import logging
from typing import Any, Optional, Sequence

from ..errors import NoProviderError, ProviderError, USER_REJECTED_CODE
from .base import EthereumProvider


class UserWalletProvider(EthereumProvider):
    """
    User wallet provider for browser-based wallets.
    The account prompt is answered in the user's browser (MetaMask,
    WalletConnect, etc.) and the outcome is reported to the dashboard.
    Read-only RPC methods are forwarded to an upstream node provider.
    """

    def __init__(self, upstream: Optional[EthereumProvider] = None):
        """
        Initialize User wallet provider.

        Parameters
        ----------
        upstream : Optional[EthereumProvider]
            Provider used for every method other than accounts and chain id.
        """
        self.upstream = upstream
        self.address: Optional[str] = None
        self.chain_id: Optional[int] = None
        self.rejected = False

    def set_wallet_info(self, address: str, chain_id: Optional[int] = None) -> None:
        """
        Set wallet info from browser connection.

        Parameters
        ----------
        address : str
            User's wallet address
        chain_id : Optional[int]
            Connected chain ID
        """
        self.address = address
        self.chain_id = chain_id
        self.rejected = False
        logging.info(f"User wallet info set: {address} on chain {chain_id}")

    def set_rejected(self) -> None:
        """Record that the user declined the connection prompt."""
        self.address = None
        self.rejected = True
        logging.info("User wallet connection declined in browser")

    def clear(self) -> None:
        """Forget the reported wallet."""
        self.address = None
        self.chain_id = None
        self.rejected = False
        logging.info("User wallet info cleared")

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        if method in ("eth_requestAccounts", "eth_accounts"):
            if self.rejected:
                raise ProviderError("User rejected the request.", code=USER_REJECTED_CODE)
            if not self.address:
                if self.upstream is not None:
                    return await self.upstream.request(method, params)
                raise NoProviderError("No browser wallet has been reported")
            return [self.address]

        if method == "eth_chainId" and self.chain_id is not None:
            return hex(self.chain_id)

        if self.upstream is None:
            raise ProviderError(f"No node available to serve {method}")
        return await self.upstream.request(method, params)

    async def close(self) -> None:
        """Disconnect from wallet."""
        self.clear()
        if self.upstream is not None:
            await self.upstream.close()
        logging.info("User wallet disconnected")
