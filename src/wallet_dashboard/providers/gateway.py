"""Gateway over the injected wallet provider."""
import logging
from typing import Any, Optional, Sequence

from ..errors import (
    NoProviderError,
    ProviderError,
    USER_REJECTED_CODE,
    UserRejectedError,
)
from ..units import format_balance, format_block_number, format_gwei, hex_to_int
from .base import EthereumProvider


class ProviderGateway:
    """
    Thin contract over an EIP-1193 provider.

    Every call re-queries the provider; nothing is cached. A missing
    provider is a normal condition reported as ``NoProviderError``.
    """

    def __init__(self, provider: Optional[EthereumProvider] = None):
        self.provider = provider

    def _require_provider(self) -> EthereumProvider:
        if self.provider is None:
            raise NoProviderError("No wallet provider is available")
        return self.provider

    async def request_accounts(self) -> str:
        """
        Ask the wallet for account access.

        Returns
        -------
        str
            The first (selected) account address.

        Raises
        ------
        NoProviderError
            No wallet is injected.
        UserRejectedError
            The user declined the prompt.
        ProviderError
            Any other provider fault, or an empty account list.
        """
        provider = self._require_provider()
        try:
            accounts = await provider.request("eth_requestAccounts", [])
        except (NoProviderError, UserRejectedError):
            raise
        except ProviderError as e:
            if e.code == USER_REJECTED_CODE:
                raise UserRejectedError(str(e)) from e
            raise
        except Exception as e:
            raise ProviderError(str(e) or "Failed to connect wallet") from e

        if not accounts or not isinstance(accounts, (list, tuple)) or not accounts[0]:
            raise ProviderError("No accounts found")
        return str(accounts[0])

    async def query(self, method: str, params: Sequence[Any] = ()) -> Any:
        """Generic RPC query; every fault surfaces as ``ProviderError``."""
        provider = self._require_provider()
        try:
            return await provider.request(method, list(params))
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"{method} failed: {e}") from e

    async def _quantity(self, method: str, params: Sequence[Any] = ()) -> int:
        result = await self.query(method, params)
        try:
            return hex_to_int(result)
        except ValueError as e:
            raise ProviderError(f"{method} returned a malformed quantity: {result!r}") from e

    async def chain_id(self) -> int:
        return await self._quantity("eth_chainId")

    async def get_balance(self, address: str) -> str:
        """Native balance of ``address`` in ether, 4 decimal places."""
        wei = await self._quantity("eth_getBalance", [address, "latest"])
        balance = format_balance(wei)
        logging.debug(f"Balance for {address}: {balance}")
        return balance

    async def gas_price_gwei(self) -> str:
        return format_gwei(await self._quantity("eth_gasPrice"))

    async def block_height(self) -> str:
        return format_block_number(await self._quantity("eth_blockNumber"))
