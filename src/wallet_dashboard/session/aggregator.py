"""Session aggregator: connect sequence, parallel reads and history refresh."""
import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Dict, Iterator, List, Optional

from ..errors import NoProviderError, UserRejectedError
from ..history.selector import BackendSelector, fetch_with_fallback
from ..models import MAINNET_CHAIN_ID
from ..providers.gateway import ProviderGateway
from .state import Session

NO_WALLET_MESSAGE = "Wallet not installed. Install a browser wallet such as MetaMask to continue."
REJECTED_MESSAGE = "Wallet connection was declined. Approve the connection request to continue."
TIMEOUT_MESSAGE = "The wallet did not respond in time."
GENERIC_MESSAGE = "Failed to connect wallet"


def connect_error_message(error: BaseException) -> str:
    """Human-readable message for an account-request failure."""
    if isinstance(error, NoProviderError):
        return NO_WALLET_MESSAGE
    if isinstance(error, UserRejectedError):
        return REJECTED_MESSAGE
    if isinstance(error, asyncio.TimeoutError):
        return TIMEOUT_MESSAGE
    detail = str(error)
    return f"{GENERIC_MESSAGE}: {detail}" if detail else GENERIC_MESSAGE


class SessionAggregator:
    """
    Owns the dashboard ``Session`` and is its only writer.

    ``connect`` requests the account, then loads balance, gas price and
    block height concurrently (each failure isolated to its own field),
    then refreshes the transaction history. Results that arrive after the
    session moved to another address, or was disconnected, are dropped.
    None of the public operations raise.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        selector: BackendSelector,
        session: Optional[Session] = None,
        transaction_limit: int = 10,
        call_timeout: Optional[float] = None,
    ):
        """
        Initialize the aggregator.

        Parameters
        ----------
        gateway : ProviderGateway
            Access to the wallet provider.
        selector : BackendSelector
            Chooses transaction-history backends.
        session : Optional[Session]
            Session to write into; a fresh one is created by default.
        transaction_limit : int
            Number of recent transactions to request.
        call_timeout : Optional[float]
            Per-call timeout in seconds for provider and backend calls.
        """
        self.gateway = gateway
        self.selector = selector
        self._session = session if session is not None else Session()
        self.transaction_limit = transaction_limit
        self.call_timeout = call_timeout
        self._epoch = 0
        self._holders: Dict[str, List[int]] = {"connecting": [], "loading_transactions": []}

    @property
    def session(self) -> Session:
        return self._session

    def snapshot(self) -> Dict[str, Any]:
        return self._session.to_dict()

    @contextmanager
    def _flag(self, name: str) -> Iterator[None]:
        # set while an operation from the current epoch holds it
        epoch = self._epoch
        holders = self._holders[name]
        holders.append(epoch)
        setattr(self._session, name, True)
        try:
            yield
        finally:
            holders.remove(epoch)
            self._settle(name)

    def _settle(self, name: str) -> None:
        if self._epoch not in self._holders[name]:
            setattr(self._session, name, False)

    async def _call(self, awaitable: Awaitable[Any]) -> Any:
        return await asyncio.wait_for(awaitable, self.call_timeout)

    def _is_current(self, address: str) -> bool:
        return self._session.address is not None and self._session.address == address

    def _apply(self, address: str, name: str, value: Any) -> None:
        if not self._is_current(address):
            logging.debug(f"Dropping stale {name} for {address}")
            return
        setattr(self._session, name, value)

    def _clear_account_data(self) -> None:
        session = self._session
        session.address = None
        session.balance = None
        session.gas_price_gwei = None
        session.block_height = None
        session.transactions = []
        session.chain_id = None
        session.history_source = None
        self._settle("loading_transactions")

    async def connect(self) -> None:
        """Connect the wallet and load the account snapshot."""
        self._epoch += 1
        epoch = self._epoch
        self._session.last_error = None

        with self._flag("connecting"):
            try:
                address = await self._call(self.gateway.request_accounts())
            except Exception as e:
                if self._epoch == epoch:
                    self._clear_account_data()
                    self._session.last_error = connect_error_message(e)
                logging.error(f"Error connecting wallet: {e!r}")
                return

            if self._epoch != epoch:
                logging.debug(f"Connect for {address} superseded, dropping result")
                return

            if self._session.address != address:
                self._clear_account_data()
                self._session.address = address
            logging.info(f"User wallet connected: {address}")

            await asyncio.gather(
                self._load(address, "balance", self.gateway.get_balance(address)),
                self._load(address, "gas_price_gwei", self.gateway.gas_price_gwei()),
                self._load(address, "block_height", self.gateway.block_height()),
            )
            if self._is_current(address):
                await self.refresh_transactions(address)

    async def _load(self, address: str, name: str, fetch: Awaitable[str]) -> None:
        try:
            value = await self._call(fetch)
        except Exception as e:
            # field stays unset; last_error is reserved for the account request
            logging.warning(f"Could not load {name} for {address}: {e!r}")
            return
        self._apply(address, name, value)

    async def refresh_transactions(self, target_address: Optional[str] = None) -> None:
        """
        Reload the transaction history.

        Parameters
        ----------
        target_address : Optional[str]
            Address to load; defaults to the session address. Nothing
            happens when neither is known.
        """
        address = target_address or self._session.address
        if not address:
            return

        with self._flag("loading_transactions"):
            try:
                await self._refresh(address)
            except Exception as e:
                logging.exception(f"Error refreshing transactions for {address}: {e}")

    async def _refresh(self, address: str) -> None:
        try:
            chain_id = await self._call(self.gateway.chain_id())
        except Exception as e:
            logging.warning(f"Could not detect chain, assuming mainnet: {e!r}")
            chain_id = MAINNET_CHAIN_ID

        adapters = self.selector.resolve(chain_id)
        source, records = await fetch_with_fallback(
            adapters, address, chain_id, self.transaction_limit, self.call_timeout
        )

        if not self._is_current(address):
            logging.debug(f"Dropping stale transactions for {address}")
            return
        self._session.chain_id = chain_id
        self._session.transactions = records
        self._session.history_source = source

    def disconnect(self) -> None:
        """Clear the session. In-flight results are dropped when they arrive."""
        self._epoch += 1
        address = self._session.address
        self._session.reset()
        logging.info(f"User wallet disconnected: {address}")

    async def aclose(self) -> None:
        """Close backend and provider transports."""
        await self.selector.aclose()
        if self.gateway.provider is not None:
            await self.gateway.provider.close()
