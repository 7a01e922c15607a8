"""
Environment configuration for the wallet dashboard.

- ETHERSCAN_API_KEY: block-explorer access key (explorer backend disabled when unset)
- ALCHEMY_API_KEY: indexer access key (indexer backend disabled when unset)
- ETH_RPC_URL: Ethereum node for read-only RPC queries
- WALLET_ADDRESS: watch-only account answered by the node provider
- TRANSACTION_LIMIT: number of recent transactions to fetch (default: 10)
- REQUEST_TIMEOUT: per-call timeout in seconds, 0 disables (default: 15)
- LOG_LEVEL, DASHBOARD_HOST, DASHBOARD_PORT
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_TRANSACTION_LIMIT = 10
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001


@dataclass
class Settings:
    """Typed dashboard settings."""

    etherscan_api_key: Optional[str] = None
    alchemy_api_key: Optional[str] = None
    rpc_url: Optional[str] = None
    watch_address: Optional[str] = None
    transaction_limit: int = DEFAULT_TRANSACTION_LIMIT
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def _get(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


def _get_int(name: str, default: int) -> int:
    raw = _get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logging.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logging.warning(f"{name} must be positive, using {default}")
        return default
    return value


def _get_timeout(name: str, default: float) -> Optional[float]:
    raw = _get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logging.warning(f"Invalid {name}={raw!r}, using {default}")
        return default
    return value if value > 0 else None


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    Parameters
    ----------
    env_file : Optional[str]
        Path of a .env file. Defaults to ``.env`` in the working directory.
        Variables already set in the environment take precedence.

    Returns
    -------
    Settings
        Parsed settings; unset access keys stay None.
    """
    load_dotenv(env_file or ".env")

    return Settings(
        etherscan_api_key=_get("ETHERSCAN_API_KEY"),
        alchemy_api_key=_get("ALCHEMY_API_KEY"),
        rpc_url=_get("ETH_RPC_URL"),
        watch_address=_get("WALLET_ADDRESS"),
        transaction_limit=_get_int("TRANSACTION_LIMIT", DEFAULT_TRANSACTION_LIMIT),
        request_timeout=_get_timeout("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        log_level=(_get("LOG_LEVEL") or "INFO").upper(),
        host=_get("DASHBOARD_HOST") or DEFAULT_HOST,
        port=_get_int("DASHBOARD_PORT", DEFAULT_PORT),
    )
