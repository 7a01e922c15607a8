"""Quantity decoding for RPC and explorer values."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from web3 import Web3

Quantity = Union[int, str]


def hex_to_int(value: Quantity) -> int:
    """
    Decode an RPC quantity.

    Parameters
    ----------
    value : Union[int, str]
        ``0x``-prefixed hex string, decimal string or int.

    Returns
    -------
    int
        Decoded integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a quantity: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a quantity: {value!r}")

    text = value.strip()
    if text.lower().startswith("0x"):
        return int(text, 16) if len(text) > 2 else 0
    return int(text, 10)


def format_ether(wei: Quantity) -> str:
    """Convert a smallest-unit amount to a decimal ether string."""
    amount = hex_to_int(wei)
    if amount < 0:
        raise ValueError(f"Negative amount: {amount}")

    text = format(Decimal(Web3.from_wei(amount, "ether")), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if "." not in text:
        text += ".0"
    return text


def _fixed(value: Decimal, places: int) -> str:
    step = Decimal(1).scaleb(-places)
    return format(value.quantize(step, rounding=ROUND_HALF_UP), "f")


def format_gwei(wei: Quantity, places: int = 2) -> str:
    """Convert a wei amount to gigawei with fixed-point rounding."""
    return _fixed(Decimal(Web3.from_wei(hex_to_int(wei), "gwei")), places)


def format_balance(wei: Quantity, places: int = 4) -> str:
    """Convert a wei balance to ether with a fixed number of decimals."""
    return _fixed(Decimal(Web3.from_wei(hex_to_int(wei), "ether")), places)


def format_block_number(value: Quantity) -> str:
    """Block number as a decimal string."""
    return str(hex_to_int(value))
