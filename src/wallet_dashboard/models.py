"""Canonical transaction record and chain lookup table."""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(frozen=True)
class TransactionRecord:
    """
    Normalized transaction, produced by history adapters.

    Parameters
    ----------
    hash : str
        Transaction hash, unique per chain.
    from_address : str
        Sender address.
    to_address : Optional[str]
        Recipient address, None for contract creation.
    value_eth : str
        Non-negative amount in whole native-currency units.
    block_number : str
        Decimal block number.
    """

    hash: str
    from_address: str
    to_address: Optional[str]
    value_eth: str
    block_number: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to_address,
            "valueEth": self.value_eth,
            "blockNumber": self.block_number,
        }


@dataclass(frozen=True)
class ChainDescriptor:
    """Network routing entry for the block-explorer backend."""

    chain_id: int
    name: str
    backend_base_url: str


MAINNET_CHAIN_ID = 1

CHAINS: Dict[int, ChainDescriptor] = {
    1: ChainDescriptor(1, "mainnet", "https://api.etherscan.io/api"),
    11155111: ChainDescriptor(11155111, "sepolia", "https://api-sepolia.etherscan.io/api"),
    5: ChainDescriptor(5, "goerli", "https://api-goerli.etherscan.io/api"),
}


def chain_descriptor(chain_id: int) -> ChainDescriptor:
    """Look up a chain, falling back to mainnet for unknown ids."""
    return CHAINS.get(chain_id, CHAINS[MAINNET_CHAIN_ID])


def normalize_to_address(value: Optional[str]) -> Optional[str]:
    """Map empty or zero-like recipients to None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("0x", ZERO_ADDRESS):
        return None
    return text


def dedupe_by_hash(records: Iterable[TransactionRecord]) -> List[TransactionRecord]:
    """Drop repeated hashes, keeping the first occurrence and the order."""
    seen = set()
    unique = []
    for record in records:
        if record.hash in seen:
            continue
        seen.add(record.hash)
        unique.append(record)
    return unique
