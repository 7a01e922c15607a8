"""Wallet provider implementations."""
from .base import EthereumProvider
from .gateway import ProviderGateway
from .user_provider import UserWalletProvider
from .web3_provider import Web3Provider

__all__ = ["EthereumProvider", "ProviderGateway", "UserWalletProvider", "Web3Provider"]
