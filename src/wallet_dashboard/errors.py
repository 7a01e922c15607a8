"""Error taxonomy for wallet dashboard operations."""
from typing import Optional

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001


class WalletDashboardError(Exception):
    """Base class for all wallet dashboard errors."""


class NoProviderError(WalletDashboardError):
    """No wallet provider is injected."""


class UserRejectedError(WalletDashboardError):
    """The user declined the account request."""


class ProviderError(WalletDashboardError):
    """
    RPC or transport fault reported by a wallet provider.

    Parameters
    ----------
    message : str
        Human-readable description.
    code : Optional[int]
        JSON-RPC / EIP-1193 error code, if the provider reported one.
    """

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class MissingCredentialError(WalletDashboardError):
    """A history backend has no access key configured."""


class AdapterError(WalletDashboardError):
    """A history backend failed or returned a malformed payload."""
