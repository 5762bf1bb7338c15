"""Error types raised by the wallet store, gateway and CLI actions.

Every error derives from :class:`WalletError` so the menu loop can catch the
whole family at the action boundary and keep running.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for all TRON wallet errors."""


class NotFoundError(WalletError):
    """A wallet file or the wallet directory does not exist."""


class ValidationError(WalletError):
    """User input (address, amount, name) was rejected."""


class ConfigurationError(WalletError):
    """Required configuration is missing or malformed."""

    def __init__(self, message: str, env_var: str | None = None) -> None:
        super().__init__(message)
        self.env_var = env_var


class GatewayError(WalletError):
    """The blockchain SDK or the RPC endpoint failed."""


class CorruptWalletFile(WalletError):
    """A wallet file exists but does not hold a valid wallet record."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Wallet file {path} is corrupt: {reason}")
        self.path = path
        self.reason = reason
