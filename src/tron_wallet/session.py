"""The in-memory wallet session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tron_wallet.wallet.models import WalletRecord


@dataclass(frozen=True)
class Session:
    """The currently loaded wallet and the file it came from.

    Sessions are never edited. Actions that load or create a wallet return a
    new ``Session``; every other outcome hands back the one they received.
    """

    wallet: Optional[WalletRecord] = None
    filename: Optional[str] = None

    def __post_init__(self) -> None:
        if self.filename is not None and self.wallet is None:
            raise ValueError("A session filename requires a loaded wallet")

    @property
    def wallet_loaded(self) -> bool:
        return self.wallet is not None

    @classmethod
    def empty(cls) -> Session:
        return cls()

    @classmethod
    def of(cls, wallet: WalletRecord, filename: str) -> Session:
        return cls(wallet=wallet, filename=filename)
