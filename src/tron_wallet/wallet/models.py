"""Pydantic models for wallet files and gateway results."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tron_wallet.wallet.networks import Network


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WalletRecord(BaseModel):
    """One TRON account as persisted in ``<name>-<network>.json``.

    ``address``, ``private_key``, ``public_key`` and ``network`` form the
    wallet identity. ``last_updated`` is rewritten by every save.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str = Field(min_length=1)
    private_key: str = Field(alias="privateKey", min_length=1)
    public_key: str = Field(alias="publicKey")
    network: Network
    created_at: datetime = Field(alias="createdAt", default_factory=utcnow)
    last_updated: datetime = Field(alias="lastUpdated", default_factory=utcnow)

    @property
    def identity(self) -> tuple[str, str, str, Network]:
        return (self.address, self.private_key, self.public_key, self.network)

    def same_wallet(self, other: Optional[WalletRecord]) -> bool:
        """True if *other* holds the same keypair on the same network."""
        return other is not None and self.identity == other.identity

    def touched(self, now: datetime | None = None) -> WalletRecord:
        """Return a copy with ``last_updated`` set to *now*."""
        return self.model_copy(update={"last_updated": now or utcnow()})

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class Keypair(BaseModel):
    """Fresh key material returned by the gateway."""

    address: str
    private_key: str
    public_key: str


class ContractMetadata(BaseModel):
    """TRC-20 token metadata read from a contract."""

    name: str
    symbol: str
    decimals: int


class BalanceInfo(BaseModel):
    """Outcome of the parallel TRX/USDT balance queries.

    A failed query leaves its balance as ``None`` and records the error text.
    """

    trx: Optional[str] = None
    usdt: Optional[str] = None
    trx_error: Optional[str] = None
    usdt_error: Optional[str] = None
