"""Network definitions for the supported TRON environments."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from tron_wallet.errors import ConfigurationError


class Network(str, Enum):
    MAINNET = "mainnet"
    SHASTA = "shasta"
    NILE = "nile"

    @property
    def contract_env_var(self) -> str:
        """Environment variable holding this network's USDT contract."""
        return f"{self.value.upper()}_USDT_CONTRACT"


@dataclass(frozen=True)
class NetworkConfig:
    """Endpoints and contract addresses for one TRON network."""

    network: Network
    rpc_url: str
    explorer_url: str
    faucet_url: str | None
    usdt_contract: str
    label: str

    @property
    def name(self) -> str:
        return self.network.value

    def require_usdt_contract(self) -> str:
        """Return the USDT contract address or raise ``ConfigurationError``."""
        if not self.usdt_contract:
            raise ConfigurationError(
                f"USDT contract address not configured for {self.name}. "
                f"Please set {self.network.contract_env_var} in .env file",
                env_var=self.network.contract_env_var,
            )
        return self.usdt_contract

    def address_url(self, address: str) -> str:
        return f"{self.explorer_url}/#/address/{address}"

    def transaction_url(self, txid: str) -> str:
        return f"{self.explorer_url}/#/transaction/{txid}"


RPC_URLS: dict[Network, str] = {
    Network.MAINNET: "https://api.trongrid.io",
    Network.SHASTA: "https://api.shasta.trongrid.io",
    Network.NILE: "https://nile.trongrid.io",
}

EXPLORER_URLS: dict[Network, str] = {
    Network.MAINNET: "https://tronscan.org",
    Network.SHASTA: "https://shasta.tronscan.org",
    Network.NILE: "https://nile.tronscan.org",
}

FAUCET_URLS: dict[Network, str | None] = {
    Network.MAINNET: None,
    Network.SHASTA: "https://www.trongrid.io/shasta",
    Network.NILE: "https://nileex.io/join/getJoinPage",
}

# Nile has no default: transfers there need NILE_USDT_CONTRACT.
DEFAULT_USDT_CONTRACTS: dict[Network, str] = {
    Network.MAINNET: "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t",
    Network.SHASTA: "TG3XXyExBkPp9nzdajDZsozEu4BkaSJozs",
    Network.NILE: "",
}

LABELS: dict[Network, str] = {
    Network.MAINNET: "Mainnet (Production)",
    Network.SHASTA: "Shasta (Testnet)",
    Network.NILE: "Nile (Testnet)",
}


def build_networks(
    usdt_contracts: Mapping[Network, str] | None = None,
) -> Mapping[Network, NetworkConfig]:
    """Build the read-only ``Network -> NetworkConfig`` table.

    Parameters
    ----------
    usdt_contracts:
        Per-network USDT contract overrides. Networks missing from the
        mapping fall back to :data:`DEFAULT_USDT_CONTRACTS`.
    """
    contracts = dict(DEFAULT_USDT_CONTRACTS)
    if usdt_contracts:
        contracts.update(usdt_contracts)
    return MappingProxyType({
        network: NetworkConfig(
            network=network,
            rpc_url=RPC_URLS[network],
            explorer_url=EXPLORER_URLS[network],
            faucet_url=FAUCET_URLS[network],
            usdt_contract=contracts[network].strip(),
            label=LABELS[network],
        )
        for network in Network
    })


def get_network(name: str) -> Network:
    """Parse a network name. Raises ``KeyError`` if not supported."""
    try:
        return Network(name.strip().lower())
    except ValueError:
        raise KeyError(
            f"Unknown network '{name}'. Available: {list_network_names()}"
        ) from None


def list_network_names() -> list[str]:
    """Return the names of all supported networks."""
    return [network.value for network in Network]
