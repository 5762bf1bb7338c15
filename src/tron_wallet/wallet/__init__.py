"""TRON wallet core: network table, wallet file store, and the tronpy gateway.

Wallet files are plain JSON holding the private key in clear. Saving over a
file that belongs to a different wallet moves the old file to a ``.bk``
backup instead of overwriting it.
"""

from tron_wallet.wallet.gateway import TronGateway
from tron_wallet.wallet.models import BalanceInfo, ContractMetadata, Keypair, WalletRecord
from tron_wallet.wallet.networks import Network, NetworkConfig, build_networks
from tron_wallet.wallet.store import create_wallet, list_wallets, load_wallet, save_wallet

__all__ = [
    "TronGateway",
    "BalanceInfo",
    "ContractMetadata",
    "Keypair",
    "WalletRecord",
    "Network",
    "NetworkConfig",
    "build_networks",
    "create_wallet",
    "list_wallets",
    "load_wallet",
    "save_wallet",
]
