"""tronpy-backed gateway for every chain-facing wallet operation."""

from __future__ import annotations

import contextlib
import logging
import threading
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Callable, Iterator

from tronpy import Tron
from tronpy.exceptions import AddressNotFound
from tronpy.keys import PrivateKey, is_address
from tronpy.providers import HTTPProvider

from tron_wallet.errors import GatewayError, ValidationError, WalletError
from tron_wallet.wallet.models import ContractMetadata, Keypair
from tron_wallet.wallet.networks import NetworkConfig

logger = logging.getLogger("tron_wallet.wallet.gateway")

TRX_DECIMALS = 6
SUN_PER_TRX = Decimal(10) ** TRX_DECIMALS
USDT_DECIMALS = 6


def format_amount(value: Decimal) -> str:
    """Render a decimal without exponent or trailing zeros."""
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text


def to_base_units(amount: str | Decimal, decimals: int) -> int:
    """Convert a human amount to integer base units, rounding down."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount '{amount}'") from exc
    units = int((value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN))
    if units <= 0:
        raise ValidationError(
            f"Amount {amount} is below the smallest transferable unit"
        )
    return units


@contextlib.contextmanager
def _sdk_call(action: str) -> Iterator[None]:
    try:
        yield
    except WalletError:
        raise
    except Exception as exc:
        logger.warning(f"{action} failed: {exc}")
        raise GatewayError(f"{action} failed: {exc}") from exc


class TronGateway:
    """Manages tronpy clients across the TRON networks.

    Every operation takes the target :class:`NetworkConfig` explicitly; the
    gateway itself holds no notion of a current network.
    """

    def __init__(
        self,
        api_key: str | None = None,
        usdt_fee_limit: int = 30,
        client_factory: Callable[[NetworkConfig], Tron] | None = None,
    ) -> None:
        self.api_key = api_key or None
        self.fee_limit_sun = int(Decimal(usdt_fee_limit) * SUN_PER_TRX)
        self._client_factory = client_factory or self._default_client
        self._instances: dict[str, Tron] = {}
        self._lock = threading.Lock()

    def _default_client(self, network: NetworkConfig) -> Tron:
        provider = HTTPProvider(network.rpc_url, api_key=self.api_key)
        return Tron(provider=provider, network=network.name)

    def get_client(self, network: NetworkConfig) -> Tron:
        """Return a (cached) tronpy client for the given network.

        Safe to call from the balance-query worker threads.
        """
        with self._lock:
            if network.name not in self._instances:
                self._instances[network.name] = self._client_factory(network)
            return self._instances[network.name]

    # ------------------------------------------------------------------
    # Accounts and addresses
    # ------------------------------------------------------------------

    def create_account(self, network: NetworkConfig) -> Keypair:
        """Generate a fresh keypair. No network round-trip is made."""
        with _sdk_call("Account creation"):
            generated = self.get_client(network).generate_address()
            return Keypair(
                address=generated["base58check_address"],
                private_key=generated["private_key"],
                public_key=generated["public_key"],
            )

    @staticmethod
    def is_valid_address(address: str) -> bool:
        """Check base58check (``T...``) or hex (``41...``) address format."""
        if not address:
            return False
        try:
            return bool(is_address(address))
        except (ValueError, IndexError, TypeError):
            return False

    # ------------------------------------------------------------------
    # Balances and contract metadata
    # ------------------------------------------------------------------

    def get_trx_balance(self, address: str, network: NetworkConfig) -> str:
        """TRX balance in whole TRX. Unactivated accounts report ``0``."""
        with _sdk_call(f"TRX balance query on {network.name}"):
            try:
                balance = self.get_client(network).get_account_balance(address)
            except AddressNotFound:
                return "0"
            return format_amount(Decimal(str(balance)))

    def get_usdt_balance(self, address: str, network: NetworkConfig) -> str:
        contract_address = network.require_usdt_contract()
        with _sdk_call(f"USDT balance query on {network.name}"):
            contract = self.get_client(network).get_contract(contract_address)
            raw = contract.functions.balanceOf(address)
            return format_amount(Decimal(int(raw)) / (Decimal(10) ** USDT_DECIMALS))

    def get_contract_metadata(self, network: NetworkConfig) -> ContractMetadata:
        """Read name, symbol and decimals from the network's USDT contract."""
        contract_address = network.require_usdt_contract()
        with _sdk_call(f"USDT contract verification on {network.name}"):
            contract = self.get_client(network).get_contract(contract_address)
            return ContractMetadata(
                name=str(contract.functions.name()),
                symbol=str(contract.functions.symbol()),
                decimals=int(contract.functions.decimals()),
            )

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def send_trx(
        self,
        private_key: str,
        to_address: str,
        amount: str | Decimal,
        network: NetworkConfig,
    ) -> str:
        """Build, sign, and broadcast a TRX transfer.

        Returns the transaction id.
        """
        amount_sun = to_base_units(amount, TRX_DECIMALS)
        with _sdk_call(f"TRX transfer on {network.name}"):
            key = PrivateKey(bytes.fromhex(private_key))
            owner = key.public_key.to_base58check_address()
            txn = (
                self.get_client(network)
                .trx.transfer(owner, to_address, amount_sun)
                .build()
                .sign(key)
            )
            result = txn.broadcast()
            txid = result["txid"]
        logger.info(f"TRX transfer of {amount} to {to_address} on {network.name}: tx={txid}")
        return txid

    def send_usdt(
        self,
        private_key: str,
        to_address: str,
        amount: str | Decimal,
        network: NetworkConfig,
    ) -> str:
        """Call ``transfer`` on the network's USDT contract.

        Returns the transaction id.
        """
        contract_address = network.require_usdt_contract()
        units = to_base_units(amount, USDT_DECIMALS)
        with _sdk_call(f"USDT transfer on {network.name}"):
            key = PrivateKey(bytes.fromhex(private_key))
            owner = key.public_key.to_base58check_address()
            contract = self.get_client(network).get_contract(contract_address)
            txn = (
                contract.functions.transfer(to_address, units)
                .with_owner(owner)
                .fee_limit(self.fee_limit_sun)
                .build()
                .sign(key)
            )
            result = txn.broadcast()
            txid = result["txid"]
        logger.info(f"USDT transfer of {amount} to {to_address} on {network.name}: tx={txid}")
        return txid
