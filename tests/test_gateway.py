"""Tests for the tronpy gateway. The tronpy client is always mocked."""

from __future__ import annotations

import threading
import time
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from tronpy.exceptions import AddressNotFound

from tron_wallet.errors import ConfigurationError, GatewayError, ValidationError
from tron_wallet.wallet.gateway import TronGateway, format_amount, to_base_units
from tron_wallet.wallet.networks import Network

from conftest import OTHER_VALID_ADDRESS, VALID_ADDRESS

PRIVATE_KEY = "0" * 63 + "1"


@pytest.fixture
def client():
    return MagicMock(name="Tron")


@pytest.fixture
def tron(client):
    created = []

    def factory(network):
        created.append(network.name)
        return client

    gw = TronGateway(client_factory=factory)
    gw.created = created
    return gw


class TestAddressValidation:
    def test_accepts_known_address(self):
        assert TronGateway.is_valid_address(VALID_ADDRESS)
        assert TronGateway.is_valid_address(OTHER_VALID_ADDRESS)

    @pytest.mark.parametrize("address", [
        "",
        "T123",
        "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6u",  # last character altered
        "0x" + "ab" * 20,
        "not an address",
    ])
    def test_rejects_malformed(self, address):
        assert TronGateway.is_valid_address(address) is False


class TestAmounts:
    def test_format_amount(self):
        assert format_amount(Decimal("12.500000")) == "12.5"
        assert format_amount(Decimal("0E-6")) == "0"
        assert format_amount(Decimal("1E+2")) == "100"

    def test_to_base_units_rounds_down(self):
        assert to_base_units("1.5", 6) == 1_500_000
        assert to_base_units("0.0000019", 6) == 1

    def test_to_base_units_rejects_dust(self):
        with pytest.raises(ValidationError):
            to_base_units("0.0000001", 6)


class TestClients:
    def test_clients_cached_per_network(self, tron, networks):
        tron.get_client(networks[Network.SHASTA])
        tron.get_client(networks[Network.SHASTA])
        tron.get_client(networks[Network.NILE])
        assert tron.created == ["shasta", "nile"]

    def test_concurrent_first_use_builds_one_client(self, networks):
        built = []

        def slow_factory(network):
            time.sleep(0.05)
            built.append(network.name)
            return MagicMock(name=f"Tron-{len(built)}")

        gw = TronGateway(client_factory=slow_factory)
        shasta = networks[Network.SHASTA]
        clients = []
        workers = [
            threading.Thread(target=lambda: clients.append(gw.get_client(shasta)))
            for _ in range(2)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        assert built == ["shasta"]
        assert clients[0] is clients[1]

    def test_fee_limit_in_sun(self):
        assert TronGateway(usdt_fee_limit=15).fee_limit_sun == 15_000_000


class TestQueries:
    def test_create_account(self, tron, client, networks):
        client.generate_address.return_value = {
            "base58check_address": VALID_ADDRESS,
            "hex_address": "41" + "00" * 20,
            "private_key": PRIVATE_KEY,
            "public_key": "ab" * 64,
        }
        keypair = tron.create_account(networks[Network.SHASTA])
        assert keypair.address == VALID_ADDRESS
        assert keypair.private_key == PRIVATE_KEY

    def test_trx_balance(self, tron, client, networks):
        client.get_account_balance.return_value = Decimal("12.500000")
        assert tron.get_trx_balance(VALID_ADDRESS, networks[Network.MAINNET]) == "12.5"

    def test_unactivated_account_has_zero_balance(self, tron, client, networks):
        client.get_account_balance.side_effect = AddressNotFound("account not found on-chain")
        assert tron.get_trx_balance(VALID_ADDRESS, networks[Network.NILE]) == "0"

    def test_usdt_balance(self, tron, client, networks):
        contract = client.get_contract.return_value
        contract.functions.balanceOf.return_value = 1_500_000
        network = networks[Network.MAINNET]

        assert tron.get_usdt_balance(VALID_ADDRESS, network) == "1.5"
        client.get_contract.assert_called_once_with(network.usdt_contract)
        contract.functions.balanceOf.assert_called_once_with(VALID_ADDRESS)

    def test_usdt_on_unconfigured_network(self, tron, client, networks):
        with pytest.raises(ConfigurationError) as info:
            tron.get_usdt_balance(VALID_ADDRESS, networks[Network.NILE])
        assert info.value.env_var == "NILE_USDT_CONTRACT"
        assert "NILE_USDT_CONTRACT" in str(info.value)
        client.get_contract.assert_not_called()

    def test_contract_metadata(self, tron, client, networks):
        functions = client.get_contract.return_value.functions
        functions.name.return_value = "Tether USD"
        functions.symbol.return_value = "USDT"
        functions.decimals.return_value = 6

        meta = tron.get_contract_metadata(networks[Network.SHASTA])
        assert (meta.name, meta.symbol, meta.decimals) == ("Tether USD", "USDT", 6)

    def test_sdk_errors_become_gateway_errors(self, tron, client, networks):
        boom = RuntimeError("connection reset")
        client.get_account_balance.side_effect = boom
        with pytest.raises(GatewayError) as info:
            tron.get_trx_balance(VALID_ADDRESS, networks[Network.MAINNET])
        assert info.value.__cause__ is boom
        assert "connection reset" in str(info.value)


class TestTransfers:
    def test_send_trx(self, tron, client, networks):
        chain = client.trx.transfer.return_value.build.return_value.sign.return_value
        chain.broadcast.return_value = {"result": True, "txid": "abc123"}

        txid = tron.send_trx(PRIVATE_KEY, OTHER_VALID_ADDRESS, "1.5", networks[Network.SHASTA])

        assert txid == "abc123"
        owner, to, amount = client.trx.transfer.call_args.args
        assert owner.startswith("T")
        assert (to, amount) == (OTHER_VALID_ADDRESS, 1_500_000)

    def test_send_usdt(self, tron, client, networks):
        builder = client.get_contract.return_value.functions.transfer.return_value
        signed = builder.with_owner.return_value.fee_limit.return_value.build.return_value
        signed.sign.return_value.broadcast.return_value = {"result": True, "txid": "def456"}

        txid = tron.send_usdt(PRIVATE_KEY, OTHER_VALID_ADDRESS, "2", networks[Network.MAINNET])

        assert txid == "def456"
        client.get_contract.return_value.functions.transfer.assert_called_once_with(
            OTHER_VALID_ADDRESS, 2_000_000
        )
        builder.with_owner.return_value.fee_limit.assert_called_once_with(30_000_000)

    def test_send_usdt_needs_contract(self, tron, client, networks):
        with pytest.raises(ConfigurationError):
            tron.send_usdt(PRIVATE_KEY, OTHER_VALID_ADDRESS, "2", networks[Network.NILE])
        client.get_contract.assert_not_called()

    def test_broadcast_failure(self, tron, client, networks):
        chain = client.trx.transfer.return_value.build.return_value.sign.return_value
        chain.broadcast.side_effect = ValueError("BANDWITH_ERROR")
        with pytest.raises(GatewayError):
            tron.send_trx(PRIVATE_KEY, OTHER_VALID_ADDRESS, "1", networks[Network.SHASTA])
