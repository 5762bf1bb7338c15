"""
Shared pytest fixtures for the tron-wallet test suite.
"""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest
from rich.console import Console

from tron_wallet.cli.handlers import ActionContext
from tron_wallet.errors import GatewayError
from tron_wallet.wallet.gateway import TronGateway
from tron_wallet.wallet.models import ContractMetadata, Keypair, WalletRecord
from tron_wallet.wallet.networks import Network, build_networks

VALID_ADDRESS = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
OTHER_VALID_ADDRESS = "TG3XXyExBkPp9nzdajDZsozEu4BkaSJozs"


class FakeGateway:
    """In-memory stand-in for TronGateway that records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.keypairs = [
            Keypair(address=f"TAddr{i}", private_key=f"{i:064x}", public_key=f"pub{i}")
            for i in range(1, 10)
        ]
        self.trx_balance: str | Exception = "12.5"
        self.usdt_balance: str | Exception = "3"
        self.metadata: ContractMetadata | Exception = ContractMetadata(
            name="Tether USD", symbol="USDT", decimals=6
        )
        self.send_error: Exception | None = None
        self.create_error: Exception | None = None

    def create_account(self, network):
        self.calls.append(("create_account", network.name))
        if self.create_error:
            raise self.create_error
        return self.keypairs.pop(0)

    def is_valid_address(self, address):
        return TronGateway.is_valid_address(address)

    def get_trx_balance(self, address, network):
        self.calls.append(("get_trx_balance", address, network.name))
        if isinstance(self.trx_balance, Exception):
            raise self.trx_balance
        return self.trx_balance

    def get_usdt_balance(self, address, network):
        self.calls.append(("get_usdt_balance", address, network.name))
        network.require_usdt_contract()
        if isinstance(self.usdt_balance, Exception):
            raise self.usdt_balance
        return self.usdt_balance

    def get_contract_metadata(self, network):
        self.calls.append(("get_contract_metadata", network.name))
        network.require_usdt_contract()
        if isinstance(self.metadata, Exception):
            raise self.metadata
        return self.metadata

    def send_trx(self, private_key, to_address, amount, network):
        self.calls.append(("send_trx", private_key, to_address, amount, network.name))
        if self.send_error:
            raise self.send_error
        return "trx-txid-1"

    def send_usdt(self, private_key, to_address, amount, network):
        self.calls.append(("send_usdt", private_key, to_address, amount, network.name))
        if self.send_error:
            raise self.send_error
        return "usdt-txid-1"

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


class ScriptedInput:
    """Answers prompts from a fixed script, then raises EOFError."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def feed(self, *answers: str) -> None:
        self.answers.extend(answers)


@pytest.fixture
def console():
    """Plain-text console capturing output in memory."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


@pytest.fixture
def output(console):
    return lambda: console.file.getvalue()


@pytest.fixture
def networks():
    return build_networks()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def answers():
    return ScriptedInput()


@pytest.fixture
def wallet_dir(tmp_path):
    return tmp_path / "wallets"


@pytest.fixture
def ctx(console, gateway, networks, wallet_dir, answers):
    return ActionContext(
        console=console,
        gateway=gateway,
        networks=networks,
        wallet_dir=wallet_dir,
        ask=answers,
    )


@pytest.fixture
def shasta_wallet():
    created = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    return WalletRecord(
        address=VALID_ADDRESS,
        private_key="1" * 64,
        public_key="04" + "ab" * 64,
        network=Network.SHASTA,
        created_at=created,
        last_updated=created,
    )


@pytest.fixture
def gateway_error():
    return GatewayError("RPC endpoint unreachable")
