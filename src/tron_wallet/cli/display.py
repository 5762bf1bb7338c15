"""Rendering of the wallet info panel, balances, and transfer receipts."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tron_wallet.errors import WalletError
from tron_wallet.session import Session
from tron_wallet.wallet.models import BalanceInfo, WalletRecord

if TYPE_CHECKING:
    from tron_wallet.wallet.gateway import TronGateway
    from tron_wallet.wallet.networks import NetworkConfig

logger = logging.getLogger("tron_wallet.cli.display")


async def fetch_balances(
    gateway: TronGateway,
    wallet: WalletRecord,
    network: NetworkConfig,
) -> BalanceInfo:
    """Query TRX and USDT balances in parallel.

    The two queries run in worker threads. A failure in one is recorded on
    the result and does not affect the other.
    """
    trx, usdt = await asyncio.gather(
        asyncio.to_thread(gateway.get_trx_balance, wallet.address, network),
        asyncio.to_thread(gateway.get_usdt_balance, wallet.address, network),
        return_exceptions=True,
    )
    info = BalanceInfo()
    if isinstance(trx, BaseException):
        logger.debug(f"TRX balance query failed: {trx}")
        info.trx_error = str(trx)
    else:
        info.trx = trx
    if isinstance(usdt, BaseException):
        logger.debug(f"USDT balance query failed: {usdt}")
        info.usdt_error = str(usdt)
    else:
        info.usdt = usdt
    return info


def query_balances(
    gateway: TronGateway,
    wallet: WalletRecord,
    network: NetworkConfig,
) -> BalanceInfo:
    """Run :func:`fetch_balances` synchronously."""
    return asyncio.run(fetch_balances(gateway, wallet, network))


def _balance_cell(value: str | None, error: str | None) -> str:
    if error is not None:
        return f"[yellow](Failed to query balance: {escape(error)})[/yellow]"
    return value or "0"


def render_wallet_info(
    console: Console,
    session: Session,
    gateway: TronGateway,
    network: NetworkConfig | None,
) -> None:
    """Draw the wallet panel and the USDT contract panel above the menu."""
    wallet = session.wallet
    if wallet is None or network is None:
        console.print("[yellow]No wallet loaded[/yellow]\n")
        return

    balances = query_balances(gateway, wallet, network)

    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    if session.filename:
        table.add_row("File", escape(session.filename))
    table.add_row("Address", f"[cyan]{wallet.address}[/cyan]")
    table.add_row("Network", wallet.network.value)
    table.add_row("Created", wallet.created_at.isoformat())
    table.add_row("Explorer", network.address_url(wallet.address))
    table.add_row("TRX Balance", _balance_cell(balances.trx, balances.trx_error))
    table.add_row("USDT Balance", _balance_cell(balances.usdt, balances.usdt_error))
    console.print(Panel(table, title="Wallet", expand=False))

    render_contract_info(console, gateway, network)


def render_contract_info(
    console: Console,
    gateway: TronGateway,
    network: NetworkConfig,
) -> None:
    try:
        meta = gateway.get_contract_metadata(network)
    except WalletError as e:
        console.print(f"[yellow]USDT Contract (Failed to verify: {escape(str(e))})[/yellow]\n")
        return

    console.print(Panel(
        f"Name:     {escape(meta.name)}\n"
        f"Symbol:   {escape(meta.symbol)}\n"
        f"Decimals: {meta.decimals}",
        title="USDT Contract",
        expand=False,
    ))


def render_transfer_result(
    console: Console,
    currency: str,
    amount: str,
    to_address: str,
    network: NetworkConfig,
    txid: str,
) -> None:
    console.print(Panel(
        f"[bold green]Transfer successful[/bold green]\n\n"
        f"Currency:       {currency}\n"
        f"Amount:         {escape(amount)}\n"
        f"To:             {to_address}\n"
        f"Network:        {network.name}\n"
        f"Transaction ID: [cyan]{txid}[/cyan]\n"
        f"Explorer:       {network.transaction_url(txid)}",
        title="Transaction Sent",
        expand=False,
    ))
