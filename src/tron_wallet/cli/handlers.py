"""Menu actions.

Each handler takes the action context and the current session and returns
the session the loop should continue with: a new one after a successful load
or create, the unchanged one otherwise. Wallet and I/O errors are reported
here; anything else is left to the menu.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Mapping

from rich.console import Console
from rich.markup import escape

from tron_wallet.cli import display
from tron_wallet.errors import ValidationError, WalletError
from tron_wallet.session import Session
from tron_wallet.wallet import store
from tron_wallet.wallet.gateway import TronGateway
from tron_wallet.wallet.networks import Network, NetworkConfig

logger = logging.getLogger("tron_wallet.cli.handlers")

# Menu order of the network picker
NETWORK_CHOICES: dict[str, Network] = {
    "1": Network.MAINNET,
    "2": Network.SHASTA,
    "3": Network.NILE,
}


@dataclass
class ActionContext:
    """Collaborators shared by every menu action."""

    console: Console
    gateway: TronGateway
    networks: Mapping[Network, NetworkConfig]
    wallet_dir: Path
    ask: Callable[[str], str]

    def network_config(self, network: Network) -> NetworkConfig:
        return self.networks[network]


Handler = Callable[[ActionContext, Session], Session]


# ------------------------------------------------------------------
# Input helpers
# ------------------------------------------------------------------


def parse_amount(raw: str) -> Decimal:
    """Parse a transfer amount; it must be a finite number above zero."""
    text = raw.strip()
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount '{text}'") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"Invalid amount '{text}'")
    return value


def check_recipient(gateway: TronGateway, raw: str) -> str:
    address = raw.strip()
    if not gateway.is_valid_address(address):
        raise ValidationError(f"Invalid recipient address '{address}'")
    return address


def select_network(ctx: ActionContext) -> Network:
    """Prompt until one of the listed networks is chosen."""
    ctx.console.print("[bold cyan]Select Network:[/bold cyan]")
    for key, network in NETWORK_CHOICES.items():
        ctx.console.print(f"  {key}. {ctx.network_config(network).label}")
    ctx.console.print()

    while True:
        choice = ctx.ask("[green]Select network (enter number): [/green]").strip()
        if choice in NETWORK_CHOICES:
            return NETWORK_CHOICES[choice]
        ctx.console.print("[red]Invalid choice, please enter 1-3[/red]")


# ------------------------------------------------------------------
# Wallet lifecycle
# ------------------------------------------------------------------


def create_wallet(ctx: ActionContext, session: Session) -> Session:
    ctx.console.print("\n[cyan]Action: Create New Wallet[/cyan]\n")

    try:
        network = select_network(ctx)
        ctx.console.print()
        name = ctx.ask("[green]Enter wallet name: [/green]").strip()
        if not name:
            ctx.console.print("[red]Wallet name cannot be empty[/red]")
            return session

        wallet, filename = store.create_wallet(
            ctx.wallet_dir, ctx.network_config(network), name, ctx.gateway
        )
    except (WalletError, OSError) as e:
        logger.debug("Wallet creation failed", exc_info=True)
        ctx.console.print(f"[red]Failed to create wallet: {escape(str(e))}[/red]")
        return session

    ctx.console.print("[green]New wallet created and loaded[/green]")
    ctx.console.print(
        "[yellow]WARNING: Keep your private key safe, it cannot be recovered if lost![/yellow]"
    )
    ctx.console.print(f"\n[dim]File: {escape(filename)}[/dim]")
    ctx.console.print(f"[dim]Address: {wallet.address}[/dim]")
    ctx.console.print(f"[dim]Network: {wallet.network.value}[/dim]")
    ctx.console.print(f"[dim]Created: {wallet.created_at.isoformat()}[/dim]")
    return Session.of(wallet, filename)


def load_wallet(ctx: ActionContext, session: Session) -> Session:
    ctx.console.print("\n[cyan]Action: Load Wallet[/cyan]\n")

    try:
        if session.wallet is not None:
            ctx.console.print("[yellow]Current wallet is loaded:[/yellow]")
            ctx.console.print(f"[dim]  Address: {session.wallet.address}[/dim]")
            ctx.console.print(f"[dim]  Network: {session.wallet.network.value}[/dim]\n")

        wallets = store.list_wallets(ctx.wallet_dir)
        if not wallets:
            ctx.console.print("[yellow]No wallets found in the wallets directory[/yellow]")
            return session

        ctx.console.print("Available wallets:")
        for index, filename in enumerate(wallets, start=1):
            ctx.console.print(f"[dim]  {index}. {escape(filename)}[/dim]")
        ctx.console.print()

        choice = ctx.ask(
            "[green]Select wallet to load (enter number or 0 to cancel): [/green]"
        ).strip()
        if choice == "0":
            ctx.console.print("[blue]Cancelled[/blue]")
            return session
        if not choice.isdigit() or not 1 <= int(choice) <= len(wallets):
            ctx.console.print("[red]Invalid choice[/red]")
            return session

        selected = wallets[int(choice) - 1]
        wallet = store.read_wallet(ctx.wallet_dir, selected)
    except (WalletError, OSError) as e:
        logger.debug("Wallet load failed", exc_info=True)
        ctx.console.print(f"[red]Failed to load wallet: {escape(str(e))}[/red]")
        return session

    ctx.console.print("[green]Wallet loaded successfully[/green]")
    ctx.console.print(f"[dim]Address: {wallet.address}[/dim]")
    ctx.console.print(f"[dim]Network: {wallet.network.value}[/dim]")
    return Session.of(wallet, selected)


# ------------------------------------------------------------------
# Address tools
# ------------------------------------------------------------------


def validate_address(ctx: ActionContext, session: Session) -> Session:
    ctx.console.print("\n[cyan]Action: Validate Address[/cyan]\n")

    address = ctx.ask("Enter address to validate: ").strip()
    if ctx.gateway.is_valid_address(address):
        ctx.console.print(f"[green]{escape(address)} is a valid TRON address[/green]")
    else:
        ctx.console.print(f"[red]{escape(address)} is not a valid TRON address[/red]")
    return session


def show_faucet(ctx: ActionContext, session: Session) -> Session:
    ctx.console.print("\n[cyan]Action: Show Faucet URL[/cyan]\n")

    if session.wallet is None:
        ctx.console.print("[yellow]Please load a wallet first[/yellow]")
        return session

    network = ctx.network_config(session.wallet.network)
    if network.faucet_url:
        ctx.console.print(f"Faucet URL: {network.faucet_url}")
        ctx.console.print(
            "[dim]Instructions: Copy your address to the faucet website to claim test TRX[/dim]"
        )
    else:
        ctx.console.print(
            f"[yellow]No faucet on {network.name}, you need to purchase real TRX[/yellow]"
        )
    return session


# ------------------------------------------------------------------
# Transfers
# ------------------------------------------------------------------


def _transfer(currency: str, ctx: ActionContext, session: Session) -> Session:
    ctx.console.print(f"\n[cyan]Action: Transfer {currency}[/cyan]\n")

    wallet = session.wallet
    if wallet is None:
        ctx.console.print("[yellow]Please load a wallet first[/yellow]")
        return session

    try:
        to_address = check_recipient(ctx.gateway, ctx.ask("Enter recipient address: "))
    except ValidationError:
        ctx.console.print("[red]Invalid recipient address[/red]")
        return session

    raw_amount = ctx.ask(f"Enter amount ({currency}): ").strip()
    try:
        parse_amount(raw_amount)
    except ValidationError:
        ctx.console.print("[red]Invalid amount[/red]")
        return session

    confirm = ctx.ask(
        f"[yellow]\nTransfer {escape(raw_amount)} {currency} to {to_address}? (y/N): [/yellow]"
    )
    if confirm.strip() != "y":
        ctx.console.print("[blue]Cancelled[/blue]")
        return session

    network = ctx.network_config(wallet.network)
    send = ctx.gateway.send_trx if currency == "TRX" else ctx.gateway.send_usdt
    try:
        txid = send(wallet.private_key, to_address, raw_amount, network)
    except (WalletError, OSError) as e:
        logger.debug(f"{currency} transfer failed", exc_info=True)
        ctx.console.print(f"[red]Transfer failed: {escape(str(e))}[/red]")
        return session

    display.render_transfer_result(
        ctx.console, currency, raw_amount, to_address, network, txid
    )
    return session


def transfer_trx(ctx: ActionContext, session: Session) -> Session:
    return _transfer("TRX", ctx, session)


def transfer_usdt(ctx: ActionContext, session: Session) -> Session:
    return _transfer("USDT", ctx, session)
