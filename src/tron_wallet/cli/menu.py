"""Main menu: option table, wallet gating, and choice dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from tron_wallet.cli import handlers
from tron_wallet.cli.handlers import ActionContext, Handler
from tron_wallet.session import Session

logger = logging.getLogger("tron_wallet.cli.menu")

EXIT_KEY = "0"


@dataclass(frozen=True)
class MenuOption:
    key: str
    label: str
    handler: Handler
    requires_wallet: bool = False
    needs_pause: bool = True

    def available(self, wallet_loaded: bool) -> bool:
        return wallet_loaded or not self.requires_wallet


MENU_OPTIONS: tuple[MenuOption, ...] = (
    MenuOption("1", "Create New Wallet", handlers.create_wallet),
    MenuOption("2", "Load Wallet", handlers.load_wallet),
    MenuOption("3", "Validate Address", handlers.validate_address),
    MenuOption("4", "Transfer TRX", handlers.transfer_trx, requires_wallet=True),
    MenuOption("5", "Transfer USDT", handlers.transfer_usdt, requires_wallet=True),
    MenuOption("6", "Show Faucet URL", handlers.show_faucet, requires_wallet=True),
)


@dataclass(frozen=True)
class MenuOutcome:
    """What the loop should do after one choice."""

    session: Session
    needs_pause: bool = False
    exit: bool = False


def available_options(wallet_loaded: bool) -> list[MenuOption]:
    return [opt for opt in MENU_OPTIONS if opt.available(wallet_loaded)]


def valid_keys(wallet_loaded: bool) -> list[str]:
    """Keys accepted in the current state, excluding the exit key."""
    return [opt.key for opt in available_options(wallet_loaded)]


def render_menu(console: Console, wallet_loaded: bool) -> None:
    console.print("[bold cyan]Menu:[/bold cyan]")
    for opt in available_options(wallet_loaded):
        console.print(f"  {opt.key}. {opt.label}")
    console.print(f"  {EXIT_KEY}. Exit")
    console.print()


def handle_choice(choice: str, session: Session, ctx: ActionContext) -> MenuOutcome:
    """Dispatch one menu choice and return the resulting session.

    Options that need a wallet are refused while none is loaded, without
    reaching their handler.
    """
    choice = choice.strip()
    if choice == EXIT_KEY:
        ctx.console.print("[cyan]\nbye!\n[/cyan]")
        return MenuOutcome(session=session, exit=True)

    wallet_loaded = session.wallet_loaded
    for opt in MENU_OPTIONS:
        if opt.key != choice:
            continue
        if not opt.available(wallet_loaded):
            logger.debug(f"Refused '{opt.label}': no wallet loaded")
            ctx.console.print("[yellow]\nPlease load a wallet first[/yellow]")
            break
        logger.debug(f"Running menu action '{opt.label}'")
        try:
            new_session = opt.handler(ctx, session)
        except EOFError:
            raise
        except Exception as e:
            logger.exception(f"Menu action '{opt.label}' failed")
            ctx.console.print(f"[red]{opt.label} failed: {escape(str(e))}[/red]")
            new_session = session
        return MenuOutcome(session=new_session, needs_pause=opt.needs_pause)

    keys = ", ".join(valid_keys(wallet_loaded))
    ctx.console.print(
        f"[red]\nInvalid choice '{escape(choice)}', please enter {EXIT_KEY} or {keys}[/red]"
    )
    return MenuOutcome(session=session)
