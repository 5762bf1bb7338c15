"""CLI for the TRON wallet - an interactive menu in the terminal."""

from __future__ import annotations

import logging
import time

import typer
from rich.console import Console
from rich.markup import escape

from tron_wallet.cli.display import render_wallet_info
from tron_wallet.cli.handlers import ActionContext
from tron_wallet.cli.menu import handle_choice, render_menu
from tron_wallet.config import Settings, load_settings
from tron_wallet.errors import WalletError
from tron_wallet.logging_config import setup_logging, shutdown_logging
from tron_wallet.session import Session
from tron_wallet.wallet.gateway import TronGateway

app = typer.Typer(
    name="tron-wallet",
    help="Create and load TRON wallets, check balances, and send TRX or USDT.",
    add_completion=False,
)
console = Console()

logger = logging.getLogger("tron_wallet.cli.app")


def build_context(settings: Settings, console: Console) -> ActionContext:
    """Wire the gateway and network table described by *settings*."""
    gateway = TronGateway(
        api_key=settings.trongrid_api_key,
        usdt_fee_limit=settings.usdt_fee_limit,
    )
    return ActionContext(
        console=console,
        gateway=gateway,
        networks=settings.networks(),
        wallet_dir=settings.wallet_dir,
        ask=console.input,
    )


# Seconds a message stays visible before the screen is cleared again
REDRAW_DELAY = 1.0


class Shell:
    """The read-eval-print loop driving the menu."""

    def __init__(
        self,
        ctx: ActionContext,
        session: Session | None = None,
        *,
        clear_screen: bool = True,
        redraw_delay: float = REDRAW_DELAY,
    ) -> None:
        self.ctx = ctx
        self.session = session or Session.empty()
        self.clear_screen = clear_screen
        self.redraw_delay = redraw_delay

    def _draw(self) -> None:
        if self.clear_screen:
            self.ctx.console.clear()
        wallet = self.session.wallet
        network = self.ctx.network_config(wallet.network) if wallet else None
        render_wallet_info(self.ctx.console, self.session, self.ctx.gateway, network)
        render_menu(self.ctx.console, self.session.wallet_loaded)

    def step(self) -> bool:
        """Run one draw/prompt/dispatch cycle. Returns False on exit."""
        self._draw()
        choice = self.ctx.ask("[green]Select an option (enter number): [/green]")
        outcome = handle_choice(choice, self.session, self.ctx)
        self.session = outcome.session
        if outcome.exit:
            return False
        if outcome.needs_pause:
            self.ctx.ask("[dim]\nPress Enter to continue...[/dim]")
        elif self.clear_screen:
            # Keep refusal and invalid-choice messages on screen for a moment
            time.sleep(self.redraw_delay)
        return True

    def run(self) -> None:
        try:
            while self.step():
                pass
        except (EOFError, KeyboardInterrupt):
            self.ctx.console.print("[cyan]\nbye!\n[/cyan]")


@app.command()
def main() -> None:
    """Run the interactive TRON wallet."""
    console.print("[bold cyan]\nTRON Wallet Tool\n[/bold cyan]")
    try:
        settings = load_settings()
        setup_logging(settings.log_level, settings.log_file)
        logger.info(f"Using wallet directory {settings.wallet_dir}")
        Shell(build_context(settings, console)).run()
    except (WalletError, OSError) as e:
        console.print(f"[red]\nProgram execution failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    app()
