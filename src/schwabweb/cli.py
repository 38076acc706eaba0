import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.table import Table

from schwabweb.core.config import Config
from schwabweb.infrastructure.brokers.schwab import SchwabClient
from schwabweb.shared.exceptions import ConfigurationError, SchwabError


def load_env_files() -> None:
    """Load .env from the working directory or its parents"""
    for candidate in (Path(".env"), Path("../.env"), Path("../../.env")):
        if candidate.exists():
            load_dotenv(candidate)
            logger.debug(f"Loaded environment from {candidate}")
            return


class CommandDispatcher:
    """Dispatches CLI commands to the Schwab client"""

    USAGE = (
        "Usage: schwabweb positions | "
        "schwabweb trade TICKER Buy|Sell QTY ACCOUNT [--live]"
    )

    def __init__(
        self, client: SchwabClient, config: Config, console: Console | None = None
    ) -> None:
        self.client = client
        self.config = config
        self.console = console or Console()
        self._handlers = {
            "positions": self._handle_positions,
            "trade": self._handle_trade,
        }

    async def dispatch(self, argv: list[str]) -> int:
        """Parse and execute command

        Args:
            argv: Command line arguments (sys.argv)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        if len(argv) < 2:
            logger.error(self.USAGE)
            return 1

        handler = self._handlers.get(argv[1])
        if handler is None:
            logger.error(f"Unknown command: {argv[1]}")
            logger.error(self.USAGE)
            return 1

        return await handler(argv)

    async def _login(self) -> None:
        account = self.config.primary_account
        logger.info(f"Attempting login for user: {account.username}")
        await self.client.login(
            account.username, account.password, account.totp_secret
        )
        self.console.print("[green]Login successful[/green]")

    async def _handle_positions(self, argv: list[str]) -> int:
        """Handle positions command"""
        await self._login()
        accounts = await self.client.get_account_info()

        for account_id, account in accounts.items():
            totals = account.totals
            self.console.print(
                f"[bold cyan]Account {account_id}[/bold cyan]  "
                f"market value ${totals.market_value:,.2f}  "
                f"cash ${totals.cash_investments:,.2f}  "
                f"account value ${totals.account_value:,.2f}"
            )
            table = Table()
            table.add_column("Group")
            table.add_column("Symbol")
            table.add_column("Description")
            table.add_column("Quantity", justify="right")
            table.add_column("Market Value", justify="right")
            table.add_column("Cost Basis", justify="right")
            for group in account.grouped_positions:
                for row in group.holdings_rows:
                    table.add_row(
                        group.group_name,
                        row.symbol.symbol,
                        row.description,
                        f"{row.qty.qty:g}",
                        f"${row.market_value.val:,.2f}",
                        f"${row.cost_basis.cost_basis:,.2f}",
                    )
            self.console.print(table)
        return 0

    async def _handle_trade(self, argv: list[str]) -> int:
        """Handle trade command"""
        args = [a for a in argv[2:] if a != "--live"]
        live = "--live" in argv[2:]
        if len(args) != 4:
            logger.error(self.USAGE)
            return 1

        ticker, side, raw_qty, account_id = args
        try:
            qty = float(raw_qty)
        except ValueError:
            logger.error(f"Quantity must be a number, got {raw_qty!r}")
            return 1

        await self._login()
        messages, success = await self.client.trade(
            ticker.upper(), side, qty, account_id, dry_run=not live
        )
        for message in messages:
            self.console.print(f"  {message}")
        mode = "Executed" if live else "Verified (dry run)"
        if success:
            self.console.print(f"[green]{mode}: {side} {qty:g} {ticker.upper()}[/green]")
            return 0
        self.console.print(f"[red]Order rejected: {side} {qty:g} {ticker.upper()}[/red]")
        return 1


def main() -> int:
    """CLI entry point

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    load_env_files()

    try:
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if config.debug else "INFO")
    logger.add(
        "logs/schwabweb_{time}.log",
        rotation="1 day",
        retention="30 days",
        compression="gz",
        level="DEBUG",
    )

    async def run() -> int:
        async with SchwabClient.from_config(config) as client:
            dispatcher = CommandDispatcher(client, config)
            try:
                return await dispatcher.dispatch(sys.argv)
            except SchwabError as e:
                logger.error(f"{type(e).__name__}: {e}")
                return 1

    try:
        return asyncio.run(run())
    except KeyboardInterrupt:
        logger.warning("Stopped manually.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
