"""CLI commands for alchemykit.

The root app carries the shared options (--network, --api-key, --verbose) and
the node commands; data, webhook and config commands live in command_groups.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from alchemykit import __logo__, __version__
from alchemykit.cli.command_groups.config_commands import register_config_commands
from alchemykit.cli.command_groups.data_commands import register_data_commands
from alchemykit.cli.command_groups.webhooks_command import register_webhooks_commands
from alchemykit.cli.shared.client_utils import cli_state, run_with_client
from alchemykit.cli.shared.logging_utils import configure_console_logging
from alchemykit.network import SupportedNetworks
from alchemykit.wallet.client import format_units, format_wei

app = typer.Typer(
    name="alchemykit",
    help=f"{__logo__} alchemykit - Alchemy node, data and webhook APIs from the terminal",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} alchemykit v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    network: Optional[str] = typer.Option(None, "--network", "-n", help="Network slug or alias, e.g. base-mainnet"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key (defaults to ALCHEMY_API_KEY or the config file)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request to stderr"),
    log_file: bool = typer.Option(False, "--log-file", help="Also log to ~/.alchemykit/logs/alchemykit.log"),
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True),
) -> None:
    """alchemykit - Alchemy API client."""
    cli_state.update(network=network, api_key=api_key, verbose=verbose)
    configure_console_logging(verbose, log_file)


@app.command("networks")
def networks_command(
    mainnet_only: bool = typer.Option(False, "--mainnet", help="Hide testnets"),
) -> None:
    """List supported networks."""
    rows = SupportedNetworks.mainnet_networks() if mainnet_only else SupportedNetworks.all_networks()
    table = Table(title="Supported Networks")
    table.add_column("Slug", style="cyan")
    table.add_column("Chain ID", justify="right")
    table.add_column("Name")
    table.add_column("Currency")
    table.add_column("Testnet")
    for network in rows:
        table.add_row(
            network.slug,
            str(network.chain_id),
            network.name,
            network.native_currency,
            "[yellow]yes[/yellow]" if network.is_testnet else "no",
        )
    console.print(table)


@app.command("block-number")
def block_number_command() -> None:
    """Print the latest block number."""
    number = run_with_client(console, lambda c: c.node.block_number())
    console.print(number)


@app.command("chain-id")
def chain_id_command() -> None:
    """Print the chain id reported by the node."""
    value = run_with_client(console, lambda c: c.node.chain_id())
    console.print(value)


@app.command("gas-price")
def gas_price_command() -> None:
    """Print the current gas price."""
    wei = run_with_client(console, lambda c: c.node.gas_price())
    console.print(f"{wei} wei ({format_units(wei, 9)} gwei)")


@app.command("block")
def block_command(
    block: str = typer.Argument("latest", help="Block number, hex number or tag"),
    full: bool = typer.Option(False, "--full", help="Include full transaction objects"),
) -> None:
    """Show a block header summary."""
    result = run_with_client(console, lambda c: c.node.get_block_by_number(block, full))
    if result is None:
        console.print(f"[yellow]Block {block} not found[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Block {result.number}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Hash", result.hash or "-")
    table.add_row("Parent", result.parent_hash)
    table.add_row("Timestamp", str(result.timestamp))
    table.add_row("Miner", result.miner or "-")
    table.add_row("Gas used", f"{result.gas_used} / {result.gas_limit}")
    if result.base_fee_per_gas is not None:
        table.add_row("Base fee", f"{format_units(result.base_fee_per_gas, 9)} gwei")
    table.add_row("Transactions", str(result.transaction_count))
    console.print(table)


@app.command("balance")
def balance_command(
    address: str = typer.Argument(..., help="Account address (0x...)"),
    block: str = typer.Option("latest", "--block", "-b", help="Block number or tag"),
) -> None:
    """Show the native balance of an address."""

    async def fetch(client):
        raw = await client.node.get_balance(address, block)
        return client.network.native_currency, raw

    currency, raw = run_with_client(console, fetch)
    console.print(f"[cyan]{address}[/cyan]")
    console.print(f"{format_wei(raw)} {currency}  [dim]({raw} wei)[/dim]")


register_data_commands(app, console)
register_webhooks_commands(app, console)
register_config_commands(app, console)


if __name__ == "__main__":
    app()
