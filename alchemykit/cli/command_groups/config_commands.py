"""Config command group."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from alchemykit.cli.shared.client_utils import resolve_config
from alchemykit.config.loader import get_config_path, save_config
from alchemykit.config.schema import AlchemyConfig
from alchemykit.network import SupportedNetworks
from alchemykit.utils.exceptions import sanitize_error_message

_SECRET_FIELDS = {"api_key", "webhook_auth_token"}


def _mask(value: str | None) -> str:
    if not value:
        return "[dim]not set[/dim]"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…{value[-4:]}"


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register config command group."""
    config_app = typer.Typer(help="Show or create ~/.alchemykit/config.json")
    app.add_typer(config_app, name="config")

    @config_app.command("show")
    def config_show() -> None:
        """Show the effective configuration (secrets masked)."""
        config = resolve_config(console)
        path = get_config_path()
        table = Table(title=f"Configuration ({path if path.exists() else 'environment/defaults'})")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key, value in config.model_dump().items():
            if key in _SECRET_FIELDS:
                shown = _mask(value)
            else:
                shown = "[dim]-[/dim]" if value is None else sanitize_error_message(str(value))
            table.add_row(key, shown)
        console.print(table)

    @config_app.command("init")
    def config_init(
        api_key: str = typer.Option("", "--key", help="API key to store"),
        network: str = typer.Option("eth-mainnet", "--default-network", help="Default network"),
        force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
    ) -> None:
        """Write a config file with defaults."""
        path = get_config_path()
        if path.exists() and not force:
            console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
            raise typer.Exit(1)
        if SupportedNetworks.get_network(network) is None:
            raise typer.BadParameter(f"unknown network: {network}")
        # model_validate skips the ALCHEMY_* environment, so the file holds only what was asked for.
        config = AlchemyConfig.model_validate({"api_key": api_key, "network": network})
        saved = save_config(config, path)
        console.print(f"[green]✓[/green] Wrote {saved}")
        if not api_key:
            console.print("[dim]No API key stored; set ALCHEMY_API_KEY or edit the file.[/dim]")
