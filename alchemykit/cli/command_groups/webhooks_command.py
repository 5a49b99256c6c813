"""Webhook command group."""

from __future__ import annotations

from datetime import datetime, timezone

import typer
from rich.console import Console
from rich.table import Table

from alchemykit.cli.shared.client_utils import run_with_client


def _created(ms: int) -> str:
    if not ms:
        return "-"
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def register_webhooks_commands(app: typer.Typer, console: Console) -> None:
    """Register webhooks command group."""
    webhooks_app = typer.Typer(help="Manage Notify webhooks (needs ALCHEMY_WEBHOOK_AUTH_TOKEN)")
    app.add_typer(webhooks_app, name="webhooks")

    @webhooks_app.command("list")
    def webhooks_list() -> None:
        """List the team's webhooks."""
        hooks = run_with_client(console, lambda c: c.webhooks.get_all_webhooks())
        if not hooks:
            console.print("[yellow]No webhooks configured[/yellow]")
            return
        table = Table(title="Webhooks")
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Network")
        table.add_column("URL", style="cyan")
        table.add_column("Active")
        table.add_column("Created")
        for hook in hooks:
            table.add_row(
                hook.id,
                hook.webhook_type,
                hook.network,
                hook.webhook_url,
                "[green]✓[/green]" if hook.is_active else "✗",
                _created(hook.time_created),
            )
        console.print(table)

    @webhooks_app.command("addresses")
    def webhooks_addresses(
        webhook_id: str = typer.Argument(..., help="Webhook id"),
    ) -> None:
        """List every address tracked by an address-activity webhook."""
        addresses = run_with_client(console, lambda c: c.webhooks.get_all_webhook_addresses(webhook_id))
        if not addresses:
            console.print("[yellow]No addresses tracked[/yellow]")
            return
        for address in addresses:
            console.print(address)
        console.print(f"[dim]{len(addresses)} addresses[/dim]")
