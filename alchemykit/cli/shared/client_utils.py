"""Build an Alchemy client from CLI options, the config file and the environment."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from alchemykit.client import Alchemy
from alchemykit.config.loader import load_config
from alchemykit.config.schema import AlchemyConfig
from alchemykit.utils.exceptions import AlchemyError, ConfigError

T = TypeVar("T")

# Filled in by the root callback; per-command options would be repetitive.
cli_state: dict[str, Any] = {"network": None, "api_key": None, "verbose": False}


def resolve_config(console: Console) -> AlchemyConfig:
    try:
        config = load_config()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    updates = {k: cli_state[k] for k in ("network", "api_key") if cli_state.get(k)}
    if cli_state.get("verbose"):
        updates["log_requests"] = True
    return config.model_copy(update=updates) if updates else config


def make_client(console: Console) -> Alchemy:
    config = resolve_config(console)
    try:
        return Alchemy(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        if e.field == "api_key":
            console.print("Set ALCHEMY_API_KEY, pass --api-key, or run [cyan]alchemykit config init[/cyan].")
        raise typer.Exit(1)


def run_with_client(console: Console, fn: Callable[[Alchemy], Awaitable[T]]) -> T:
    """Run ``fn`` against a fresh client, turning provider errors into a clean exit."""
    client = make_client(console)

    async def _run() -> T:
        async with client:
            return await fn(client)

    try:
        return asyncio.run(_run())
    except AlchemyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
