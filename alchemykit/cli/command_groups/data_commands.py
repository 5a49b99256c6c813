"""Token, transfer, NFT and wallet summary commands."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from alchemykit.cli.shared.client_utils import run_with_client
from alchemykit.data.models import AssetTransferCategory, AssetTransfersParams, SortOrder
from alchemykit.wallet.client import NFTQueryOptions, format_wei


def _short(value: Optional[str], width: int = 12) -> str:
    if not value:
        return "-"
    if len(value) <= width + 2:
        return value
    return f"{value[:8]}…{value[-4:]}"


def register_data_commands(app: typer.Typer, console: Console) -> None:
    """Register data API commands (tokens, transfers, nfts, summary)."""

    @app.command("tokens")
    def tokens_command(
        address: str = typer.Argument(..., help="Owner address"),
        with_metadata: bool = typer.Option(True, "--metadata/--no-metadata", help="Look up symbol and decimals"),
        show_zero: bool = typer.Option(False, "--zero", help="Include zero balances"),
    ) -> None:
        """List ERC-20 balances for an address."""

        async def fetch(client):
            if with_metadata:
                return await client.wallet.get_token_balances_with_metadata(address)
            return await client.wallet.get_token_balances(address)

        result = run_with_client(console, fetch)
        table = Table(title=f"Token balances for {result.address}")
        table.add_column("Contract", style="cyan")
        table.add_column("Symbol")
        table.add_column("Balance", justify="right")
        shown = 0
        for info in result.balances:
            if info.error:
                table.add_row(info.contract_address, "-", f"[red]{info.error}[/red]")
                shown += 1
                continue
            if not info.balance and not show_zero:
                continue
            symbol = info.metadata.symbol if info.metadata and info.metadata.symbol else "?"
            table.add_row(info.contract_address, symbol, info.balance_formatted or str(info.balance or 0))
            shown += 1
        if not shown:
            console.print("[yellow]No token balances found[/yellow]")
            return
        console.print(table)
        if result.page_key:
            console.print("[dim]More balances available; showing the first page only.[/dim]")

    @app.command("transfers")
    def transfers_command(
        address: str = typer.Argument(..., help="Address to inspect"),
        direction: str = typer.Option("from", "--direction", "-d", help="from or to"),
        category: Optional[List[AssetTransferCategory]] = typer.Option(
            None, "--category", "-c", help="Transfer category (repeatable)"
        ),
        limit: int = typer.Option(20, "--limit", "-l", help="Maximum transfers to show"),
        from_block: str = typer.Option("0x0", "--from-block", help="First block"),
        desc: bool = typer.Option(True, "--desc/--asc", help="Newest first"),
    ) -> None:
        """Show recent asset transfers from or to an address."""
        if direction not in ("from", "to"):
            raise typer.BadParameter("direction must be 'from' or 'to'")
        filters = {f"{direction}_address": address}
        if category:
            filters["category"] = list(category)
        try:
            params = AssetTransfersParams(
                from_block=from_block,
                to_block="latest",
                order=SortOrder.DESC if desc else SortOrder.ASC,
                with_metadata=True,
                max_count=min(limit, 1000),
                **filters,
            )
        except ValueError as e:
            raise typer.BadParameter(str(e))

        transfers = run_with_client(console, lambda c: c.data.iter_asset_transfers(params).collect_up_to(limit))
        if not transfers:
            console.print("[yellow]No transfers found[/yellow]")
            return
        table = Table(title=f"Transfers {direction} {address}")
        table.add_column("Block", justify="right")
        table.add_column("Category")
        table.add_column("From", style="cyan")
        table.add_column("To", style="cyan")
        table.add_column("Value", justify="right")
        table.add_column("Asset")
        for t in transfers:
            value = "-" if t.value is None else f"{t.value:g}"
            table.add_row(str(t.block_number), t.category, _short(t.from_), _short(t.to), value, t.asset or "-")
        console.print(table)

    @app.command("nfts")
    def nfts_command(
        address: str = typer.Argument(..., help="Owner address"),
        limit: int = typer.Option(50, "--limit", "-l", help="Maximum NFTs to show"),
        include_spam: bool = typer.Option(False, "--include-spam", help="Do not filter spam contracts"),
    ) -> None:
        """List NFTs owned by an address."""
        options = NFTQueryOptions(exclude_spam=not include_spam, page_size=min(limit, 100))

        async def fetch(client):
            iterator = client.data.iter_nfts_for_owner(options.to_params(address))
            items = await iterator.collect_up_to(limit)
            return items, iterator.total_count

        nfts, total = run_with_client(console, fetch)
        if not nfts:
            console.print("[yellow]No NFTs found[/yellow]")
            return
        table = Table(title=f"NFTs owned by {address} ({total if total is not None else len(nfts)} total)")
        table.add_column("Contract", style="cyan")
        table.add_column("Token ID", justify="right")
        table.add_column("Type")
        table.add_column("Name")
        for nft in nfts:
            table.add_row(_short(nft.contract.address), _short(nft.token_id, 16), nft.token_type, nft.display_name)
        console.print(table)

    @app.command("summary")
    def summary_command(
        address: str = typer.Argument(..., help="Owner address"),
    ) -> None:
        """Native balance, token count and NFT counts for an address."""

        async def fetch(client):
            return client.network.native_currency, await client.wallet.get_asset_summary(address)

        currency, summary = run_with_client(console, fetch)
        table = Table(title=f"Asset summary for {summary.address}")
        table.add_column("Asset", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row(f"Native ({currency})", format_wei(summary.native_balance.raw))
        table.add_row("ERC-20 tokens", str(summary.token_count))
        table.add_row("NFTs", str(summary.nft_count))
        table.add_row("  ERC-721", str(summary.erc721_count))
        table.add_row("  ERC-1155", str(summary.erc1155_count))
        console.print(table)
