#!/usr/bin/env python3
"""
run_explorer.py - CLI entrypoint for the chain explorer.

Usage:
    python run_explorer.py home --window 10
    python run_explorer.py block 17000000
    python run_explorer.py tx 0x...
    python run_explorer.py account 0x...
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Awaitable

import click

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from chains.client import create_chain_client
from config import load_explorer_config
from core.constants import AccountField
from core.exceptions import ExplorerError
from core.format_units import format_ether, truncate_identifier
from core.logging import get_logger, log_error, set_global_context, setup_logging
from core.models import AccountView, BlockDetail, BlockSummary, TransactionReceipt
from explorer.accounts import AccountResolver
from explorer.blocks import TransactionSetResolver
from explorer.receipts import ReceiptResolver, wait_for_receipt
from explorer.recent_blocks import RecentBlocksFetcher

logger = get_logger("chainview.cli")


# =============================================================================
# RENDERING
# =============================================================================

def render_recent_blocks(blocks: list[BlockSummary]) -> str:
    lines = ["Latest Blocks:"]
    for block in blocks:
        lines.append(
            f"  Block: {block.height} | Miner: {block.miner} | "
            f"Gas Used: {format_ether(block.gas_used)} ETH"
        )
    return "\n".join(lines)


def render_block(detail: BlockDetail) -> str:
    lines = [f"Block Number: {detail.height}"]
    if not detail.transactions:
        lines.append("  (no transactions)")
    for tx in detail.transactions:
        lines.append(
            f"  Txn Hash: {truncate_identifier(tx.hash)} | Block No: {tx.block_number} | "
            f"From: {tx.from_address} | To: {tx.to_address} | "
            f"Value: {format_ether(tx.value)} ETH"
        )
    return "\n".join(lines)


def render_receipt(receipt: TransactionReceipt) -> str:
    return "\n".join([
        "Transaction Receipt",
        f"Transaction Hash: {receipt.hash}",
        f"Status: {'Successful' if receipt.status else 'Failed'}",
        f"Block Number: {receipt.block_number} ({receipt.confirmations} Block Confirmations)",
        f"From: {receipt.from_address}",
        f"To: {receipt.to_address}",
        f"Value: {format_ether(receipt.value)} ETH",
        f"Gas Used: {format_ether(receipt.gas_used)} ETH",
        f"Gas Price: {format_ether(receipt.effective_gas_price)} ETH",
        f"Transaction Type: {receipt.type}",
        f"Nonce: {receipt.nonce}",
        f"Position in Block: {receipt.transaction_index}",
    ])


def render_account(view: AccountView) -> str:
    lines = [f"Wallet Address: {view.address}"]
    if view.balance is not None:
        lines.append(f"Current Balance: {format_ether(view.balance)} ETH")
    if view.nfts:
        lines.append("Owned NFT's:")
        for nft in view.nfts:
            lines.append(f"  {nft.title} | {nft.thumbnail_url}")
    for field, error in view.errors.items():
        label = "Balance" if field == AccountField.BALANCE else "NFTs"
        lines.append(f"{label} unavailable: {error.message}")
    return "\n".join(lines)


# =============================================================================
# COMMANDS
# =============================================================================

def _run(ctx: click.Context, coro: Awaitable[Any]) -> Any:
    """Run a command coroutine, closing the client if the CLI created it."""

    async def runner() -> Any:
        try:
            return await coro
        finally:
            if ctx.obj.get("owns_client"):
                await ctx.obj["client"].close()

    try:
        return asyncio.run(runner())
    except ExplorerError as e:
        log_error(logger, e.code.value, f"Command failed: {e.message}", **e.details)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--network",
    "-n",
    default=None,
    help="Network key from config/explorer.yaml",
)
@click.option(
    "--log-level",
    "-l",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: LOG_LEVEL or config/explorer.yaml)",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
@click.pass_context
def cli(ctx: click.Context, network: str | None, log_level: str | None, json_logs: bool) -> None:
    """
    chainview - read-only blockchain explorer.
    """
    try:
        config = load_explorer_config(network=network)
    except KeyError as e:
        raise click.BadParameter(e.args[0], param_hint="'--network'") from e

    setup_logging(level=log_level or config.log_level, json_output=json_logs)
    set_global_context(service="chainview", network=config.network)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("window_size", config.window_size)

    if "client" not in ctx.obj:
        ctx.obj["client"] = create_chain_client(config)
        ctx.obj["owns_client"] = True


@cli.command()
@click.option("--window", "-w", default=None, type=click.IntRange(min=1), help="Number of blocks to show")
@click.pass_context
def home(ctx: click.Context, window: int | None) -> None:
    """Show the latest blocks."""
    fetcher = RecentBlocksFetcher(ctx.obj["client"])
    window_size = window or ctx.obj.get("window_size", 10)
    blocks = _run(ctx, fetcher.load_latest(window_size))
    click.echo(render_recent_blocks(blocks))


@cli.command()
@click.argument("height")
@click.pass_context
def block(ctx: click.Context, height: str) -> None:
    """Show a block and its transactions."""
    resolver = TransactionSetResolver(ctx.obj["client"])
    detail = _run(ctx, resolver.resolve_block(height))
    click.echo(render_block(detail))


@cli.command()
@click.argument("tx_hash")
@click.option("--wait/--no-wait", default=False, help="Poll until the transaction is mined")
@click.pass_context
def tx(ctx: click.Context, tx_hash: str, wait: bool) -> None:
    """Show a transaction receipt."""
    resolver = ReceiptResolver(ctx.obj["client"])
    if wait:
        receipt = _run(ctx, wait_for_receipt(resolver, tx_hash))
    else:
        receipt = _run(ctx, resolver.resolve_receipt(tx_hash))

    if receipt is None:
        click.echo(f"Transaction {tx_hash} is pending or unknown. Try again later.")
        return
    click.echo(render_receipt(receipt))


@cli.command()
@click.argument("address")
@click.pass_context
def account(ctx: click.Context, address: str) -> None:
    """Show balance and NFT holdings for an address."""
    resolver = AccountResolver(ctx.obj["client"])
    view = _run(ctx, resolver.resolve_account(address))
    click.echo(render_account(view))
    if view.is_empty:
        sys.exit(1)


if __name__ == "__main__":
    cli()
