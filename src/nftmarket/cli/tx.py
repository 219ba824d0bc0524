"""Tx subcommand: mint, buy, transfer, rate; plus the top-level init command."""

from __future__ import annotations

import typer

from nftmarket.cli.common import echo_outcome, run_with_session
from nftmarket.models import Rarity

app = typer.Typer(help="State-changing marketplace transactions (requires a wallet key)")


def init(ctx: typer.Context) -> None:
    """Check the Marketplace resource and initialize it if it does not exist."""
    state = run_with_session(ctx, lambda s: s.bootstrap(), with_wallet=True)
    typer.echo(f"Marketplace {state.value}.")


@app.command("mint")
def mint(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name"),
    description: str = typer.Option(..., "--description"),
    uri: str = typer.Option(..., "--uri"),
    rarity: int = typer.Option(..., "--rarity", "-r", help="1=Common 2=Uncommon 3=Rare 4=Super Rare"),
) -> None:
    """Mint a new NFT."""
    outcome = run_with_session(
        ctx, lambda s: s.mint(name, description, uri, rarity), with_wallet=True
    )
    echo_outcome("mint_nft", outcome)
    typer.echo(f"Minted {name!r} ({Rarity(rarity).label}).")


@app.command("buy")
def buy(
    ctx: typer.Context,
    nft_id: int = typer.Argument(..., help="NFT id"),
) -> None:
    """Buy a listed NFT at its current price."""
    outcome = run_with_session(ctx, lambda s: s.buy_listed(nft_id), with_wallet=True)
    echo_outcome("purchase_nft", outcome)


@app.command("transfer")
def transfer(
    ctx: typer.Context,
    nft_id: int = typer.Argument(..., help="NFT id"),
    recipient: str = typer.Argument(..., help="Recipient account address"),
) -> None:
    """Transfer an NFT to another account."""
    outcome = run_with_session(ctx, lambda s: s.transfer(nft_id, recipient), with_wallet=True)
    echo_outcome("transfer_nft", outcome)


@app.command("rate")
def rate(
    ctx: typer.Context,
    nft_id: int = typer.Argument(..., help="NFT id"),
    rating: int = typer.Argument(..., help="Rating 1-5"),
) -> None:
    """Rate an NFT from 1 to 5."""
    outcome = run_with_session(ctx, lambda s: s.rate(nft_id, rating), with_wallet=True)
    echo_outcome("rate_nft", outcome)
