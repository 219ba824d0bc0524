"""Market subcommand: list, mine."""

from __future__ import annotations

import typer

from nftmarket.catalog import CatalogView
from nftmarket.cli.common import run_with_session
from nftmarket.codec import truncate_address
from nftmarket.models import NFT, Rarity
from nftmarket.session import MarketplaceSession

app = typer.Typer(help="Browse marketplace listings")


def format_rating(rating: float | None) -> str:
    if not rating:
        return "No ratings"
    stars = "*" * min(5, round(rating))
    return f"{stars:<5} ({rating:g}/5)"


def format_nft(nft: NFT, rating: float | None) -> str:
    return (
        f"  #{nft.id:<5} {nft.name[:24]:<24}  {nft.rarity.label:<10}  {nft.price} APT"
        f"  owner {truncate_address(nft.owner)}  {format_rating(rating)}"
    )


@app.command("list")
def list_nfts(
    ctx: typer.Context,
    rarity: int | None = typer.Option(None, "--rarity", "-r", min=1, max=4, help="1=Common .. 4=Super Rare"),
    page: int = typer.Option(1, "--page", help="Page number (1-based)", min=1),
) -> None:
    """List NFTs for sale, optionally filtered by rarity."""

    async def action(session: MarketplaceSession) -> tuple[CatalogView, list[NFT], int]:
        catalog = session.catalog
        await catalog.set_rarity_filter(Rarity(rarity) if rarity else None)
        return catalog.view, catalog.set_page(page - 1), catalog.total_pages

    view, items, total_pages = run_with_session(ctx, action)
    label = view.rarity_filter.label if view.rarity_filter else "All"
    typer.echo(f"Marketplace [{label}]  page {page}/{max(total_pages, 1)}  ({len(view.nfts)} for sale)")
    for nft in items:
        typer.echo(format_nft(nft, view.ratings.get(nft.id)))
    if view.skipped_ids:
        typer.echo(f"Skipped undecodable records: {', '.join(map(str, view.skipped_ids))}")


@app.command("mine")
def mine(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Owner account address"),
) -> None:
    """List every NFT owned by ADDRESS, listed or not."""

    async def action(session: MarketplaceSession) -> tuple[CatalogView, list[NFT]]:
        view = await session.catalog.refresh()
        return view, session.catalog.owned_by(address)

    view, owned = run_with_session(ctx, action)
    typer.echo(f"NFTs owned by {truncate_address(address)}: {len(owned)}")
    for nft in owned:
        status = "for sale" if nft.for_sale else "not listed"
        typer.echo(f"{format_nft(nft, view.ratings.get(nft.id))}  [{status}]")
