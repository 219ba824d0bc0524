"""Shared CLI plumbing: session construction and error reporting."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import typer

from nftmarket.config import Settings
from nftmarket.errors import MarketplaceError
from nftmarket.session import MarketplaceSession
from nftmarket.wallet import Wallet

T = TypeVar("T")


def make_wallet(settings: Settings) -> Wallet:
    from nftmarket.wallet.local import LocalAccountWallet

    return LocalAccountWallet.from_private_key(settings.wallet_private_key, settings.node_url)


async def open_session(ctx: typer.Context, with_wallet: bool = False) -> MarketplaceSession:
    """Build a session from settings; the wallet is closed again if the session cannot be built."""
    settings = ctx.obj["settings"]
    wallet = make_wallet(settings) if with_wallet else None
    try:
        return MarketplaceSession.from_settings(settings, wallet)
    except MarketplaceError:
        closer = getattr(wallet, "aclose", None)
        if closer is not None:
            await closer()
        raise


def run_with_session(
    ctx: typer.Context,
    action: Callable[[MarketplaceSession], Awaitable[T]],
    *,
    with_wallet: bool = False,
) -> T:
    """Run action inside a fresh session; MarketplaceError -> message and exit code 1."""

    async def _main() -> T:
        async with await open_session(ctx, with_wallet) as session:
            return await action(session)

    try:
        return asyncio.run(_main())
    except MarketplaceError as e:
        typer.echo(f"Error ({type(e).__name__}): {e}", err=True)
        raise typer.Exit(1) from e


def echo_outcome(action: str, outcome: Any) -> None:
    typer.echo(f"{action} committed: {outcome.hash} (version {outcome.version})")
