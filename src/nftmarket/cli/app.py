"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from nftmarket.config import get_settings
from nftmarket.config.settings import configure_logging

app = typer.Typer(
    name="nftmkt",
    help="NFT Marketplace - browse, mint, buy, transfer and rate NFTs.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    settings = get_settings(profile, config_dir)
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from nftmarket.cli import market, tx  # noqa: E402

app.add_typer(market.app, name="market")
app.add_typer(tx.app, name="tx")
app.command("init")(tx.init)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
