"""Marketplace session - wires client, reader, catalog, builder and orchestrator together."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from nftmarket.bootstrap import BootstrapState, MarketplaceBootstrapper
from nftmarket.catalog import Catalog
from nftmarket.config import Settings
from nftmarket.errors import ValidationError
from nftmarket.ledger import LedgerClient, ResourceReader
from nftmarket.models import Rarity, TransactionOutcome
from nftmarket.orchestrator import TransactionOrchestrator
from nftmarket.payloads import PayloadBuilder
from nftmarket.wallet import Wallet


class MarketplaceSession:
    """One application session against one marketplace account."""

    def __init__(
        self,
        client: LedgerClient,
        marketplace_address: str,
        wallet: Wallet | None = None,
        *,
        page_size: int = 8,
        finality_timeout: float = 60.0,
    ):
        self.client = client
        self.builder = PayloadBuilder(marketplace_address)
        self.reader = ResourceReader(client, self.builder.marketplace_address)
        self.catalog = Catalog(self.reader, page_size=page_size)
        self.wallet = wallet
        self.orchestrator = (
            TransactionOrchestrator(wallet, client, self.catalog, finality_timeout=finality_timeout)
            if wallet is not None
            else None
        )
        # No catalog on the init orchestrator: a committed initialize is READY
        # even while the new resource is not yet readable.
        self.bootstrapper = (
            MarketplaceBootstrapper(
                self.reader,
                self.builder,
                TransactionOrchestrator(wallet, client, finality_timeout=finality_timeout),
            )
            if wallet is not None
            else None
        )

    @classmethod
    def from_settings(cls, settings: Settings, wallet: Wallet | None = None) -> MarketplaceSession:
        if not settings.marketplace_address:
            raise ValidationError("marketplace address not configured (set MARKETPLACE_ADDRESS)")
        client = LedgerClient(
            settings.node_url,
            timeout=settings.request_timeout_sec,
            poll_interval=settings.poll_interval_sec,
        )
        return cls(
            client,
            settings.marketplace_address,
            wallet,
            page_size=settings.page_size,
            finality_timeout=settings.finality_timeout_sec,
        )

    async def __aenter__(self) -> MarketplaceSession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()
        closer = getattr(self.wallet, "aclose", None)
        if closer is not None:
            await closer()

    def _require_orchestrator(self) -> TransactionOrchestrator:
        if self.orchestrator is None:
            raise ValidationError("no wallet connected")
        return self.orchestrator

    async def bootstrap(self) -> BootstrapState:
        self._require_orchestrator()
        return await self.bootstrapper.run()

    # Write path. Payloads are built (and validated) before the wallet is touched.

    async def mint(self, name: str, description: str, uri: str, rarity: Rarity | int) -> TransactionOutcome:
        payload = self.builder.mint(name, description, uri, rarity)
        return await self._require_orchestrator().submit(payload)

    async def purchase(self, nft_id: int, price: Decimal | int | float | str) -> TransactionOutcome:
        payload = self.builder.purchase(nft_id, price)
        return await self._require_orchestrator().submit(payload)

    async def buy_listed(self, nft_id: int) -> TransactionOutcome:
        """Buy a listed NFT at its current on-chain price. Unlisted ids are refused."""
        view = self.catalog.view
        if view.fetched_at is None:
            view = await self.catalog.refresh()
        listed = {n.id: n for n in view.nfts}
        if nft_id not in listed:
            raise ValidationError(f"NFT {nft_id} is not listed for sale")
        payload = self.builder.purchase_octas(nft_id, listed[nft_id].price_octas)
        return await self._require_orchestrator().submit(payload)

    async def transfer(self, nft_id: int, recipient: str) -> TransactionOutcome:
        payload = self.builder.transfer(nft_id, recipient)
        return await self._require_orchestrator().submit(payload)

    async def rate(self, nft_id: int, rating: int) -> TransactionOutcome:
        payload = self.builder.rate(nft_id, rating)
        return await self._require_orchestrator().submit(payload)
