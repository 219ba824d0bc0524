"""Marketplace resource reader."""

from __future__ import annotations

import pydantic
import structlog

from nftmarket.errors import NetworkError
from nftmarket.ledger.client import LedgerClient
from nftmarket.models import MarketplaceResource

log = structlog.get_logger(__name__)

MODULE_NAME = "NFTMarketplace"
RESOURCE_NAME = "Marketplace"


def marketplace_resource_type(marketplace_address: str) -> str:
    return f"{marketplace_address}::{MODULE_NAME}::{RESOURCE_NAME}"


class ResourceReader:
    """Fetches the Marketplace resource stored under the marketplace account. No caching."""

    def __init__(self, client: LedgerClient, marketplace_address: str):
        self.client = client
        self.marketplace_address = marketplace_address

    @property
    def resource_type(self) -> str:
        return marketplace_resource_type(self.marketplace_address)

    async def fetch_marketplace(self) -> MarketplaceResource:
        """
        Fetch the raw resource (hex text and octas untouched).
        Raises ResourceNotFound if the marketplace is not initialized, NetworkError otherwise.
        """
        body = await self.client.get_account_resource(self.marketplace_address, self.resource_type)
        try:
            resource = MarketplaceResource.model_validate(body.get("data"))
        except pydantic.ValidationError as e:
            raise NetworkError(f"malformed {self.resource_type}: {e}") from e
        log.debug("marketplace_fetched", address=self.marketplace_address, nft_count=len(resource.nfts))
        return resource
