"""Decoded, rarity-filtered and paginated view of the Marketplace resource."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Sequence, TypeVar

import structlog

from nftmarket.codec import decode_nft, parse_raw_nft, standardize_address
from nftmarket.errors import DecodeError, ValidationError
from nftmarket.models import NFT, MarketplaceResource, Rarity

if TYPE_CHECKING:
    from nftmarket.ledger.reader import ResourceReader

log = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 8

T = TypeVar("T")


def build_view(
    resource: MarketplaceResource,
    rarity_filter: Rarity | int | None = None,
) -> tuple[list[NFT], dict[int, float | None]]:
    """
    Decode every record and keep those for sale (and of rarity_filter, if set).
    The ratings map covers all records, for sale or not.
    Records that fail to decode are logged and left out.
    """
    wanted = _as_rarity(rarity_filter)
    nfts, ratings, _ = _decode_all(resource)
    return _listed(nfts, wanted), ratings


def _as_rarity(value: Rarity | int | None) -> Rarity | None:
    if value is None:
        return None
    try:
        return Rarity(value)
    except ValueError as e:
        raise ValidationError(f"rarity filter must be one of 1-4, got {value!r}") from e


def _listed(nfts: list[NFT], rarity: Rarity | None) -> list[NFT]:
    return [n for n in nfts if n.for_sale and (rarity is None or n.rarity == rarity)]


def _skip_key(nft_id: Any, index: int) -> int | str:
    try:
        return int(nft_id)
    except (TypeError, ValueError):
        return f"#{index}"


def _decode_all(resource: MarketplaceResource) -> tuple[list[NFT], dict[int, float | None], list[int | str]]:
    nfts: list[NFT] = []
    ratings: dict[int, float | None] = {}
    skipped: list[int | str] = []
    for index, record in enumerate(resource.nfts):
        try:
            raw = parse_raw_nft(record)
            # ratings cover every well-formed record, even one whose text fails to decode
            ratings[raw.id] = raw.average_rating
            nfts.append(decode_nft(raw))
        except DecodeError as e:
            skipped.append(_skip_key(e.nft_id, index))
            log.warning("skip_nft", nft_id=e.nft_id, index=index, field=e.field, error=str(e))
    return nfts, ratings, skipped


def paginate(items: Sequence[T], page_index: int, page_size: int) -> list[T]:
    """Zero-based page window, clipped to bounds. Past the end -> empty list."""
    if page_index < 0:
        raise ValueError(f"page_index must be >= 0, got {page_index}")
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    start = page_index * page_size
    return list(items[start : start + page_size])


def page_count(total: int, page_size: int) -> int:
    return -(-total // page_size) if total > 0 else 0


@dataclass(frozen=True)
class CatalogView:
    """Immutable snapshot of one fetch. Replaced wholesale on refresh."""

    nfts: tuple[NFT, ...] = ()
    ratings: Mapping[int, float | None] = field(default_factory=lambda: MappingProxyType({}))
    owned: tuple[NFT, ...] = ()
    rarity_filter: Rarity | None = None
    skipped_ids: tuple[int | str, ...] = ()
    fetched_at: float | None = None


class Catalog:
    """
    Holds the current CatalogView, the active rarity filter and the page index.

    Only refresh() replaces the view, by swapping the whole object, so readers
    holding a reference never see a partial update.
    """

    def __init__(self, reader: ResourceReader, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.reader = reader
        self.page_size = page_size
        self.page_index = 0
        self._rarity_filter: Rarity | None = None
        self._view = CatalogView()

    @property
    def view(self) -> CatalogView:
        return self._view

    @property
    def rarity_filter(self) -> Rarity | None:
        return self._rarity_filter

    async def refresh(self) -> CatalogView:
        """Re-read the resource and rebuild the view with the active filter."""
        resource = await self.reader.fetch_marketplace()
        nfts, ratings, skipped = _decode_all(resource)
        rarity = self._rarity_filter
        listed = tuple(_listed(nfts, rarity))
        self._view = CatalogView(
            nfts=listed,
            ratings=MappingProxyType(ratings),
            owned=tuple(nfts),
            rarity_filter=rarity,
            skipped_ids=tuple(skipped),
            fetched_at=time.time(),
        )
        log.info(
            "catalog_refreshed",
            listed=len(listed),
            total=len(resource.nfts),
            skipped=len(skipped),
            rarity=rarity.label if rarity is not None else "all",
        )
        return self._view

    async def set_rarity_filter(self, rarity: Rarity | int | None) -> CatalogView:
        """Change the filter, go back to the first page and recompute from a fresh fetch."""
        self._rarity_filter = _as_rarity(rarity)
        self.page_index = 0
        return await self.refresh()

    def set_page(self, page_index: int) -> list[NFT]:
        if page_index < 0:
            raise ValueError(f"page_index must be >= 0, got {page_index}")
        self.page_index = page_index
        return self.current_page()

    def current_page(self) -> list[NFT]:
        return paginate(self._view.nfts, self.page_index, self.page_size)

    @property
    def total_pages(self) -> int:
        return page_count(len(self._view.nfts), self.page_size)

    def rating_for(self, nft_id: int) -> float | None:
        return self._view.ratings.get(nft_id)

    def owned_by(self, address: str) -> list[NFT]:
        """Every decoded record owned by address, listed or not."""
        target = standardize_address(address.lower())
        return [n for n in self._view.owned if standardize_address(n.owner.lower()) == target]
