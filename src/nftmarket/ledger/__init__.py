"""Ledger node access - REST client and Marketplace resource reader."""

from nftmarket.ledger.client import LedgerClient
from nftmarket.ledger.reader import ResourceReader, marketplace_resource_type

__all__ = ["LedgerClient", "ResourceReader", "marketplace_resource_type"]
