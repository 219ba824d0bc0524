"""Signer capability injected into the transaction orchestrator."""

from nftmarket.wallet.base import Wallet

__all__ = ["Wallet"]
