"""Wallet protocol - anything that can sign and broadcast an entry-function payload."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Wallet(Protocol):
    """
    Signer boundary. May prompt a user and may refuse.

    sign_and_submit_transaction returns at least {"hash": "0x..."}; a refusal
    raises WalletRejected (any other exception is treated as a rejection too).
    """

    async def sign_and_submit_transaction(self, payload: dict[str, Any]) -> dict[str, Any]: ...
