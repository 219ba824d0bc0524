"""Submit -> wait for finality -> refresh, for one state-changing action."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from nftmarket.errors import (
    FinalityTimeout,
    MarketplaceError,
    TransactionRejected,
    WalletRejected,
)
from nftmarket.models import EntryFunctionPayload, TransactionOutcome

if TYPE_CHECKING:
    from nftmarket.catalog import Catalog
    from nftmarket.ledger.client import LedgerClient
    from nftmarket.wallet import Wallet

log = structlog.get_logger(__name__)

DEFAULT_FINALITY_TIMEOUT_SEC = 60.0


class TransactionOrchestrator:
    """
    Drives one payload through the wallet and the ledger.

    Steps inside a single submit() are strictly sequential. Concurrent submits
    are not serialized or deduplicated; callers disable the triggering control
    while one is in flight.
    """

    def __init__(
        self,
        wallet: Wallet,
        client: LedgerClient,
        catalog: Catalog | None = None,
        *,
        finality_timeout: float = DEFAULT_FINALITY_TIMEOUT_SEC,
    ):
        self.wallet = wallet
        self.client = client
        self.catalog = catalog
        self.finality_timeout = finality_timeout

    async def _sign_and_submit(self, payload: EntryFunctionPayload) -> str:
        try:
            response = await self.wallet.sign_and_submit_transaction(payload.to_dict())
        except MarketplaceError:
            raise
        except Exception as e:
            raise WalletRejected(f"wallet declined {payload.function_name}: {e}") from e
        tx_hash = response.get("hash") if isinstance(response, dict) else None
        if not tx_hash:
            raise WalletRejected(f"wallet returned no transaction hash for {payload.function_name}")
        return str(tx_hash)

    async def submit(self, payload: EntryFunctionPayload) -> TransactionOutcome:
        """
        Sign and broadcast payload, wait for it to be committed, then refresh the catalog once.

        Raises TransactionRejected if the wallet refuses or execution fails (catalog untouched),
        FinalityTimeout if the transaction is not committed in time, NetworkError on node faults.
        """
        bound = log.bind(function=payload.function_name)
        tx_hash = await self._sign_and_submit(payload)
        bound.info("tx_submitted", tx_hash=tx_hash)
        try:
            outcome = await self.client.wait_for_transaction(tx_hash, timeout=self.finality_timeout)
        except FinalityTimeout:
            bound.error("tx_finality_timeout", tx_hash=tx_hash, timeout=self.finality_timeout)
            raise
        if not outcome.success:
            bound.warning("tx_failed", tx_hash=tx_hash, vm_status=outcome.vm_status)
            raise TransactionRejected(
                f"{payload.function_name} failed on-chain: {outcome.vm_status}", tx_hash=tx_hash
            )
        bound.info("tx_committed", tx_hash=tx_hash, version=outcome.version)
        if self.catalog is not None:
            await self.catalog.refresh()
        return outcome
