"""Startup check that the Marketplace resource exists; initialize it once if not."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from nftmarket.errors import MarketplaceError, NetworkError, ResourceNotFound

if TYPE_CHECKING:
    from nftmarket.ledger.reader import ResourceReader
    from nftmarket.models import TransactionOutcome
    from nftmarket.orchestrator import TransactionOrchestrator
    from nftmarket.payloads import PayloadBuilder

log = structlog.get_logger(__name__)


class BootstrapState(str, Enum):
    UNCHECKED = "unchecked"
    CHECKING = "checking"
    INITIALIZED = "initialized"
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"


class MarketplaceBootstrapper:
    """
    UNCHECKED -> CHECKING -> {INITIALIZED, UNINITIALIZED} -> READY.

    Runs at most once per session. A NetworkError during the existence check
    ends in FAILED and is not retried. The transition history is kept in
    `transitions` for diagnostics.
    """

    def __init__(
        self,
        reader: ResourceReader,
        builder: PayloadBuilder,
        orchestrator: TransactionOrchestrator,
    ):
        self.reader = reader
        self.builder = builder
        self.orchestrator = orchestrator
        self.state = BootstrapState.UNCHECKED
        self.transitions: list[BootstrapState] = [BootstrapState.UNCHECKED]
        self.init_outcome: TransactionOutcome | None = None
        self.error: MarketplaceError | None = None

    def _to(self, state: BootstrapState) -> None:
        log.debug("bootstrap_transition", frm=self.state.value, to=state.value)
        self.state = state
        self.transitions.append(state)

    @property
    def ready(self) -> bool:
        return self.state is BootstrapState.READY

    async def run(self) -> BootstrapState:
        if self.state is not BootstrapState.UNCHECKED:
            return self.state

        self._to(BootstrapState.CHECKING)
        try:
            await self.reader.fetch_marketplace()
        except ResourceNotFound:
            self._to(BootstrapState.UNINITIALIZED)
        except NetworkError as e:
            self.error = e
            self._to(BootstrapState.FAILED)
            log.error("bootstrap_check_failed", address=self.reader.marketplace_address, error=str(e))
            raise
        else:
            self._to(BootstrapState.INITIALIZED)
            log.info("marketplace_already_initialized", address=self.reader.marketplace_address)
            self._to(BootstrapState.READY)
            return self.state

        log.info("marketplace_initializing", address=self.reader.marketplace_address)
        try:
            self.init_outcome = await self.orchestrator.submit(self.builder.initialize())
        except MarketplaceError as e:
            self.error = e
            self._to(BootstrapState.FAILED)
            log.error("marketplace_initialize_failed", error=str(e))
            raise
        self._to(BootstrapState.READY)
        log.info("marketplace_initialized", tx_hash=self.init_outcome.hash)
        return self.state
