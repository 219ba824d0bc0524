"""MarketplaceBootstrapper state machine."""

import asyncio

import pytest

from conftest import MARKET, FakeNode, FakeWallet
from nftmarket.bootstrap import BootstrapState, MarketplaceBootstrapper
from nftmarket.errors import NetworkError, TransactionRejected
from nftmarket.ledger import ResourceReader
from nftmarket.orchestrator import TransactionOrchestrator
from nftmarket.payloads import PayloadBuilder

S = BootstrapState


def _bootstrap(node, wallet, runs=1):
    async def go():
        async with node.client() as client:
            reader = ResourceReader(client, MARKET)
            orch = TransactionOrchestrator(wallet, client, finality_timeout=5)
            boot = MarketplaceBootstrapper(reader, PayloadBuilder(MARKET), orch)
            states = []
            for _ in range(runs):
                try:
                    states.append(await boot.run())
                except Exception as e:  # collected for assertions
                    states.append(e)
            return boot, states

    return asyncio.run(go())


def test_uninitialized_marketplace_gets_initialized():
    node = FakeNode(records=None)
    wallet = FakeWallet(node)
    boot, states = _bootstrap(node, wallet)
    assert states == [S.READY]
    assert boot.transitions == [S.UNCHECKED, S.CHECKING, S.UNINITIALIZED, S.READY]
    assert [p["function"] for p in wallet.payloads] == [f"{MARKET}::NFTMarketplace::initialize"]
    assert boot.init_outcome.success


def test_existing_marketplace_is_not_reinitialized(node):
    wallet = FakeWallet(node)
    boot, states = _bootstrap(node, wallet)
    assert states == [S.READY]
    assert boot.transitions == [S.UNCHECKED, S.CHECKING, S.INITIALIZED, S.READY]
    assert wallet.payloads == []


def test_runs_at_most_once_per_session():
    node = FakeNode(records=None)
    wallet = FakeWallet(node)
    boot, states = _bootstrap(node, wallet, runs=3)
    assert states == [S.READY, S.READY, S.READY]
    assert len(wallet.payloads) == 1
    assert node.resource_reads == 1


def test_network_error_during_check_is_terminal():
    node = FakeNode(records=None)
    node.resource_status = 503
    wallet = FakeWallet(node)
    boot, states = _bootstrap(node, wallet, runs=2)
    assert isinstance(states[0], NetworkError)
    assert states[1] is S.FAILED
    assert boot.state is S.FAILED
    assert node.resource_reads == 1
    assert wallet.payloads == []


def test_rejected_initialize_fails(declining_wallet):
    node = FakeNode(records=None)
    boot, states = _bootstrap(node, declining_wallet)
    assert isinstance(states[0], TransactionRejected)
    assert boot.transitions[-2:] == [S.UNINITIALIZED, S.FAILED]
    assert not boot.ready
