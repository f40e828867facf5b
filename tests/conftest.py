"""Shared pytest fixtures: in-memory storage, a fixed clock and a fake chain."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from grantcart.cart import CartStateStore
from grantcart.catalog import GrantCatalog, RoundRegistry, TokenCatalog
from grantcart.chain import SignerContext
from grantcart.checkout import CheckoutOrchestrator
from grantcart.models import TransactionReceipt
from grantcart.planner import DonationPlanner
from grantcart.storage import MemoryStorage
from grantcart.swap_routes import SwapRouteResolver

FIXED_NOW = 1_700_000_000.75
ROUND_ADDRESS = "0x" + "ab" * 20
MANAGER_ADDRESS = "0x" + "cd" * 20
USER_ADDRESS = "0x" + "ef" * 20


class FakeTransaction:
    def __init__(self, chain: "FakeChain", tx_hash: str, status: bool):
        self.chain = chain
        self.hash = tx_hash
        self.status = status

    async def wait(self) -> TransactionReceipt:
        self.chain.events.append(("confirmed", self.hash))
        return TransactionReceipt(tx_hash=self.hash, status=self.status)


class FakeChain:
    """Records every call in ``events`` so tests can assert on ordering."""

    def __init__(
        self,
        allowances: Optional[Dict[str, int]] = None,
        failing_approvals: Iterable[str] = (),
        donation_status: bool = True,
        donate_error: Optional[Exception] = None,
    ):
        self.allowances = dict(allowances or {})
        self.failing_approvals = set(failing_approvals)
        self.donation_status = donation_status
        self.donate_error = donate_error
        self.events: List[tuple] = []
        self.donations: List[dict] = []
        self._count = 0

    def _tx(self, status: bool) -> FakeTransaction:
        self._count += 1
        return FakeTransaction(self, f"0xtx{self._count}", status)

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        self.events.append(("allowance", token))
        return self.allowances.get(token, 0)

    async def approve(self, token: str, spender: str, amount: int) -> FakeTransaction:
        self.events.append(("approve", token))
        self.allowances[token] = amount
        return self._tx(token not in self.failing_approvals)

    async def donate(self, manager, swaps, deadline, donations, value) -> FakeTransaction:
        if self.donate_error is not None:
            raise self.donate_error
        self.events.append(("donate", value))
        self.donations.append(
            {"manager": manager, "swaps": swaps, "deadline": deadline, "donations": donations, "value": value}
        )
        return self._tx(self.donation_status)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def tokens() -> TokenCatalog:
    return TokenCatalog()


@pytest.fixture
def grants() -> GrantCatalog:
    return GrantCatalog()


@pytest.fixture
def store(storage, tokens, grants) -> CartStateStore:
    store = CartStateStore(storage, tokens, grants)
    store.initialize()
    return store


@pytest.fixture
def planner(tokens) -> DonationPlanner:
    return DonationPlanner(
        tokens,
        SwapRouteResolver(),
        RoundRegistry([ROUND_ADDRESS, "0x" + "12" * 20]),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def orchestrator(store, planner) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(store, planner, MANAGER_ADDRESS)


def make_signer(chain: FakeChain) -> SignerContext:
    return SignerContext(address=USER_ADDRESS, chain=chain)
