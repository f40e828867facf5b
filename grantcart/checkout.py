from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, List, Optional, Tuple, TypeVar

from grantcart.cart import CartStateStore
from grantcart.chain import PendingTransaction, SignerContext
from grantcart.constants import ETH_ADDRESS, MAX_UINT256, WETH_ADDRESS
from grantcart.errors import (
    ChainInteractionError,
    GrantCartError,
    PersistenceError,
    PlanningError,
    TransactionFailedError,
)
from grantcart.models import CheckoutPlan, TransactionReceipt
from grantcart.planner import DonationPlanner
from grantcart.utils.addresses import normalize_address

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    tx_hash: Optional[str] = None
    approvals: Tuple[str, ...] = ()
    error: Optional[GrantCartError] = None

    @property
    def category(self) -> Optional[str]:
        return self.error.category if self.error else None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "txHash": self.tx_hash,
            "approvals": list(self.approvals),
            "errorType": self.category,
            "message": str(self.error) if self.error else "Donation confirmed",
        }


async def _chain_call(awaitable: Awaitable[T], action: str) -> T:
    try:
        return await awaitable
    except GrantCartError:
        raise
    except Exception as e:
        raise ChainInteractionError(f"{action} failed: {e}") from e


class CheckoutOrchestrator:
    """Runs approvals and the donation transaction for a checkout plan.

    Steps run strictly one after another: each approval is confirmed before the
    next token is looked at, and the donation is only sent once every approval
    is mined. The cart is cleared only after a successful donation receipt.
    """

    def __init__(self, store: CartStateStore, planner: DonationPlanner, manager_address: str):
        self.store = store
        self.planner = planner
        self.manager_address = normalize_address(manager_address)

    async def checkout(self, signer: SignerContext) -> CheckoutResult:
        """Build a fresh plan from the current cart and execute it."""
        try:
            plan = self.planner.build_plan(self.store.cart)
        except GrantCartError as e:
            logger.warning("Could not build checkout plan: %s", e)
            return CheckoutResult(success=False, error=e)
        return await self.execute(plan, signer)

    async def execute(self, plan: CheckoutPlan, signer: SignerContext) -> CheckoutResult:
        approvals: List[str] = []
        try:
            value = self._native_value(plan)
            await self._approve_all(plan, signer, approvals)
            receipt = await self._donate(plan, signer, value)
        except GrantCartError as e:
            if isinstance(e, ChainInteractionError):
                logger.exception("Checkout failed, cart left unchanged")
            else:
                logger.error("Checkout aborted: %s", e)
            return CheckoutResult(success=False, approvals=tuple(approvals), error=e)

        logger.info("Donation %s confirmed, clearing cart", receipt.tx_hash)
        try:
            self.store.clear()
        except PersistenceError as e:
            logger.error("Donation confirmed but the cart could not be cleared: %s", e)
            return CheckoutResult(True, receipt.tx_hash, tuple(approvals), error=e)
        return CheckoutResult(success=True, tx_hash=receipt.tx_hash, approvals=tuple(approvals))

    async def _approve_all(self, plan: CheckoutPlan, signer: SignerContext, approved: List[str]) -> None:
        for swap in plan.swaps:
            token = swap.path.input_token
            # No approvals for ETH; explicit WETH donations are not supported
            if token in (ETH_ADDRESS, WETH_ADDRESS):
                continue
            allowance = await _chain_call(
                signer.chain.allowance(token, signer.address, self.manager_address),
                f"allowance check for {token}",
            )
            if allowance >= swap.amount_in:
                continue
            logger.info("Approving %s for %s", token, self.manager_address)
            tx = await _chain_call(
                signer.chain.approve(token, self.manager_address, MAX_UINT256),
                f"approval of {token}",
            )
            await self._wait(tx, f"approval of {token}")
            approved.append(token)

    def _native_value(self, plan: CheckoutPlan) -> int:
        eth_swaps = [s for s in plan.swaps if s.path.input_token == WETH_ADDRESS]
        if len(eth_swaps) > 1:
            raise PlanningError("more than one swap starts from WETH")
        return eth_swaps[0].amount_in if eth_swaps else 0

    async def _donate(self, plan: CheckoutPlan, signer: SignerContext, value: int) -> TransactionReceipt:
        tx = await _chain_call(
            signer.chain.donate(self.manager_address, plan.swaps, plan.deadline, plan.donations, value),
            "donation",
        )
        logger.info("Donation submitted: %s", tx.hash)
        return await self._wait(tx, "donation")

    async def _wait(self, tx: PendingTransaction, action: str) -> TransactionReceipt:
        receipt = await _chain_call(tx.wait(), f"confirmation of {action}")
        if not receipt.status:
            raise TransactionFailedError(receipt.tx_hash or tx.hash, action)
        return receipt
