"""Turns a hydrated cart into the inputs of ``GrantRoundManager.donate()``."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Dict, List, Sequence

from grantcart.catalog import RoundRegistry, TokenCatalog
from grantcart.constants import (
    DEADLINE_SECONDS,
    ETH_ADDRESS,
    PLACEHOLDER_AMOUNT_OUT_MIN,
    WAD,
    WETH_ADDRESS,
)
from grantcart.errors import EmptyCartError, PlanningError
from grantcart.models import CheckoutPlan, DonationEntry, HydratedCartItem, SwapSummary
from grantcart.swap_routes import SwapRouteResolver
from grantcart.utils.formatters import format_amount
from grantcart.utils.units import parse_units

logger = logging.getLogger(__name__)

NATIVE_DECIMALS = 18


def aggregate(cart: Sequence[HydratedCartItem]) -> Dict[str, Decimal]:
    """Total human-readable amount per contribution token."""
    output: Dict[str, Decimal] = {}
    for item in cart:
        token = item.contribution_token.address
        output[token] = output.get(token, Decimal(0)) + item.contribution_amount
    return output


def distribute_dust(donations: List[DonationEntry]) -> List[DonationEntry]:
    """Make the ratios of each token sum to exactly WAD.

    Floor division leaves up to ``n - 1`` wei of ratio unassigned per token;
    the remainder goes to the largest donation of that token.
    """
    by_token: Dict[str, List[int]] = {}
    for index, donation in enumerate(donations):
        by_token.setdefault(donation.token, []).append(index)

    result = list(donations)
    for token, indexes in by_token.items():
        residual = WAD - sum(result[i].ratio for i in indexes)
        if residual == 0:
            continue
        if residual < 0:
            raise PlanningError(f"donation ratios for {token} exceed 100%")
        largest = max(indexes, key=lambda i: result[i].ratio)
        result[largest] = replace(result[largest], ratio=result[largest].ratio + residual)
    return result


class DonationPlanner:
    def __init__(
        self,
        tokens: TokenCatalog,
        routes: SwapRouteResolver,
        rounds: RoundRegistry,
        clock: Callable[[], float] = time.time,
        correct_dust: bool = True,
    ):
        self.tokens = tokens
        self.routes = routes
        self.rounds = rounds
        self.clock = clock
        self.correct_dust = correct_dust

    def aggregate(self, cart: Sequence[HydratedCartItem]) -> Dict[str, Decimal]:
        return aggregate(cart)

    def build_plan(self, cart: Sequence[HydratedCartItem]) -> CheckoutPlan:
        if not cart:
            raise EmptyCartError()

        swaps: List[SwapSummary] = []
        for token_address, total in aggregate(cart).items():
            decimals = self.tokens.get(token_address).decimals
            amount_in = parse_units(total, decimals)
            if amount_in <= 0:
                raise PlanningError(f"Total contribution in {token_address} must be positive")
            swaps.append(
                SwapSummary(
                    amount_in=amount_in,
                    amount_out_min=PLACEHOLDER_AMOUNT_OUT_MIN,
                    path=self.routes.resolve(token_address),
                )
            )

        # Only the first active round receives donations
        first_round = self.rounds.first()
        rounds = (first_round,) if first_round else ()

        donations: List[DonationEntry] = []
        for item in cart:
            # Native ETH is sent as value and wrapped by the manager, so it
            # matches the swap that starts at WETH
            is_eth = item.contribution_token.address == ETH_ADDRESS
            token_address = WETH_ADDRESS if is_eth else item.contribution_token.address
            decimals = NATIVE_DECIMALS if is_eth else item.contribution_token.decimals
            donation_amount = parse_units(item.contribution_amount, decimals)

            swap = next((s for s in swaps if s.path.input_token == token_address), None)
            if swap is None:
                raise PlanningError(f"Could not find matching swap for donation to grant {item.grant_id}")
            ratio = donation_amount * WAD // swap.amount_in
            donations.append(DonationEntry(item.grant_id, token_address, ratio, rounds))

        if self.correct_dust:
            donations = distribute_dust(donations)

        deadline = math.floor(self.clock() + DEADLINE_SECONDS)
        logger.debug("Built plan with %d swaps and %d donations", len(swaps), len(donations))
        return CheckoutPlan(swaps=tuple(swaps), donations=tuple(donations), deadline=deadline)

    def summary_string(self, cart: Sequence[HydratedCartItem]) -> str:
        """e.g. ``"12 DAI + 4 GTC + 10 USDC"``."""
        return " + ".join(
            format_amount(total, self.tokens.get(token).symbol)
            for token, total in aggregate(cart).items()
        )
