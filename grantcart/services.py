from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from grantcart.cart import CartStateStore
from grantcart.catalog import GrantCatalog, RoundRegistry, TokenCatalog
from grantcart.chain import SignerContext
from grantcart.checkout import CheckoutOrchestrator
from grantcart.config import Settings
from grantcart.planner import DonationPlanner
from grantcart.storage import JsonFileStorage, KeyValueStorage
from grantcart.swap_routes import SwapRouteResolver

logger = logging.getLogger(__name__)


@dataclass
class CartServices:
    """Everything the API and MCP handlers share for one session."""

    store: CartStateStore
    grants: GrantCatalog
    tokens: TokenCatalog
    planner: DonationPlanner
    orchestrator: Optional[CheckoutOrchestrator] = None
    # Provided by the embedding wallet integration
    signer: Optional[SignerContext] = None


def build_services(
    settings: Settings,
    storage: Optional[KeyValueStorage] = None,
    signer: Optional[SignerContext] = None,
) -> CartServices:
    tokens = TokenCatalog()
    grants = GrantCatalog()
    planner = DonationPlanner(tokens, SwapRouteResolver(), RoundRegistry(settings.active_rounds))
    store = CartStateStore(storage or JsonFileStorage(settings.cart_storage_path), tokens, grants)
    store.initialize()

    orchestrator = None
    if settings.manager_address:
        orchestrator = CheckoutOrchestrator(store, planner, settings.manager_address)
    else:
        logger.warning("GRANT_ROUND_MANAGER_ADDRESS is not set, checkout is disabled")

    return CartServices(
        store=store,
        grants=grants,
        tokens=tokens,
        planner=planner,
        orchestrator=orchestrator,
        signer=signer,
    )
