from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from grantcart.errors import GrantCartError
from grantcart.models import CartSnapshot
from grantcart.planner import DonationPlanner
from grantcart.utils.formatters import format_amount

logger = logging.getLogger(__name__)


def build_cart_summary(snapshot: CartSnapshot, planner: DonationPlanner) -> Dict[str, Any]:
    items = []
    for item in snapshot.cart:
        token = item.contribution_token
        items.append({
            "grantId": item.grant_id,
            "name": item.grant.name,
            "payee": item.grant.payee,
            "contributionTokenAddress": token.address,
            "contributionAmount": str(item.contribution_amount),
            "contributionFormatted": format_amount(item.contribution_amount, token.symbol),
        })

    totals = planner.aggregate(snapshot.cart)
    return {
        "items": items,
        "totals": {token: str(amount) for token, amount in totals.items()},
        "summary": planner.summary_string(snapshot.cart),
        "itemCount": len(items),
    }


def cart_action(
    action: Callable[[], CartSnapshot],
    planner: DonationPlanner,
    message: str,
) -> Dict[str, Any]:
    """Run a cart mutation and shape the result for API and MCP callers."""
    try:
        snapshot = action()
    except GrantCartError as e:
        logger.info("Rejected cart change: %s", e)
        return {"success": False, "errorType": e.category, "message": str(e)}
    return {
        "success": True,
        "message": message,
        "cart": build_cart_summary(snapshot, planner),
    }
