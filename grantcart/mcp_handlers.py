from mcp.server import FastMCP

from .errors import GrantCartError
from .services import CartServices
from .summary import build_cart_summary, cart_action


def register_mcp(mcp: FastMCP, services: CartServices):
    """MCP tool registration"""
    store = services.store
    planner = services.planner

    @mcp.tool()
    async def search_grants(query: str = "") -> dict:
        """Search grants by name or description"""
        results = [g.to_dict() for g in services.grants.search(query)]
        return {
            "grants": results,
            "count": len(results),
            "message": f"{len(results)} grants found",
        }

    @mcp.tool()
    async def add_to_cart(grantId: str) -> dict:
        """Add a grant to the donation cart"""
        return cart_action(lambda: store.add(grantId), planner, f"Grant {grantId} added to cart")

    @mcp.tool()
    async def remove_from_cart(grantId: str) -> dict:
        """Remove a grant from the donation cart"""
        return cart_action(lambda: store.remove(grantId), planner, f"Grant {grantId} removed from cart")

    @mcp.tool()
    async def update_cart_item(grantId: str, amount: str | None = None, token: str | None = None) -> dict:
        """Change the contribution amount or token for a grant in the cart"""
        return cart_action(
            lambda: store.update(grantId, amount=amount, token_address=token),
            planner,
            f"Grant {grantId} updated",
        )

    @mcp.tool()
    async def get_cart() -> dict:
        """Show the donation cart"""
        summary = build_cart_summary(store.snapshot, planner)
        if not store.items:
            return {"isEmpty": True, "message": "Your cart is empty", "cart": summary}
        return {
            "isEmpty": False,
            "message": f"{summary['itemCount']} grants in your cart",
            "cart": summary,
        }

    @mcp.tool()
    async def clear_cart() -> dict:
        """Remove every grant from the cart"""
        return cart_action(store.clear, planner, "Cart cleared")

    @mcp.tool()
    async def get_checkout_plan() -> dict:
        """Show the swaps and donation ratios checkout would submit"""
        try:
            plan = planner.build_plan(store.cart)
        except GrantCartError as e:
            return {"success": False, "errorType": e.category, "message": str(e)}
        return {"success": True, "plan": plan.to_dict()}

    @mcp.tool()
    async def checkout() -> dict:
        """Approve tokens and send the donation transaction"""
        if not store.items:
            return {"success": False, "errorType": "input", "message": "Cart is empty, nothing to check out"}
        if services.orchestrator is None or services.signer is None:
            return {"success": False, "errorType": "chain", "message": "Checkout is not configured"}

        result = await services.orchestrator.checkout(services.signer)
        return result.to_dict()
