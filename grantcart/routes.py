from typing import Optional

from fastapi import APIRouter, Query

from grantcart.errors import GrantCartError
from grantcart.services import CartServices
from grantcart.summary import build_cart_summary, cart_action


def register_api_routes(app, services: CartServices):
    store = services.store
    planner = services.planner

    router = APIRouter(prefix="/api", tags=["grants"])

    # 1) Grant search
    @router.get("/grants")
    async def search_grants_endpoint(query: str = Query("", description="Search term")):
        results = [g.to_dict() for g in services.grants.search(query)]
        return {
            "grants": results,
            "count": len(results),
            "message": f"{len(results)} grants found",
        }

    # 2) Supported tokens
    @router.get("/tokens")
    async def list_tokens_endpoint():
        return {
            "tokens": [
                {"address": t.address, "symbol": t.symbol, "decimals": t.decimals}
                for t in services.tokens.all()
            ]
        }

    # 3) Cart
    @router.get("/cart")
    async def get_cart_endpoint():
        summary = build_cart_summary(store.snapshot, planner)
        if not store.items:
            return {"isEmpty": True, "message": "Your cart is empty", "cart": summary}
        return {
            "isEmpty": False,
            "message": f"{summary['itemCount']} grants in your cart",
            "cart": summary,
        }

    @router.post("/cart/add")
    async def add_to_cart_endpoint(grantId: str):
        return cart_action(lambda: store.add(grantId), planner, f"Grant {grantId} added to cart")

    @router.post("/cart/remove")
    async def remove_from_cart_endpoint(grantId: str):
        return cart_action(lambda: store.remove(grantId), planner, f"Grant {grantId} removed from cart")

    @router.post("/cart/update")
    async def update_cart_endpoint(
        grantId: str,
        amount: Optional[str] = None,
        token: Optional[str] = None,
    ):
        return cart_action(
            lambda: store.update(grantId, amount=amount, token_address=token),
            planner,
            f"Grant {grantId} updated",
        )

    @router.post("/cart/clear")
    async def clear_cart_endpoint():
        return cart_action(store.clear, planner, "Cart cleared")

    # 4) Checkout
    @router.get("/cart/plan")
    async def checkout_plan_endpoint():
        try:
            plan = planner.build_plan(store.cart)
        except GrantCartError as e:
            return {"success": False, "errorType": e.category, "message": str(e)}
        return {"success": True, "plan": plan.to_dict()}

    @router.post("/checkout")
    async def checkout_endpoint():
        if not store.items:
            return {"success": False, "errorType": "input", "message": "Cart is empty, nothing to check out"}
        if services.orchestrator is None or services.signer is None:
            return {"success": False, "errorType": "chain", "message": "Checkout is not configured"}

        result = await services.orchestrator.checkout(services.signer)
        response = result.to_dict()
        response["cart"] = build_cart_summary(store.snapshot, planner)
        return response

    app.include_router(router)
