from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from mcp.server.fastmcp import FastMCP

from grantcart.chain import SignerContext
from grantcart.config import Settings, settings as default_settings
from grantcart.mcp_handlers import register_mcp
from grantcart.routes import register_api_routes
from grantcart.services import build_services
from grantcart.storage import KeyValueStorage


def create_app(
    settings: Settings = default_settings,
    storage: Optional[KeyValueStorage] = None,
    signer: Optional[SignerContext] = None,
) -> FastAPI:
    services = build_services(settings, storage=storage, signer=signer)

    # =====================================================
    # 1) FastAPI app
    # =====================================================
    app = FastAPI(title="grant-cart")
    app.state.services = services

    # =====================================================
    # 2) MCP server, served over SSE under /mcp
    # =====================================================
    mcp = FastMCP(name="grant-cart-mcp")
    register_mcp(mcp, services)
    app.state.mcp = mcp
    app.mount("/mcp", mcp.sse_app())

    @app.get("/mcp-info")
    async def mcp_info_handler():
        """MCP server info"""
        return {
            "name": "grant-cart-mcp",
            "version": "1.0.0",
            "protocols": ["sse"],
            "endpoints": {
                "sse": f"{settings.base_url}/mcp/sse",
                "messages": f"{settings.base_url}/mcp/messages/",
            },
        }

    # =====================================================
    # 3) REST API
    # =====================================================
    register_api_routes(app, services)

    return app
