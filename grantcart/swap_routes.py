"""Static swap routes into the settlement token.

Routes follow the most liquid Uniswap v3 pools. There is no on-chain route
discovery; supporting a new token means adding an entry to ``SWAP_ROUTES``.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping

from grantcart.constants import (
    DAI_ADDRESS,
    ETH_ADDRESS,
    GTC_ADDRESS,
    SETTLEMENT_TOKEN_ADDRESS,
    UNI_ADDRESS,
    USDC_ADDRESS,
    WETH_ADDRESS,
)
from grantcart.errors import UnsupportedTokenError
from grantcart.models import SwapPath
from grantcart.utils.addresses import is_address, normalize_address

logger = logging.getLogger(__name__)

FEE_LOW = 500
FEE_MEDIUM = 3000
FEE_HIGH = 10000

SWAP_ROUTES: Dict[str, SwapPath] = {
    # ETH is swapped as WETH through the 0.3% pool
    ETH_ADDRESS: SwapPath((WETH_ADDRESS, DAI_ADDRESS), (FEE_MEDIUM,)),
    USDC_ADDRESS: SwapPath((USDC_ADDRESS, DAI_ADDRESS), (FEE_LOW,)),
    # GTC -> WETH (1%) -> DAI (0.3%)
    GTC_ADDRESS: SwapPath((GTC_ADDRESS, WETH_ADDRESS, DAI_ADDRESS), (FEE_HIGH, FEE_MEDIUM)),
    # UNI -> WETH (0.3%) -> DAI (0.3%)
    UNI_ADDRESS: SwapPath((UNI_ADDRESS, WETH_ADDRESS, DAI_ADDRESS), (FEE_MEDIUM, FEE_MEDIUM)),
}


class SwapRouteResolver:
    def __init__(
        self,
        routes: Mapping[str, SwapPath] = SWAP_ROUTES,
        settlement_token: str = SETTLEMENT_TOKEN_ADDRESS,
    ):
        self.settlement_token = normalize_address(settlement_token)
        self._routes: Dict[str, SwapPath] = {}
        for token, path in routes.items():
            path = SwapPath(tuple(normalize_address(t) for t in path.tokens), tuple(path.fees))
            if path.output_token != self.settlement_token:
                raise ValueError(f"route for {token} does not end at {self.settlement_token}")
            self._routes[normalize_address(token)] = path

    def resolve(self, token_address: str) -> SwapPath:
        if not is_address(token_address):
            raise UnsupportedTokenError(token_address)
        token = normalize_address(token_address)
        if token == self.settlement_token:
            return SwapPath((token,))
        path = self._routes.get(token)
        if path is None:
            logger.warning("No swap route configured for %s", token)
            raise UnsupportedTokenError(token_address)
        return path

    def supported_tokens(self) -> List[str]:
        return [self.settlement_token, *self._routes]
