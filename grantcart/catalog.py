from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from grantcart.constants import (
    DAI_ADDRESS,
    ETH_ADDRESS,
    GTC_ADDRESS,
    UNI_ADDRESS,
    USDC_ADDRESS,
)
from grantcart.errors import UnsupportedTokenError
from grantcart.models import Grant, TokenMetadata
from grantcart.utils.addresses import is_address, normalize_address

SUPPORTED_TOKENS = [
    TokenMetadata(address=ETH_ADDRESS, symbol="ETH", decimals=18),
    TokenMetadata(address=DAI_ADDRESS, symbol="DAI", decimals=18),
    TokenMetadata(address=USDC_ADDRESS, symbol="USDC", decimals=6),
    TokenMetadata(address=GTC_ADDRESS, symbol="GTC", decimals=18),
    TokenMetadata(address=UNI_ADDRESS, symbol="UNI", decimals=18),
]

GRANTS = [
    Grant(
        id="0",
        name="Open Source Block Explorer",
        payee="0x1111111111111111111111111111111111111111",
        owner="0x1111111111111111111111111111111111111111",
        description="Self-hostable explorer for EVM chains",
    ),
    Grant(
        id="1",
        name="Client Diversity Fund",
        payee="0x2222222222222222222222222222222222222222",
        owner="0x2222222222222222222222222222222222222222",
        description="Supports minority execution and consensus clients",
    ),
    Grant(
        id="2",
        name="Solidity Docs Translation",
        payee="0x3333333333333333333333333333333333333333",
        owner="0x3333333333333333333333333333333333333333",
        description="Community translations of the Solidity documentation",
    ),
    Grant(
        id="3",
        name="Public Goods Podcast",
        payee="0x4444444444444444444444444444444444444444",
        owner="0x4444444444444444444444444444444444444444",
        description="Weekly interviews with public goods builders",
    ),
]


class TokenCatalog:
    """address -> TokenMetadata, keyed by canonical address."""

    def __init__(self, tokens: Iterable[TokenMetadata] = SUPPORTED_TOKENS):
        self._tokens: Dict[str, TokenMetadata] = {}
        for token in tokens:
            address = normalize_address(token.address)
            self._tokens[address] = TokenMetadata(address, token.symbol, token.decimals)

    def get(self, address: str) -> TokenMetadata:
        key = address.strip().lower() if is_address(address) else address
        token = self._tokens.get(key)
        if token is None:
            raise UnsupportedTokenError(address)
        return token

    def __contains__(self, address: str) -> bool:
        return is_address(address) and address.strip().lower() in self._tokens

    def all(self) -> List[TokenMetadata]:
        return list(self._tokens.values())


class GrantCatalog:
    def __init__(self, grants: Iterable[Grant] = GRANTS):
        self._grants: Dict[str, Grant] = {g.id: g for g in grants}

    def get(self, grant_id: str) -> Optional[Grant]:
        return self._grants.get(grant_id)

    def search(self, query: str | None) -> List[Grant]:
        if not query:
            return list(self._grants.values())
        q = query.lower()
        return [
            g for g in self._grants.values()
            if q in g.name.lower() or q in g.description.lower()
        ]


class RoundRegistry:
    """Ordered list of currently active grant round addresses."""

    def __init__(self, addresses: Iterable[str] = ()):
        self._rounds: Tuple[str, ...] = tuple(normalize_address(a) for a in addresses)

    def active_rounds(self) -> Tuple[str, ...]:
        return self._rounds

    def first(self) -> Optional[str]:
        return self._rounds[0] if self._rounds else None
