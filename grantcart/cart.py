"""Cart state, kept in sync with its persisted copy.

Every mutation does its own pre-processing and then finishes with
``set_canonical``, which rebuilds both the minimal (persisted) and the
hydrated cart and swaps them in together.
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from grantcart.catalog import GrantCatalog, TokenCatalog
from grantcart.constants import (
    CART_KEY,
    DEFAULT_CONTRIBUTION_AMOUNT,
    DEFAULT_CONTRIBUTION_TOKEN_ADDRESS,
)
from grantcart.errors import (
    CartInputError,
    CartItemNotFoundError,
    PersistenceError,
    UnknownGrantError,
)
from grantcart.models import (
    EMPTY_CART,
    CartSnapshot,
    HydratedCartItem,
    MinimalCartItem,
    normalize_grant_id,
)
from grantcart.storage import KeyValueStorage
from grantcart.utils.addresses import normalize_address
from grantcart.utils.units import Number, require_positive_amount

logger = logging.getLogger(__name__)

CartInput = Union[MinimalCartItem, HydratedCartItem, Mapping[str, Any]]
Listener = Callable[[CartSnapshot], None]


def _as_minimal(item: CartInput) -> MinimalCartItem:
    if isinstance(item, HydratedCartItem):
        return item.minimal()
    if isinstance(item, MinimalCartItem):
        return item
    if isinstance(item, Mapping):
        return MinimalCartItem.from_json(item)
    raise CartInputError(f"Unsupported cart item: {item!r}")


class CartStateStore:
    """Owns the canonical cart for one session.

    Create one per session and pass it by reference to whoever needs it.
    Readers only ever get immutable ``CartSnapshot`` objects; all writes go
    through the methods below. Not safe for concurrent writers.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        tokens: TokenCatalog,
        grants: GrantCatalog,
        key: str = CART_KEY,
    ):
        self.storage = storage
        self.tokens = tokens
        self.grants = grants
        self.key = key
        self._snapshot: CartSnapshot = EMPTY_CART
        self._listeners: List[Listener] = []

    # --- Reads ---
    @property
    def snapshot(self) -> CartSnapshot:
        return self._snapshot

    @property
    def items(self):
        return self._snapshot.items

    @property
    def cart(self):
        return self._snapshot.cart

    def is_in_cart(self, grant_id: Any) -> bool:
        try:
            grant_id = normalize_grant_id(grant_id)
        except CartInputError:
            return False
        return any(item.grant_id == grant_id for item in self._snapshot.items)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # --- Synchronization ---
    def initialize(self) -> CartSnapshot:
        """Load the persisted cart. Falls back to an empty cart, never raises."""
        try:
            raw = self.storage.get(self.key)
            data = json.loads(raw, parse_float=Decimal) if raw else None
        except (OSError, ValueError):
            logger.warning("Could not read existing cart data, defaulting to empty cart")
            data = None

        if not isinstance(data, list):
            if data is not None:
                logger.warning("Persisted cart is not a list, resetting it")
            return self._reset()

        items = []
        for entry in data:
            try:
                item = _as_minimal(entry)
                token = self.tokens.get(item.contribution_token_address)
                require_positive_amount(item.contribution_amount, token.decimals)
            except CartInputError as e:
                logger.warning("Dropping persisted cart item %r: %s", entry, e)
                continue
            items.append(item)
        try:
            return self.set_canonical(items)
        except PersistenceError:
            logger.warning("Could not write cleaned cart back to storage")
            return self._snapshot

    def set_canonical(self, new_cart: Optional[Iterable[CartInput]]) -> CartSnapshot:
        """Replace the whole cart.

        Items are re-hydrated from the current catalogs whatever form they come
        in. Grants that no longer exist are dropped, duplicates keep their first
        occurrence, and an unsupported token or a non-positive amount
        raises before anything changes.
        """
        minimal: List[MinimalCartItem] = []
        hydrated: List[HydratedCartItem] = []
        seen = set()
        for entry in new_cart or ():
            item = _as_minimal(entry)
            if item.grant_id in seen:
                logger.warning("Duplicate grant %s in cart, keeping the first entry", item.grant_id)
                continue
            token = self.tokens.get(item.contribution_token_address)
            require_positive_amount(item.contribution_amount, token.decimals)
            grant = self.grants.get(item.grant_id)
            if grant is None:
                logger.warning("Grant %s no longer exists, removing it from the cart", item.grant_id)
                continue
            seen.add(item.grant_id)
            minimal.append(item)
            hydrated.append(
                HydratedCartItem(
                    grant_id=item.grant_id,
                    contribution_amount=item.contribution_amount,
                    grant=grant,
                    contribution_token=token,
                )
            )

        snapshot = CartSnapshot(items=tuple(minimal), cart=tuple(hydrated)) if minimal else EMPTY_CART
        self._persist(snapshot)
        self._publish(snapshot)
        return snapshot

    def _reset(self) -> CartSnapshot:
        try:
            return self.set_canonical(None)
        except PersistenceError:
            self._publish(EMPTY_CART)
            return EMPTY_CART

    def _persist(self, snapshot: CartSnapshot) -> None:
        blob = json.dumps([item.to_json() for item in snapshot.items])
        try:
            self.storage.set(self.key, blob)
        except OSError as e:
            raise PersistenceError(f"Could not save cart: {e}") from e

    def _publish(self, snapshot: CartSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    # --- Mutations ---
    def add(self, grant_id: Any) -> CartSnapshot:
        grant_id = normalize_grant_id(grant_id)
        if self.is_in_cart(grant_id):
            return self._snapshot
        if self.grants.get(grant_id) is None:
            raise UnknownGrantError(grant_id)

        new_item = MinimalCartItem(
            grant_id=grant_id,
            contribution_token_address=DEFAULT_CONTRIBUTION_TOKEN_ADDRESS,
            contribution_amount=Decimal(DEFAULT_CONTRIBUTION_AMOUNT),
        )
        return self.set_canonical([*self._snapshot.items, new_item])

    def remove(self, grant_id: Any) -> CartSnapshot:
        if not self.is_in_cart(grant_id):
            return self._snapshot
        grant_id = normalize_grant_id(grant_id)
        return self.set_canonical([i for i in self._snapshot.items if i.grant_id != grant_id])

    def update(
        self,
        grant_id: Any,
        amount: Optional[Number] = None,
        token_address: Optional[str] = None,
    ) -> CartSnapshot:
        """Change the amount and/or token of one cart item."""
        grant_id = normalize_grant_id(grant_id)
        items = list(self._snapshot.items)
        index = next((i for i, item in enumerate(items) if item.grant_id == grant_id), None)
        if index is None:
            raise CartItemNotFoundError(grant_id)

        current = items[index]
        token = self.tokens.get(
            normalize_address(token_address) if token_address is not None
            else current.contribution_token_address
        )
        new_amount = current.contribution_amount if amount is None else amount
        items[index] = MinimalCartItem(
            grant_id=grant_id,
            contribution_token_address=token.address,
            contribution_amount=require_positive_amount(new_amount, token.decimals),
        )
        return self.set_canonical(items)

    def update_amount(self, grant_id: Any, amount: Number) -> CartSnapshot:
        return self.update(grant_id, amount=amount)

    def update_token(self, grant_id: Any, token_address: str) -> CartSnapshot:
        return self.update(grant_id, token_address=token_address)

    def clear(self) -> CartSnapshot:
        return self.set_canonical(None)
