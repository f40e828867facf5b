from __future__ import annotations


class GrantCartError(Exception):
    """Base class for every error the cart and checkout code raises."""

    category = "internal"


class CartInputError(GrantCartError):
    """Bad user input. The cart is left untouched and the caller may retry."""

    category = "input"


class UnsupportedTokenError(CartInputError):
    def __init__(self, token_address: str):
        super().__init__(f"Token {token_address} is not supported")
        self.token_address = token_address


class UnknownGrantError(CartInputError):
    def __init__(self, grant_id: str):
        super().__init__(f"Grant {grant_id} was not found")
        self.grant_id = grant_id


class CartItemNotFoundError(CartInputError):
    def __init__(self, grant_id: str):
        super().__init__(f"Grant {grant_id} is not in the cart")
        self.grant_id = grant_id


class InvalidAmountError(CartInputError):
    pass


class InvalidAddressError(CartInputError):
    pass


class EmptyCartError(CartInputError):
    def __init__(self):
        super().__init__("Cart is empty, nothing to check out")


class PlanningError(GrantCartError):
    """The cart could not be turned into a consistent checkout plan.

    Raised for internal-consistency defects (e.g. a donation with no matching
    swap), never for user input.
    """

    category = "planning"


class ChainInteractionError(GrantCartError):
    category = "chain"


class TransactionFailedError(ChainInteractionError):
    def __init__(self, tx_hash: str | None, action: str):
        super().__init__(f"{action} transaction {tx_hash} failed")
        self.tx_hash = tx_hash
        self.action = action


class PersistenceError(GrantCartError):
    category = "persistence"
