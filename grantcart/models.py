from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Tuple

from grantcart.errors import CartInputError
from grantcart.utils.addresses import normalize_address
from grantcart.utils.units import to_decimal


def normalize_grant_id(value: Any) -> str:
    """Grant ids are stored as decimal strings ("7", never 7 or "07")."""
    if isinstance(value, bool) or value is None:
        raise CartInputError(f"Invalid grant id: {value!r}")
    text = str(value).strip()
    if not text.isdecimal():
        raise CartInputError(f"Invalid grant id: {value!r}")
    return str(int(text))


def _json_amount(amount: Decimal) -> Any:
    """JSON number when it reads back exactly, otherwise the exact decimal text.

    Browser clients wrote plain numbers; amounts finer than a double can hold
    (e.g. 18-decimal ETH values) fall back to a string.
    """
    if amount == amount.to_integral_value():
        return int(amount)
    as_float = float(amount)
    if Decimal(repr(as_float)) == amount:
        return as_float
    return format(amount, "f")


@dataclass(frozen=True)
class TokenMetadata:
    address: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class Grant:
    id: str
    name: str
    payee: str
    owner: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "payee": self.payee,
            "owner": self.owner,
            "description": self.description,
        }


@dataclass(frozen=True)
class MinimalCartItem:
    """The only form of a cart item that is ever persisted."""

    grant_id: str
    contribution_token_address: str
    contribution_amount: Decimal

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MinimalCartItem":
        try:
            grant_id = data["grantId"]
            token = data["contributionTokenAddress"]
            amount = data["contributionAmount"]
        except (KeyError, TypeError) as e:
            raise CartInputError(f"Malformed cart item: {data!r}") from e
        return cls(
            grant_id=normalize_grant_id(grant_id),
            contribution_token_address=normalize_address(token),
            contribution_amount=to_decimal(amount),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "grantId": self.grant_id,
            "contributionTokenAddress": self.contribution_token_address,
            "contributionAmount": _json_amount(self.contribution_amount),
        }


@dataclass(frozen=True)
class HydratedCartItem:
    grant_id: str
    contribution_amount: Decimal
    grant: Grant
    contribution_token: TokenMetadata

    @property
    def contribution_token_address(self) -> str:
        return self.contribution_token.address

    def minimal(self) -> MinimalCartItem:
        return MinimalCartItem(
            grant_id=self.grant_id,
            contribution_token_address=self.contribution_token.address,
            contribution_amount=self.contribution_amount,
        )


@dataclass(frozen=True)
class CartSnapshot:
    """Persisted and hydrated cart, always replaced together."""

    items: Tuple[MinimalCartItem, ...] = ()
    cart: Tuple[HydratedCartItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def grant_ids(self) -> List[str]:
        return [item.grant_id for item in self.items]


EMPTY_CART = CartSnapshot()


@dataclass(frozen=True)
class SwapPath:
    """Uniswap v3 style multi-hop route: token, fee, token, fee, ..., token."""

    tokens: Tuple[str, ...]
    fees: Tuple[int, ...] = ()

    def __post_init__(self):
        if not self.tokens or len(self.fees) != len(self.tokens) - 1:
            raise ValueError("a swap path needs exactly one fee between each pair of tokens")

    @property
    def input_token(self) -> str:
        return self.tokens[0]

    @property
    def output_token(self) -> str:
        return self.tokens[-1]

    @property
    def is_identity(self) -> bool:
        return len(self.tokens) == 1

    def encode(self) -> str:
        """Packed bytes as hex: 20-byte address, then 3-byte fee per hop."""
        parts = [self.tokens[0][2:]]
        for fee, token in zip(self.fees, self.tokens[1:]):
            parts.append(f"{fee:06x}")
            parts.append(token[2:])
        return "0x" + "".join(parts).lower()


@dataclass(frozen=True)
class SwapSummary:
    amount_in: int
    amount_out_min: int
    path: SwapPath

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amountIn": str(self.amount_in),
            "amountOutMin": str(self.amount_out_min),
            "path": self.path.encode(),
        }


@dataclass(frozen=True)
class DonationEntry:
    grant_id: str
    # Swap input token the ratio is measured against
    token: str
    ratio: int
    rounds: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grantId": self.grant_id,
            "token": self.token,
            "ratio": str(self.ratio),
            "rounds": list(self.rounds),
        }


@dataclass(frozen=True)
class CheckoutPlan:
    swaps: Tuple[SwapSummary, ...]
    donations: Tuple[DonationEntry, ...]
    deadline: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swaps": [s.to_dict() for s in self.swaps],
            "donations": [d.to_dict() for d in self.donations],
            "deadline": self.deadline,
        }

    def to_contract_args(self) -> Tuple[list, int, list]:
        """Arguments for ``GrantRoundManager.donate(swaps, deadline, donations)``."""
        swaps = [(s.amount_in, s.amount_out_min, s.path.encode()) for s in self.swaps]
        donations = [(int(d.grant_id), d.token, d.ratio, list(d.rounds)) for d in self.donations]
        return swaps, self.deadline, donations


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    status: bool
    block_number: int | None = None
