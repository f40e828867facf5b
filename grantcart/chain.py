"""What the checkout needs from the chain. Wallet and RPC setup live elsewhere."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from grantcart.models import DonationEntry, SwapSummary, TransactionReceipt


class PendingTransaction(Protocol):
    hash: str

    async def wait(self) -> TransactionReceipt: ...


class ChainClient(Protocol):
    async def allowance(self, token: str, owner: str, spender: str) -> int: ...

    async def approve(self, token: str, spender: str, amount: int) -> PendingTransaction: ...

    async def donate(
        self,
        manager: str,
        swaps: Sequence[SwapSummary],
        deadline: int,
        donations: Sequence[DonationEntry],
        value: int,
    ) -> PendingTransaction: ...


@dataclass(frozen=True)
class SignerContext:
    address: str
    chain: ChainClient
