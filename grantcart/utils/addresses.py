from __future__ import annotations

import re

from grantcart.errors import InvalidAddressError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_address(value: object) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value.strip()))


def normalize_address(value: object) -> str:
    """Canonical (lower-case, 0x-prefixed) form of an address."""
    if not is_address(value):
        raise InvalidAddressError(f"Invalid address: {value!r}")
    return value.strip().lower()  # type: ignore[union-attr]
