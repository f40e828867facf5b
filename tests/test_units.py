from decimal import Decimal

import pytest

from grantcart.errors import InvalidAddressError, InvalidAmountError
from grantcart.utils.addresses import normalize_address
from grantcart.utils.formatters import format_amount
from grantcart.utils.units import format_units, parse_units


def test_parse_units():
    assert parse_units("1.5", 18) == 1_500_000_000_000_000_000
    assert parse_units(Decimal("0.000001"), 6) == 1
    assert parse_units(0.1, 18) == 10**17
    assert parse_units(15, 6) == 15_000_000


def test_parse_units_rejects_extra_precision():
    with pytest.raises(InvalidAmountError):
        parse_units("0.0000001", 6)


def test_format_units():
    assert format_units(1_250_000, 6) == Decimal("1.25")


def test_format_amount():
    assert format_amount(Decimal("10.00"), "DAI") == "10 DAI"
    assert format_amount(Decimal("0.50"), "ETH") == "0.5 ETH"


def test_normalize_address():
    assert normalize_address(" 0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48 ") == "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
    with pytest.raises(InvalidAddressError):
        normalize_address("0x1234")
    with pytest.raises(InvalidAddressError):
        normalize_address(None)
