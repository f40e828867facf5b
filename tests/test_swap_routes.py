import pytest

from grantcart.constants import DAI_ADDRESS, ETH_ADDRESS, GTC_ADDRESS, UNI_ADDRESS, USDC_ADDRESS, WETH_ADDRESS
from grantcart.errors import UnsupportedTokenError
from grantcart.models import SwapPath
from grantcart.swap_routes import SwapRouteResolver

# Packed paths as expected by the on-chain router
ENCODED = {
    ETH_ADDRESS: "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2000bb86b175474e89094c44da98b954eedeac495271d0f",
    USDC_ADDRESS: "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb480001f46b175474e89094c44da98b954eedeac495271d0f",
    GTC_ADDRESS: "0xde30da39c46104798bb5aa3fe8b9e0e1f348163f002710c02aaa39b223fe8d0a0e5c4f27ead9083c756cc2000bb86b175474e89094c44da98b954eedeac495271d0f",
    UNI_ADDRESS: "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984000bb8c02aaa39b223fe8d0a0e5c4f27ead9083c756cc2000bb86b175474e89094c44da98b954eedeac495271d0f",
    DAI_ADDRESS: "0x6b175474e89094c44da98b954eedeac495271d0f",
}


@pytest.mark.parametrize("token,expected", ENCODED.items())
def test_default_routes_encode(token, expected):
    assert SwapRouteResolver().resolve(token).encode() == expected


def test_resolve_accepts_checksummed_addresses():
    resolver = SwapRouteResolver()
    path = resolver.resolve("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48")
    assert path.input_token == USDC_ADDRESS
    assert path.output_token == DAI_ADDRESS


def test_settlement_token_is_identity():
    path = SwapRouteResolver().resolve("0x6B175474E89094C44Da98b954EedeAC495271d0F")
    assert path.is_identity
    assert path.tokens == (DAI_ADDRESS,)


def test_eth_routes_through_weth():
    assert SwapRouteResolver().resolve(ETH_ADDRESS).input_token == WETH_ADDRESS


@pytest.mark.parametrize("token", ["0x" + "42" * 20, "not-an-address", WETH_ADDRESS])
def test_unknown_token(token):
    with pytest.raises(UnsupportedTokenError):
        SwapRouteResolver().resolve(token)


def test_routes_must_end_at_settlement_token():
    with pytest.raises(ValueError):
        SwapRouteResolver({USDC_ADDRESS: SwapPath((USDC_ADDRESS, WETH_ADDRESS), (500,))})


def test_path_needs_a_fee_per_hop():
    with pytest.raises(ValueError):
        SwapPath((USDC_ADDRESS, DAI_ADDRESS))
