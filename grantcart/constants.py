WAD = 10**18
MAX_UINT256 = 2**256 - 1

# Placeholder address used for the chain's native asset
ETH_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
WETH_ADDRESS = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
DAI_ADDRESS = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC_ADDRESS = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
GTC_ADDRESS = "0xde30da39c46104798bb5aa3fe8b9e0e1f348163f"
UNI_ADDRESS = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"

SETTLEMENT_TOKEN_ADDRESS = DAI_ADDRESS

CART_KEY = "cart"
DEFAULT_CONTRIBUTION_TOKEN_ADDRESS = DAI_ADDRESS
DEFAULT_CONTRIBUTION_AMOUNT = 5

DEADLINE_SECONDS = 20 * 60
# No slippage protection yet, the router only requires a non-zero output
PLACEHOLDER_AMOUNT_OUT_MIN = 1
