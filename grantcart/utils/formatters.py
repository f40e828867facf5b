from decimal import Decimal


def format_amount(amount: Decimal, symbol: str) -> str:
    text = format(amount.normalize(), "f")
    return f"{text} {symbol}"
