"""Currency utilities: display symbols and settlement conversion."""

from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "CAD": "CA$", "GBP": "£", "EUR": "€",
    "JPY": "¥", "AUD": "A$", "SGD": "S$", "HKD": "HK$",
    "KRW": "₩", "TWD": "NT$", "THB": "฿", "VND": "₫",
    "PHP": "₱", "MYR": "RM", "IDR": "Rp",
}

# Currencies quoted without minor units
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW", "VND", "IDR"}


def is_supported_currency(code: str) -> bool:
    return code.upper() in CURRENCY_SYMBOLS


def convert_with_rate(amount: Decimal, exchange_rate: Decimal, to_currency: str | None = None) -> Decimal:
    """Convert with a caller-supplied rate. No rate is ever looked up or guessed."""
    rate = Decimal(str(exchange_rate))
    if rate <= 0:
        raise ValueError(f"Exchange rate must be positive, got {exchange_rate}")
    exponent = Decimal("1") if to_currency and to_currency.upper() in ZERO_DECIMAL_CURRENCIES else Decimal("0.01")
    return (Decimal(str(amount)) * rate).quantize(exponent, rounding=ROUND_HALF_UP)


def format_price(amount: Decimal, currency: str = "USD") -> str:
    """Format a price with currency symbol for display."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    if currency in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP):,}"
    return f"{symbol}{Decimal(str(amount)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,}"
