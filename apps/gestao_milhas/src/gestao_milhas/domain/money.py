"""Money helpers for amounts stored in cents (BRL)."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PRECISION = Decimal("0.01")


def cents_to_decimal(amount_cents: int) -> Decimal:
    """Convert an integer amount of cents into a two-digit Decimal."""

    return (Decimal(amount_cents) / 100).quantize(
        MONEY_PRECISION, rounding=ROUND_HALF_UP
    )


def format_cents(amount_cents: int) -> str:
    """Render cents as a string with exactly two decimal places."""

    return f"{cents_to_decimal(amount_cents):.2f}"
