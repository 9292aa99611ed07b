from decimal import Decimal

from gestao_milhas.domain.money import cents_to_decimal, format_cents


def test_cents_to_decimal_has_two_places() -> None:
    assert cents_to_decimal(5000) == Decimal("50.00")
    assert cents_to_decimal(1) == Decimal("0.01")


def test_format_cents_has_two_decimal_places() -> None:
    assert format_cents(0) == "0.00"
    assert format_cents(123456) == "1234.56"
