"""Demo currency conversion from the base currency (KZT).

Rates are static placeholders until real rates are wired in.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

BASE_CURRENCY = "KZT"

RATES: dict[str, Decimal] = {
    "KZT": Decimal("1"),
    "RUB": Decimal("0.20"),
    "USD": Decimal("0.0022"),
}

CURRENCY_SIGNS: dict[str, str] = {
    "KZT": "₸",
    "RUB": "₽",
    "USD": "$",
}

SUPPORTED_CURRENCIES: tuple[str, ...] = tuple(RATES)


def rate_for(code: str) -> Decimal:
    return RATES.get(code, Decimal("1"))


def convert(amount_base: int | float, code: str) -> int:
    """Convert ``amount_base`` to ``code`` and round half-up to whole units.

    Unknown codes are treated as the base currency.
    """

    value = Decimal(str(amount_base)) * rate_for(code)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
