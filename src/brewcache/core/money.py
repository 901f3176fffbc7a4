"""Exact monetary amounts in minor currency units.

Amounts are kept as integers of the currency's smallest unit (cents, fen,
...). Major-unit values are only ever produced as ``Decimal`` at the
currency's scale, so no floating point is involved anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final

# ISO 4217 minor-unit digits for the currencies we price in
CURRENCY_SCALES: Final[dict[str, int]] = {
    "TWD": 2,
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CNY": 2,
    "JPY": 0,
    "KRW": 0,
}


def currency_scale(currency: str) -> int:
    """Return the number of minor-unit digits for a currency code."""
    try:
        return CURRENCY_SCALES[currency]
    except KeyError:
        raise ValueError(f"unsupported currency: {currency!r}") from None


@dataclass(frozen=True, slots=True)
class Money:
    """An amount of money in a single currency."""

    amount_minor: int
    currency: str

    def __post_init__(self) -> None:
        if isinstance(self.amount_minor, bool) or not isinstance(self.amount_minor, int):
            raise TypeError("amount_minor must be an int")
        currency_scale(self.currency)

    @classmethod
    def of_minor(cls, currency: str, amount_minor: int) -> Money:
        return cls(amount_minor=amount_minor, currency=currency)

    @classmethod
    def of_major(cls, currency: str, amount: Decimal | str | int) -> Money:
        """Build from a major-unit amount such as ``"150.00"``.

        Raises:
            ValueError: If the amount is not a number or needs more
                fractional digits than the currency allows.
        """
        scale = currency_scale(currency)
        try:
            value = Decimal(amount)
        except InvalidOperation:
            raise ValueError(f"not a monetary amount: {amount!r}") from None
        if not value.is_finite():
            raise ValueError(f"not a monetary amount: {amount!r}")
        minor = value.scaleb(scale)
        if minor != minor.to_integral_value():
            raise ValueError(f"{amount} has more than {scale} fractional digits for {currency}")
        return cls(amount_minor=int(minor), currency=currency)

    @property
    def scale(self) -> int:
        return currency_scale(self.currency)

    @property
    def amount(self) -> Decimal:
        """Major-unit amount, quantized to the currency's scale."""
        exponent = Decimal(1).scaleb(-self.scale)
        return Decimal(self.amount_minor).scaleb(-self.scale).quantize(exponent)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"
