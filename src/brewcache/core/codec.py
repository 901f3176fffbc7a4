"""Byte codecs for cached values.

Money is stored as the canonical decimal string of its minor amount
(``b"15000"`` for TWD 150.00). The currency is fixed by configuration and
is not part of the payload. A missing price encodes to ``ABSENT`` which
callers must check with ``is_absent`` before decoding.

Projections are stored as compact JSON objects:

    {"id": 4, "name": "mocha", "price": "15000"}
"""

from __future__ import annotations

import re
from typing import Any, Final

import orjson

from brewcache.core.model import CoffeeProjection
from brewcache.core.money import Money, currency_scale
from brewcache.errors import DecodeError

ABSENT: Final[bytes] = b""

_MINOR_AMOUNT = re.compile(rb"-?[0-9]+")


class MoneyCodec:
    """Fixed-currency codec between ``Money`` and bytes."""

    def __init__(self, currency: str = "TWD"):
        currency_scale(currency)
        self.currency = currency

    def encode(self, money: Money | None) -> bytes:
        """Encode a price; ``None`` becomes the ``ABSENT`` sentinel.

        Raises:
            ValueError: If the price is in a different currency than the codec.
        """
        if money is None:
            return ABSENT
        if money.currency != self.currency:
            raise ValueError(f"codec is bound to {self.currency}, got {money.currency}")
        return str(money.amount_minor).encode("ascii")

    def decode(self, data: bytes) -> Money:
        """Decode bytes produced by ``encode``.

        Raises:
            DecodeError: If the bytes are empty or not a plain integer.
        """
        if not data:
            raise DecodeError("empty money payload")
        if _MINOR_AMOUNT.fullmatch(data) is None:
            raise DecodeError(f"malformed money payload: {data[:32]!r}")
        try:
            amount = int(data)
        except ValueError as exc:
            # Digit strings past the interpreter's conversion limit
            raise DecodeError(f"money payload too long: {len(data)} bytes") from exc
        return Money.of_minor(self.currency, amount)

    @staticmethod
    def is_absent(data: bytes) -> bool:
        return data == ABSENT


class ProjectionCodec:
    """JSON codec for ``CoffeeProjection`` cache entries."""

    def __init__(self, money: MoneyCodec):
        self.money = money

    def encode(self, projection: CoffeeProjection) -> bytes:
        return orjson.dumps(
            {
                "id": projection.id,
                "name": projection.name,
                "price": self.money.encode(projection.price).decode("ascii"),
            }
        )

    def decode(self, data: bytes) -> CoffeeProjection:
        """Decode a cache entry.

        Raises:
            DecodeError: On invalid JSON or a payload of the wrong shape.
        """
        try:
            parsed: Any = orjson.loads(data)
        except orjson.JSONDecodeError as exc:
            raise DecodeError(f"cached projection is not valid JSON: {exc}") from exc

        if not isinstance(parsed, dict):
            raise DecodeError("cached projection must be a JSON object")

        entity_id = parsed.get("id")
        name = parsed.get("name")
        price = parsed.get("price")
        if isinstance(entity_id, bool) or not isinstance(entity_id, int):
            raise DecodeError("cached projection has no integer id")
        if not isinstance(name, str):
            raise DecodeError("cached projection has no name")
        if not isinstance(price, str):
            raise DecodeError("cached projection has no price field")

        raw_price = price.encode("utf-8")
        return CoffeeProjection(
            id=entity_id,
            name=name,
            price=None if self.money.is_absent(raw_price) else self.money.decode(raw_price),
        )
