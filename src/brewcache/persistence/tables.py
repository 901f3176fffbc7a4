"""SQLAlchemy ORM models for the primary store.

Prices are stored as BIGINT minor units (TWD 150.00 -> 15000) in the
configured currency; the currency itself is not stored per row.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from brewcache.config import settings
from brewcache.core.money import Money, currency_scale
from brewcache.errors import ConfigurationError


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class MoneyType(TypeDecorator[Money]):
    """Maps ``Money`` to a BIGINT column of minor units in one currency."""

    impl = BigInteger
    cache_ok = True

    def __init__(self, currency: str, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        currency_scale(currency)
        self.currency = currency

    def process_bind_param(self, value: Money | None, dialect: Dialect) -> int | None:
        if value is None:
            return None
        if value.currency != self.currency:
            raise ValueError(f"column stores {self.currency}, got {value.currency}")
        return value.amount_minor

    def process_result_value(self, value: Any | None, dialect: Dialect) -> Money | None:
        if value is None:
            return None
        return Money.of_minor(self.currency, int(value))


class CoffeeTable(Base):
    """Coffee menu table."""

    __tablename__ = "t_coffee"

    # Surrogate key, assigned by the database
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )

    # Natural key used for cache lookups
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    price: Mapped[Money | None] = mapped_column(MoneyType(settings.currency), nullable=True)

    # Timestamps
    create_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    update_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


def check_currency(currency: str) -> None:
    """Fail unless ``currency`` is the one the price column stores.

    Raises:
        ConfigurationError: If the currencies differ.
    """
    stored = CoffeeTable.__table__.c.price.type.currency
    if currency != stored:
        raise ConfigurationError(f"price column stores {stored}, settings ask for {currency}")
