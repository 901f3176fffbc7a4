"""Tests for the money and projection codecs."""

import orjson
import pytest

from brewcache.core.codec import ABSENT, MoneyCodec, ProjectionCodec
from brewcache.core.model import Coffee, CoffeeProjection
from brewcache.core.money import Money
from brewcache.errors import DecodeError


class TestMoneyCodec:
    """Test MoneyCodec encoding rules."""

    @pytest.fixture
    def codec(self) -> MoneyCodec:
        return MoneyCodec("TWD")

    def test_encodes_canonical_decimal_string(self, codec: MoneyCodec) -> None:
        """Minor amount is written as its decimal string."""
        assert codec.encode(Money.of_minor("TWD", 15000)) == b"15000"
        assert codec.encode(Money.of_minor("TWD", 0)) == b"0"
        assert codec.encode(Money.of_minor("TWD", -5)) == b"-5"

    def test_round_trip_exact(self, codec: MoneyCodec) -> None:
        """Decoding an encoding returns the same amount, including extremes."""
        amounts = [0, 1, -1, 99, 15000, 2**31, -(2**31), 2**63 - 1, -(2**63), 10**30]
        for minor in amounts:
            money = Money.of_minor("TWD", minor)
            assert codec.decode(codec.encode(money)) == money

    def test_none_encodes_to_sentinel(self, codec: MoneyCodec) -> None:
        """An absent price becomes the ABSENT sentinel."""
        assert codec.encode(None) == ABSENT
        assert codec.is_absent(codec.encode(None))
        assert not codec.is_absent(b"0")

    def test_decode_empty_fails(self, codec: MoneyCodec) -> None:
        """Empty bytes never decode to a zero amount."""
        with pytest.raises(DecodeError):
            codec.decode(b"")

    @pytest.mark.parametrize(
        "payload",
        [b"abc", b"1.5", b" 15", b"15\n", b"+15", b"-", b"1e3", b"\xff\xfe", b"15 00"],
    )
    def test_decode_malformed_fails(self, codec: MoneyCodec, payload: bytes) -> None:
        """Anything but a plain integer is rejected."""
        with pytest.raises(DecodeError):
            codec.decode(payload)

    def test_decode_oversized_integer_fails(self, codec: MoneyCodec) -> None:
        """Digit strings too long to convert raise DecodeError, not a bare ValueError."""
        with pytest.raises(DecodeError, match="too long"):
            codec.decode(b"1" * 5000)

    def test_decode_error_is_value_error(self, codec: MoneyCodec) -> None:
        """DecodeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            codec.decode(b"x")

    def test_currency_comes_from_configuration(self) -> None:
        """The payload carries no currency; the codec supplies it."""
        assert MoneyCodec("JPY").decode(b"500") == Money.of_minor("JPY", 500)

    def test_encode_rejects_other_currency(self, codec: MoneyCodec) -> None:
        """A codec bound to TWD refuses USD amounts."""
        with pytest.raises(ValueError):
            codec.encode(Money.of_minor("USD", 1))

    def test_unknown_currency_rejected(self) -> None:
        """Codec construction validates the currency."""
        with pytest.raises(ValueError):
            MoneyCodec("ZZZ")


class TestProjectionCodec:
    """Test ProjectionCodec JSON layout and validation."""

    @pytest.fixture
    def codec(self) -> ProjectionCodec:
        return ProjectionCodec(MoneyCodec("TWD"))

    def test_encoded_layout(self, codec: ProjectionCodec) -> None:
        """Projection is stored as id, name and encoded price."""
        projection = CoffeeProjection(id=4, name="mocha", price=Money.of_minor("TWD", 15000))
        assert orjson.loads(codec.encode(projection)) == {
            "id": 4,
            "name": "mocha",
            "price": "15000",
        }

    def test_round_trip(self, codec: ProjectionCodec) -> None:
        """Projection survives encode/decode."""
        projection = CoffeeProjection(id=4, name="mocha", price=Money.of_minor("TWD", 15000))
        assert codec.decode(codec.encode(projection)) == projection

    def test_absent_price_round_trip(self, codec: ProjectionCodec) -> None:
        """A missing price is kept as missing, not zero."""
        projection = CoffeeProjection(id=9, name="water", price=None)
        assert orjson.loads(codec.encode(projection))["price"] == ""
        assert codec.decode(codec.encode(projection)).price is None

    @pytest.mark.parametrize(
        "payload",
        [
            b"",
            b"not json",
            b"[]",
            b'{"name": "mocha", "price": "1"}',
            b'{"id": "4", "name": "mocha", "price": "1"}',
            b'{"id": true, "name": "mocha", "price": "1"}',
            b'{"id": 4, "price": "1"}',
            b'{"id": 4, "name": "mocha"}',
            b'{"id": 4, "name": "mocha", "price": 15000}',
            b'{"id": 4, "name": "mocha", "price": "15.0"}',
        ],
    )
    def test_decode_rejects_bad_payloads(self, codec: ProjectionCodec, payload: bytes) -> None:
        """Corrupt cache entries raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode(payload)

    def test_decode_rejects_oversized_price(self, codec: ProjectionCodec) -> None:
        """A price too long to convert is reported as a corrupt entry."""
        payload = orjson.dumps({"id": 4, "name": "mocha", "price": "9" * 5000})
        with pytest.raises(DecodeError):
            codec.decode(payload)


class TestCoffeeProjection:
    """Test projection of full coffees."""

    def test_drops_bookkeeping(self, mocha: Coffee) -> None:
        """Projection keeps id, name and price only."""
        projection = CoffeeProjection.from_entity(mocha)
        entity = projection.to_entity()

        assert (entity.id, entity.name, entity.price) == (mocha.id, mocha.name, mocha.price)
        assert mocha.create_time is not None
        assert entity.create_time is None
        assert entity.update_time is None
