from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.schemas.subscription import SubscriptionCreate

VALID = {
    "name": "Spotify",
    "price": "9.99",
    "currency": "USD",
    "cycle": "monthly",
    "next_payment": "2026-11-01",
}


def test_valid_payload():
    data = SubscriptionCreate(**VALID)
    assert data.price == Decimal("9.99")
    assert data.next_payment == date(2026, 11, 1)
    assert data.category is None


def test_currency_defaults_to_jpy():
    payload = {k: v for k, v in VALID.items() if k != "currency"}
    assert SubscriptionCreate(**payload).currency == "JPY"


def test_name_is_trimmed():
    assert SubscriptionCreate(**{**VALID, "name": "  Hulu "}).name == "Hulu"


@pytest.mark.parametrize(
    "field,value",
    [
        ("name", ""),
        ("name", "   "),
        ("price", "0"),
        ("price", "-5"),
        ("price", "NaN"),
        ("currency", "GBP"),
        ("cycle", "weekly"),
        ("next_payment", "1999-12-31"),
        ("next_payment", "not-a-date"),
    ],
)
def test_invalid_field_rejected(field, value):
    with pytest.raises(ValidationError) as exc_info:
        SubscriptionCreate(**{**VALID, field: value})
    assert any(err["loc"][0] == field for err in exc_info.value.errors())


@pytest.mark.parametrize(
    "currency,price",
    [
        ("USD", "1e30"),
        ("USD", "21474837"),
        ("JPY", "2147483648"),
    ],
)
def test_price_must_fit_integer_column(currency, price):
    with pytest.raises(ValidationError) as exc_info:
        SubscriptionCreate(**{**VALID, "currency": currency, "price": price})
    assert [err["loc"] for err in exc_info.value.errors()] == [("price",)]


def test_largest_storable_price_accepted():
    assert SubscriptionCreate(**{**VALID, "currency": "USD", "price": "21474836.47"}).price == Decimal("21474836.47")
    assert SubscriptionCreate(**{**VALID, "currency": "JPY", "price": "2147483647"}).currency == "JPY"
