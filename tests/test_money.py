from decimal import Decimal

import pytest

from trip_ledger import config
from trip_ledger.errors import ValidationError
from trip_ledger.money import format_compact, format_money, round2, to_money, within_tolerance


@pytest.mark.parametrize("raw,expected", [
    ("12.5", Decimal("12.5")),
    (" ₹1,250.00 ", Decimal("1250.00")),
    ("$3", Decimal("3")),
    (7, Decimal("7")),
    (0.1, Decimal("0.1")),
    (Decimal("2.345"), Decimal("2.345")),
])
def test_to_money(raw, expected):
    assert to_money(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_to_money_empty(raw):
    assert to_money(raw) is None


@pytest.mark.parametrize("raw", ["abc", "1.2.3", "NaN", "inf", True])
def test_to_money_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        to_money(raw)


def test_round2_half_up():
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("-2.345")) == Decimal("-2.35")
    assert round2(Decimal("33.3333")) == Decimal("33.33")


def test_format_money():
    assert format_money(Decimal("5")) == "5.00"
    assert format_money(Decimal("0.005")) == "0.01"


def test_tolerance_is_one_cent_inclusive():
    assert within_tolerance(Decimal("99.99"), Decimal("100"))
    assert not within_tolerance(Decimal("99.98"), Decimal("100"))


def test_category_config():
    names = config.category_names()
    assert names["food"] == "Food & Dining"
    assert config.category_label("food") == "Food & Dining"
    assert config.category_label("snorkelling") == "snorkelling"
    assert config.currency_symbol() == "₹"


@pytest.mark.parametrize("raw,expected", [
    ("999.5", "999.50"),
    ("1000", "1.00K"),
    ("1250", "1.25K"),
    ("3400000", "3.40M"),
    ("7250000000", "7.25B"),
    ("1500000000000", "1.50T"),
    ("-2500", "-2.50K"),
])
def test_format_compact(raw, expected):
    assert format_compact(Decimal(raw)) == expected
