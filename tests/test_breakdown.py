from __future__ import annotations

from decimal import Decimal

import pytest

from apps.core.exceptions import ValidationFailed
from apps.gigs.breakdown import parse_amount, parse_breakdown, serialize_breakdown, validate_breakdown


def test_valid_breakdown_is_sorted_and_normalized():
    tiers = parse_breakdown([{"place": 2, "amount": 300}, {"place": 1, "amount": "700"}])

    assert validate_breakdown(tiers, "1000") == Decimal("1000.00")
    assert serialize_breakdown(tiers) == [
        {"place": 1, "amount": "700.00"},
        {"place": 2, "amount": "300.00"},
    ]


@pytest.mark.parametrize(
    "raw,total,message",
    [
        ([{"place": 1, "amount": 700}, {"place": 2, "amount": 200}], "1000", "equal the total"),
        ([{"place": 1, "amount": 500}, {"place": 3, "amount": 500}], "1000", "without gaps"),
        ([{"place": 1, "amount": 500}, {"place": 1, "amount": 500}], "1000", "unique"),
        ([], "1000", "At least one prize"),
        ([{"place": 1, "amount": "0.5"}], "0.5", "at least 1"),
    ],
)
def test_invalid_breakdowns_are_rejected(raw, total, message):
    with pytest.raises(ValidationFailed) as excinfo:
        validate_breakdown(parse_breakdown(raw), total)
    assert message in str(excinfo.value.detail)


@pytest.mark.parametrize("value", [-1, "abc", None, True, "1.001", "NaN", "1e30", "10000000000000000"])
def test_parse_amount_rejects_bad_values(value):
    with pytest.raises(ValidationFailed):
        parse_amount(value)


@pytest.mark.parametrize(
    "raw",
    [
        "not-a-list",
        {"place": 1},
        [{"place": 0, "amount": 1}],
        [{"place": 1.5, "amount": 1}],
        [{"place": 1, "amount": "1e30"}],
    ],
)
def test_parse_breakdown_rejects_malformed_input(raw):
    with pytest.raises(ValidationFailed):
        parse_breakdown(raw)


def test_largest_storable_amount_is_accepted():
    assert parse_amount("9999999999999999.99") == Decimal("9999999999999999.99")
