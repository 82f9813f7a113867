"""
Prize breakdown rules.

A breakdown is an ordered list of ``{place, amount}`` tiers. Places are unique
and dense from 1, amounts are non-negative with two decimal places, and the
amounts add up to the gig's total bounty.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping

from apps.core.exceptions import ValidationFailed

CENT = Decimal("0.01")
# Matches DecimalField(max_digits=18, decimal_places=2).
MAX_INTEGER_DIGITS = 16


@dataclass(frozen=True)
class PrizeTier:
    place: int
    amount: Decimal

    def as_dict(self) -> dict:
        return {"place": self.place, "amount": str(self.amount)}


def parse_amount(value: Any, *, field: str = "amount") -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationFailed(f"{field} must be a number.")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationFailed(f"{field} must be a number.") from None
    if not amount.is_finite():
        raise ValidationFailed(f"{field} must be a finite number.")
    if amount < 0:
        raise ValidationFailed(f"{field} must be 0 or greater.")
    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValidationFailed(f"{field} is too large.")
    try:
        quantized = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationFailed(f"{field} is too large.") from None
    if quantized != amount:
        raise ValidationFailed(f"{field} supports at most two decimal places.")
    return quantized


def parse_place(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationFailed("place must be a positive integer.")
    try:
        place = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed("place must be a positive integer.") from None
    if place != value and str(place) != str(value).strip():
        raise ValidationFailed("place must be a positive integer.")
    if place < 1:
        raise ValidationFailed("place must be a positive integer.")
    return place


def parse_breakdown(raw: Iterable[Mapping[str, Any]] | None) -> List[PrizeTier]:
    if raw is None or isinstance(raw, (str, bytes, Mapping)):
        raise ValidationFailed("bounty_breakdown must be a list of prizes.")
    tiers: List[PrizeTier] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise ValidationFailed("Each prize needs a place and an amount.")
        tiers.append(PrizeTier(place=parse_place(entry.get("place")), amount=parse_amount(entry.get("amount"))))
    return sorted(tiers, key=lambda tier: tier.place)


def validate_breakdown(tiers: List[PrizeTier], total_bounty: Any) -> Decimal:
    """Check the breakdown invariants and return the normalized total."""
    total = parse_amount(total_bounty, field="total_bounty")
    if total < 1:
        raise ValidationFailed("total_bounty must be at least 1.")
    if not tiers:
        raise ValidationFailed("At least one prize is required.")
    places = [tier.place for tier in tiers]
    if len(set(places)) != len(places):
        raise ValidationFailed("Prize places must be unique.")
    if sorted(places) != list(range(1, len(places) + 1)):
        raise ValidationFailed("Prize places must run 1, 2, 3... without gaps.")
    breakdown_total = sum((tier.amount for tier in tiers), Decimal("0"))
    if breakdown_total != total:
        raise ValidationFailed("Total breakdown amount must equal the total bounty.")
    return total


def serialize_breakdown(tiers: Iterable[PrizeTier]) -> List[dict]:
    return [tier.as_dict() for tier in sorted(tiers, key=lambda tier: tier.place)]


def tiers_by_place(raw: Iterable[Mapping[str, Any]]) -> dict[int, Decimal]:
    return {tier.place: tier.amount for tier in parse_breakdown(raw)}
