"""Custom discounts applied on top of a computed quote total."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from quotekit.services.currency_service import round_money
from quotekit.services.errors import InvalidDiscount
from quotekit.services.pricing_service import BreakdownLine, LineKind

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True, slots=True)
class DiscountSpec:
    kind: DiscountKind
    amount: Decimal

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiscountSpec":
        try:
            kind = DiscountKind(data["kind"])
            amount = Decimal(str(data["amount"]))
        except (KeyError, ValueError, InvalidOperation) as exc:
            raise InvalidDiscount("Discount needs a kind and a numeric amount") from exc
        return cls(kind=kind, amount=amount)


@dataclass(frozen=True, slots=True)
class DiscountResult:
    """Discounted total plus the line that explains it."""

    original_total: Decimal
    total: Decimal
    line: BreakdownLine

    @property
    def saved(self) -> Decimal:
        return self.original_total - self.total


def _format_number(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def apply_discount(total: Decimal, spec: DiscountSpec) -> DiscountResult:
    """Apply ``spec`` to ``total``.

    Percentages must lie in (0, 100]. A fixed amount must be positive and
    strictly below the total it reduces.
    """
    amount = spec.amount
    if not amount.is_finite() or amount <= 0:
        raise InvalidDiscount("Please enter a valid discount amount")

    if spec.kind is DiscountKind.PERCENTAGE:
        if amount > HUNDRED:
            raise InvalidDiscount("Percentage discount cannot exceed 100%")
        discounted = round_money(total * (1 - amount / HUNDRED))
        line = BreakdownLine(
            label=f"Custom Discount ({_format_number(amount)}%)",
            kind=LineKind.DISCOUNT,
            amount=discounted - total,
            percent=-amount,
        )
    else:
        if amount >= total:
            raise InvalidDiscount("Fixed discount cannot exceed the total amount")
        discounted = total - amount
        line = BreakdownLine(
            label="Custom Discount (Fixed Amount)",
            kind=LineKind.DISCOUNT,
            amount=-amount,
        )

    logger.debug("Discount %s %s applied: %s -> %s", spec.kind.value, amount, total, discounted)
    return DiscountResult(original_total=total, total=discounted, line=line)


def with_discount(
    breakdown: Iterable[BreakdownLine], line: BreakdownLine | None
) -> tuple[BreakdownLine, ...]:
    """Replace any previous discount line with ``line`` (or just drop it)."""
    kept = [item for item in breakdown if item.kind is not LineKind.DISCOUNT]
    if line is not None:
        kept.append(line)
    return tuple(kept)
