"""Validation failures raised by the pricing core.

Every error is a ``ValueError`` so routers can surface them as HTTP 400 the
same way other service-level validation failures are reported.
"""

from __future__ import annotations

from decimal import Decimal


class PricingError(ValueError):
    """Base class for local, non-retryable pricing failures."""


class UnknownVariant(PricingError):
    """A selection key is not present in the rate catalog."""

    def __init__(self, axis: str, key: str) -> None:
        self.axis = axis
        self.key = key
        super().__init__(f"Unknown {axis} '{key}'")


class InvalidDiscount(PricingError):
    """A discount is out of bounds for the quote it is applied to."""


class InvalidShare(PricingError):
    """A revenue share percentage lies outside (0, 100]."""


class OverAllocated(PricingError):
    """Active participants claim more than 100% of the revenue."""

    def __init__(self, total_share: Decimal) -> None:
        self.total_share = total_share
        super().__init__(
            f"Total share percentage {total_share}% exceeds 100%. "
            "Please adjust team member shares."
        )


class NoParticipants(PricingError):
    """No active participant is available for revenue sharing."""

    def __init__(self) -> None:
        super().__init__(
            "No active team members found. Please activate team members first."
        )


class InvalidRate(PricingError):
    """A catalog or exchange rate value violates its bounds."""


class UnknownCurrency(PricingError):
    """A currency code has no entry in the exchange-rate table."""

    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(f"No exchange rate for currency '{currency}'")


__all__ = [
    "InvalidDiscount",
    "InvalidRate",
    "InvalidShare",
    "NoParticipants",
    "OverAllocated",
    "PricingError",
    "UnknownCurrency",
    "UnknownVariant",
]
