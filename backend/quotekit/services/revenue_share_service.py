"""Split a project total between active team members.

Whatever share the members do not claim goes to a synthesized ``Company``
participant appended last. Each amount is rounded on its own, so the sum of
the allocations may drift from the project total by up to one unit per line;
that drift is reported, never corrected.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from quotekit.services.currency_service import BASE_CURRENCY, round_money
from quotekit.services.errors import (
    InvalidShare,
    NoParticipants,
    OverAllocated,
    PricingError,
)

HUNDRED = Decimal("100")

COMPANY_ID = "company"
COMPANY_NAME = "Company"
COMPANY_ROLE = "Business"
HOME_COUNTRY = "India"


@dataclass(frozen=True, slots=True)
class Participant:
    id: str
    name: str
    share_percentage: Decimal
    role: str = ""
    active: bool = True
    country: str = ""


@dataclass(frozen=True, slots=True)
class LocalEquivalent:
    currency: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class ShareAllocation:
    participant_id: str
    name: str
    role: str
    percentage: Decimal
    amount: Decimal
    country: str = ""
    local_equivalent: LocalEquivalent | None = None

    @property
    def is_company(self) -> bool:
        return self.participant_id == COMPANY_ID

    def to_dict(self) -> dict[str, Any]:
        local = self.local_equivalent
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "role": self.role,
            "country": self.country,
            "percentage": str(self.percentage),
            "amount": str(self.amount),
            "local_equivalent": (
                None
                if local is None
                else {"currency": local.currency, "amount": str(local.amount)}
            ),
        }


@dataclass(frozen=True, slots=True)
class ShareSummary:
    project_total: Decimal
    allocated: Decimal
    drift: Decimal
    participants: int


def _validate_share(participant: Participant) -> Decimal:
    share = Decimal(participant.share_percentage)
    if not share.is_finite() or share <= 0 or share > HUNDRED:
        raise InvalidShare(
            f"Share for {participant.name} must be between 0 and 100 (got {share})"
        )
    return share


def allocate(
    project_total: Decimal,
    participants: Iterable[Participant],
    *,
    local_total: Decimal | None = None,
    local_currency: str | None = None,
    home_country: str = HOME_COUNTRY,
    base_currency: str = BASE_CURRENCY,
) -> list[ShareAllocation]:
    """Allocate ``project_total`` (base currency) by share percentage.

    Inactive participants are ignored entirely. When the project was billed in
    a non-base ``local_currency``, members outside ``home_country`` also get
    their share of ``local_total`` in that currency for reference.
    """
    project_total = Decimal(project_total)
    if project_total <= 0:
        raise PricingError("Please enter a valid project total")

    active = [member for member in participants if member.active]
    if not active:
        raise NoParticipants()

    shares = [_validate_share(member) for member in active]
    total_share = sum(shares, Decimal("0"))
    if total_share > HUNDRED:
        raise OverAllocated(total_share)

    show_local = (
        local_total is not None
        and local_currency is not None
        and local_currency.upper() != base_currency
    )

    allocations: list[ShareAllocation] = []
    for member, share in zip(active, shares):
        local = None
        if show_local and member.country and member.country != home_country:
            local = LocalEquivalent(
                currency=local_currency.upper(),
                amount=round_money(share / HUNDRED * Decimal(local_total)),
            )
        allocations.append(
            ShareAllocation(
                participant_id=member.id,
                name=member.name,
                role=member.role,
                percentage=share,
                amount=round_money(share / HUNDRED * project_total),
                country=member.country,
                local_equivalent=local,
            )
        )

    remainder = HUNDRED - total_share
    if remainder > 0:
        allocations.append(
            ShareAllocation(
                participant_id=COMPANY_ID,
                name=COMPANY_NAME,
                role=COMPANY_ROLE,
                percentage=remainder,
                amount=round_money(remainder / HUNDRED * project_total),
            )
        )
    return allocations


def summarize(
    project_total: Decimal, allocations: Sequence[ShareAllocation]
) -> ShareSummary:
    """Allocated sum and its drift from the rounded project total."""
    allocated = sum((item.amount for item in allocations), Decimal("0"))
    return ShareSummary(
        project_total=round_money(project_total),
        allocated=allocated,
        drift=allocated - round_money(project_total),
        participants=len(allocations),
    )
