"""Pricing engine for web, design and video quotes.

Each service line composes its price the same way: a base rate plus additive
adjustments gives the subtotal, and every multiplier factors that same
subtotal. The total is rounded once, at the very end. Breakdown deltas for
percentage lines are rounded independently and are informational only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Union

from quotekit.services.currency_service import (
    BASE_CURRENCY,
    FALLBACK_RATES,
    format_currency,
    round_money,
)
from quotekit.services.errors import PricingError, UnknownVariant
from quotekit.services.rate_catalog_service import (
    DEFAULT_INCLUDED_PAGES,
    RateCatalog,
    ServiceRates,
    label_for,
)

ONE = Decimal("1")
HUNDRED = Decimal("100")


class LineKind(str, Enum):
    """How a breakdown line's amount should be read."""

    AMOUNT = "amount"
    PERCENTAGE = "percentage"
    RECURRING = "recurring"
    DISCOUNT = "discount"


@dataclass(frozen=True, slots=True)
class BreakdownLine:
    """One itemized entry of a quote, in display order."""

    label: str
    kind: LineKind
    amount: Decimal
    percent: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind.value,
            "amount": str(self.amount),
            "percent": None if self.percent is None else str(self.percent),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BreakdownLine":
        percent = data.get("percent")
        return cls(
            label=str(data["label"]),
            kind=LineKind(data.get("kind", LineKind.AMOUNT.value)),
            amount=Decimal(str(data["amount"])),
            percent=None if percent is None else Decimal(str(percent)),
        )


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Computed price for a single request."""

    service_type: str
    breakdown: tuple[BreakdownLine, ...]
    subtotal: Decimal
    total: Decimal
    recurring_monthly: Decimal = Decimal("0")
    multiplier: Decimal = ONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_type": self.service_type,
            "breakdown": [line.to_dict() for line in self.breakdown],
            "subtotal": str(self.subtotal),
            "total": str(self.total),
            "recurring_monthly": str(self.recurring_monthly),
            "multiplier": str(self.multiplier),
        }


@dataclass(frozen=True, slots=True)
class WebQuoteRequest:
    site_type: str
    pages: int = 1
    features: frozenset[str] = field(default_factory=frozenset)
    complexity: str = "standard"
    backend: str = "none"
    timeline: str = "standard"
    maintenance: str = "none"
    client_profile: str = "standard"

    service_type: ClassVar[str] = "web"


@dataclass(frozen=True, slots=True)
class DesignQuoteRequest:
    design_type: str
    features: frozenset[str] = field(default_factory=frozenset)
    complexity: str = "standard"
    revisions: str = "standard"
    timeline: str = "standard"
    ai_assistance: str = "none"
    client_profile: str = "standard"

    service_type: ClassVar[str] = "design"


@dataclass(frozen=True, slots=True)
class VideoQuoteRequest:
    video_type: str
    duration: str = "short"
    features: frozenset[str] = field(default_factory=frozenset)
    complexity: str = "standard"
    timeline: str = "standard"
    revisions: str = "standard"
    client_profile: str = "standard"

    service_type: ClassVar[str] = "video"


QuoteRequest = Union[WebQuoteRequest, DesignQuoteRequest, VideoQuoteRequest]

REQUEST_TYPES: dict[str, type] = {
    "web": WebQuoteRequest,
    "design": DesignQuoteRequest,
    "video": VideoQuoteRequest,
}


def _lookup(table: Mapping[str, Any], axis: str, key: str) -> Any:
    try:
        return table[key]
    except (KeyError, TypeError):
        raise UnknownVariant(axis, str(key)) from None


def _percent(multiplier: Decimal) -> Decimal:
    return (multiplier - ONE) * HUNDRED


def _adjustment(
    service_type: str, axis: str, key: str, multiplier: Decimal, subtotal: Decimal
) -> BreakdownLine | None:
    if multiplier == ONE:
        return None
    return BreakdownLine(
        label=label_for(service_type, axis, key),
        kind=LineKind.PERCENTAGE,
        amount=round_money(subtotal * (multiplier - ONE)),
        percent=_percent(multiplier),
    )


def _feature_lines(
    service_type: str, rates: ServiceRates, selected: Iterable[str]
) -> list[BreakdownLine]:
    chosen = set(selected)
    return [
        BreakdownLine(label_for(service_type, "feature", key), LineKind.AMOUNT, cost)
        for key, cost in rates.feature_costs.items()
        if key in chosen and cost
    ]


def _base_line(service_type: str, variant: str, amount: Decimal) -> BreakdownLine:
    label = label_for(service_type, "variant", variant)
    return BreakdownLine(f"Base Price ({label})", LineKind.AMOUNT, amount)


def _finish(
    service_type: str,
    subtotal: Decimal,
    multipliers: Iterable[Decimal],
    lines: Iterable[BreakdownLine | None],
    *,
    recurring_monthly: Decimal = Decimal("0"),
) -> PriceQuote:
    product = ONE
    for factor in multipliers:
        product *= factor
    return PriceQuote(
        service_type=service_type,
        breakdown=tuple(line for line in lines if line is not None),
        subtotal=subtotal,
        total=round_money(subtotal * product),
        recurring_monthly=recurring_monthly,
        multiplier=product,
    )


def included_pages(rates: ServiceRates, site_type: str) -> int:
    """Pages covered by the base rate; a landing page always includes one."""
    if site_type == "landing":
        return 1
    return int(rates.included_pages.get(site_type, DEFAULT_INCLUDED_PAGES))


def quote_web(catalog: RateCatalog, request: WebQuoteRequest) -> PriceQuote:
    rates = catalog.web
    base = _lookup(rates.base_rates, "site type", request.site_type)
    extra_pages = max(0, request.pages - included_pages(rates, request.site_type))
    page_cost = extra_pages * rates.extra_page_cost
    backend_cost = _lookup(rates.backend_costs, "backend tier", request.backend)
    features = _feature_lines("web", rates, request.features)
    complexity = _lookup(rates.complexity_multipliers, "complexity", request.complexity)
    timeline = _lookup(rates.timeline_multipliers, "timeline", request.timeline)
    maintenance = _lookup(
        rates.maintenance_costs, "maintenance plan", request.maintenance
    )
    client = _lookup(catalog.client_multipliers, "client profile", request.client_profile)

    subtotal = base + page_cost + backend_cost + sum(
        (line.amount for line in features), Decimal("0")
    )

    lines: list[BreakdownLine | None] = [_base_line("web", request.site_type, base)]
    if page_cost:
        lines.append(
            BreakdownLine(f"Additional Pages ({extra_pages})", LineKind.AMOUNT, page_cost)
        )
    if backend_cost:
        lines.append(
            BreakdownLine(
                label_for("web", "backend", request.backend), LineKind.AMOUNT, backend_cost
            )
        )
    lines.extend(features)
    lines.append(_adjustment("web", "complexity", request.complexity, complexity, subtotal))
    lines.append(_adjustment("web", "timeline", request.timeline, timeline, subtotal))
    if maintenance:
        lines.append(
            BreakdownLine(
                label_for("web", "maintenance", request.maintenance),
                LineKind.RECURRING,
                maintenance,
            )
        )
    lines.append(_adjustment("web", "client", request.client_profile, client, subtotal))

    return _finish(
        "web",
        subtotal,
        (complexity, timeline, client),
        lines,
        recurring_monthly=maintenance,
    )


def quote_design(catalog: RateCatalog, request: DesignQuoteRequest) -> PriceQuote:
    rates = catalog.design
    base = _lookup(rates.base_rates, "design type", request.design_type)
    features = _feature_lines("design", rates, request.features)
    complexity = _lookup(rates.complexity_multipliers, "complexity", request.complexity)
    revisions = _lookup(rates.revision_multipliers, "revision policy", request.revisions)
    timeline = _lookup(rates.timeline_multipliers, "timeline", request.timeline)
    ai_discount = _lookup(rates.ai_discounts, "AI assistance level", request.ai_assistance)
    client = _lookup(catalog.client_multipliers, "client profile", request.client_profile)

    subtotal = base + sum((line.amount for line in features), Decimal("0"))
    ai_factor = ONE - ai_discount

    lines: list[BreakdownLine | None] = [_base_line("design", request.design_type, base)]
    lines.extend(features)
    lines.append(
        _adjustment("design", "complexity", request.complexity, complexity, subtotal)
    )
    lines.append(_adjustment("design", "revisions", request.revisions, revisions, subtotal))
    lines.append(_adjustment("design", "timeline", request.timeline, timeline, subtotal))
    lines.append(_adjustment("design", "ai", request.ai_assistance, ai_factor, subtotal))
    lines.append(
        _adjustment("design", "client", request.client_profile, client, subtotal)
    )

    return _finish(
        "design", subtotal, (complexity, revisions, timeline, ai_factor, client), lines
    )


def quote_video(catalog: RateCatalog, request: VideoQuoteRequest) -> PriceQuote:
    rates = catalog.video
    base = _lookup(rates.base_rates, "video type", request.video_type)
    duration = _lookup(rates.duration_multipliers, "duration", request.duration)
    features = _feature_lines("video", rates, request.features)
    complexity = _lookup(rates.complexity_multipliers, "complexity", request.complexity)
    timeline = _lookup(rates.timeline_multipliers, "timeline", request.timeline)
    revisions = _lookup(rates.revision_multipliers, "revision policy", request.revisions)
    client = _lookup(catalog.client_multipliers, "client profile", request.client_profile)

    subtotal = base + sum((line.amount for line in features), Decimal("0"))

    # Duration scales the whole production, so it sits with the quantity lines.
    lines: list[BreakdownLine | None] = [
        _base_line("video", request.video_type, base),
        _adjustment("video", "duration", request.duration, duration, subtotal),
    ]
    lines.extend(features)
    lines.append(
        _adjustment("video", "complexity", request.complexity, complexity, subtotal)
    )
    lines.append(_adjustment("video", "revisions", request.revisions, revisions, subtotal))
    lines.append(_adjustment("video", "timeline", request.timeline, timeline, subtotal))
    lines.append(_adjustment("video", "client", request.client_profile, client, subtotal))

    return _finish(
        "video", subtotal, (duration, complexity, revisions, timeline, client), lines
    )


def calculate_quote(catalog: RateCatalog, request: QuoteRequest) -> PriceQuote:
    """Dispatch ``request`` to the engine for its service line."""
    if isinstance(request, WebQuoteRequest):
        return quote_web(catalog, request)
    if isinstance(request, DesignQuoteRequest):
        return quote_design(catalog, request)
    if isinstance(request, VideoQuoteRequest):
        return quote_video(catalog, request)
    raise PricingError(f"Unsupported quote request {type(request).__name__}")


def _selected_features(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, Mapping):
        keys = [key for key, enabled in value.items() if enabled]
    elif isinstance(value, str):
        keys = [value]
    elif isinstance(value, (list, tuple, set, frozenset)):
        keys = list(value)
    else:
        raise PricingError("Features must be a list of names or a mapping of flags")
    if not all(isinstance(key, str) for key in keys):
        raise PricingError("Feature names must be text")
    return frozenset(keys)


def _page_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise PricingError("Page count must be a whole number")
    try:
        pages = int(value)
    except ValueError:
        raise PricingError("Page count must be a whole number") from None
    if pages < 1:
        raise PricingError("Page count must be at least 1")
    return pages


def request_from_dict(service_type: str, data: Mapping[str, Any]) -> QuoteRequest:
    """Build a request from stored or submitted plain data.

    ``features`` may be a list of selected keys or a mapping of flags.
    Keys that are not request fields are ignored; every other selection must
    be a string.
    """
    request_type = REQUEST_TYPES.get(service_type)
    if request_type is None:
        raise PricingError(f"Unknown service type '{service_type}'")
    names = {item.name for item in fields(request_type)}
    values = {key: value for key, value in data.items() if key in names}
    values["features"] = _selected_features(values.get("features"))
    if "pages" in values:
        values["pages"] = _page_count(values["pages"])
    for key, value in values.items():
        if key not in {"features", "pages"} and not isinstance(value, str):
            raise PricingError(f"Selection '{key}' must be text")
    try:
        return request_type(**values)
    except TypeError as exc:
        raise PricingError(f"Incomplete {service_type} request") from exc


def request_to_dict(request: QuoteRequest) -> dict[str, Any]:
    data = {item.name: getattr(request, item.name) for item in fields(request)}
    data["features"] = sorted(request.features)
    return data


def _format_percent(value: Decimal) -> str:
    text = f"{abs(value).quantize(Decimal('0.01')):f}".rstrip("0").rstrip(".")
    return f"{'-' if value < 0 else '+'}{text}%"


def display_value(
    line: BreakdownLine,
    currency: str | None = None,
    rates: Mapping[str, Decimal] = FALLBACK_RATES,
    *,
    base_currency: str = BASE_CURRENCY,
) -> str:
    """Render a line's amount the way a breakdown table shows it.

    ``currency`` defaults to ``base_currency``, the unit line amounts are in.
    """
    code = currency or base_currency

    def money(amount: Decimal) -> str:
        return format_currency(amount, code, rates, base_currency=base_currency)

    if line.kind is LineKind.RECURRING:
        return f"{money(line.amount)}/month"
    if line.percent is not None:
        return f"{_format_percent(line.percent)} ({money(abs(line.amount))})"
    if line.kind is LineKind.DISCOUNT:
        return f"-{money(abs(line.amount))}"
    return money(line.amount)
