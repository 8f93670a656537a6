"""Rate catalog snapshots and the store that persists operator overrides.

A :class:`RateCatalog` is an immutable value: the pricing engine only ever reads
from the snapshot it is handed. Editing rates produces a new snapshot via
:func:`merge_overrides`, and the store rebuilds a fresh snapshot on every
:func:`load_catalog` call so concurrent calculations never observe a
half-applied edit.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.services import document_service
from quotekit.services.errors import InvalidRate

logger = logging.getLogger(__name__)

CATALOG_DOCUMENT_KEY = "rate_catalog"
SERVICE_LINES = ("web", "design", "video")
CLIENT_MULTIPLIERS = "client_multipliers"

# Pages a multi-page site includes when the catalog has no entry for its type.
DEFAULT_INCLUDED_PAGES = 5

_AMOUNT_TABLES = frozenset(
    {"base_rates", "feature_costs", "backend_costs", "maintenance_costs"}
)
_MULTIPLIER_TABLES = frozenset(
    {
        "complexity_multipliers",
        "timeline_multipliers",
        "revision_multipliers",
        "duration_multipliers",
    }
)
_FRACTION_TABLES = frozenset({"ai_discounts"})
_COUNT_TABLES = frozenset({"included_pages"})
_AMOUNT_SCALARS = frozenset({"extra_page_cost"})


def _frozen(values: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class ServiceRates:
    """Rate tables for a single service line."""

    base_rates: Mapping[str, Decimal]
    feature_costs: Mapping[str, Decimal]
    complexity_multipliers: Mapping[str, Decimal]
    timeline_multipliers: Mapping[str, Decimal]
    revision_multipliers: Mapping[str, Decimal] = field(default_factory=_frozen)
    duration_multipliers: Mapping[str, Decimal] = field(default_factory=_frozen)
    ai_discounts: Mapping[str, Decimal] = field(default_factory=_frozen)
    backend_costs: Mapping[str, Decimal] = field(default_factory=_frozen)
    maintenance_costs: Mapping[str, Decimal] = field(default_factory=_frozen)
    included_pages: Mapping[str, int] = field(default_factory=_frozen)
    extra_page_cost: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for table in fields(self):
            value = getattr(self, table.name)
            if isinstance(value, Mapping):
                if value:
                    data[table.name] = {key: _dump(item) for key, item in value.items()}
            else:
                data[table.name] = _dump(value)
        return data


@dataclass(frozen=True, slots=True)
class RateCatalog:
    """Snapshot of every rate the pricing engine consults."""

    web: ServiceRates
    design: ServiceRates
    video: ServiceRates
    client_multipliers: Mapping[str, Decimal]

    def service(self, service_type: str) -> ServiceRates:
        if service_type not in SERVICE_LINES:
            raise InvalidRate(f"Unknown service line '{service_type}'")
        return getattr(self, service_type)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {line: self.service(line).to_dict() for line in SERVICE_LINES}
        data[CLIENT_MULTIPLIERS] = {
            key: _dump(value) for key, value in self.client_multipliers.items()
        }
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RateCatalog":
        """Build a complete catalog, validating every value."""
        missing = [
            name for name in (*SERVICE_LINES, CLIENT_MULTIPLIERS) if name not in data
        ]
        if missing:
            raise InvalidRate(f"Catalog is missing {', '.join(missing)}")
        lines = {
            line: _build_service_rates(line, data[line]) for line in SERVICE_LINES
        }
        return cls(
            **lines,
            client_multipliers=_frozen(
                _coerce_table(CLIENT_MULTIPLIERS, data[CLIENT_MULTIPLIERS])
            ),
        )


def _dump(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    return value


def _to_decimal(label: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidRate(f"{label} must be a number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidRate(f"{label} must be a number") from exc
    if not number.is_finite():
        raise InvalidRate(f"{label} must be finite")
    return number


def _coerce_value(table: str, key: str, value: Any) -> Decimal | int:
    label = f"{table}.{key}"
    if table in _COUNT_TABLES:
        number = _to_decimal(label, value)
        if number < 0 or number != number.to_integral_value():
            raise InvalidRate(f"{label} must be a whole number of pages")
        return int(number)
    number = _to_decimal(label, value)
    if table in _AMOUNT_TABLES or table in _AMOUNT_SCALARS:
        if number < 0:
            raise InvalidRate(f"{label} must not be negative")
    elif table in _MULTIPLIER_TABLES or table == CLIENT_MULTIPLIERS:
        if number <= 0:
            raise InvalidRate(f"{label} must be a positive multiplier")
    elif table in _FRACTION_TABLES:
        if number < 0 or number >= 1:
            raise InvalidRate(f"{label} must be a fraction in [0, 1)")
    return number


def _coerce_table(table: str, values: Any) -> dict[str, Decimal | int]:
    if not isinstance(values, Mapping):
        raise InvalidRate(f"{table} must be a mapping")
    return {str(key): _coerce_value(table, str(key), item) for key, item in values.items()}


_SERVICE_TABLES = frozenset(item.name for item in fields(ServiceRates))


def _build_service_rates(line: str, data: Any) -> ServiceRates:
    if not isinstance(data, Mapping):
        raise InvalidRate(f"{line} rates must be a mapping")
    unknown = set(data) - _SERVICE_TABLES
    if unknown:
        raise InvalidRate(f"Unknown {line} rate table(s): {', '.join(sorted(unknown))}")
    kwargs: dict[str, Any] = {}
    for table, values in data.items():
        if table in _AMOUNT_SCALARS:
            kwargs[table] = _coerce_value(table, line, values)
        else:
            kwargs[table] = _frozen(_coerce_table(table, values))
    try:
        return ServiceRates(**kwargs)
    except TypeError as exc:
        raise InvalidRate(f"{line} rates are incomplete") from exc


def _merge_service(line: str, rates: ServiceRates, overrides: Any) -> ServiceRates:
    if not isinstance(overrides, Mapping):
        raise InvalidRate(f"{line} overrides must be a mapping")
    unknown = set(overrides) - _SERVICE_TABLES
    if unknown:
        raise InvalidRate(f"Unknown {line} rate table(s): {', '.join(sorted(unknown))}")
    changes: dict[str, Any] = {}
    for table, values in overrides.items():
        if table in _AMOUNT_SCALARS:
            changes[table] = _coerce_value(table, line, values)
            continue
        merged = dict(getattr(rates, table))
        merged.update(_coerce_table(table, values))
        changes[table] = _frozen(merged)
    return replace(rates, **changes)


def merge_overrides(catalog: RateCatalog, overrides: Mapping[str, Any]) -> RateCatalog:
    """Return a new catalog with ``overrides`` applied key by key.

    Keys absent from ``overrides`` keep their current value; new keys inside a
    known table are added. Unknown service lines or tables are rejected.
    """
    unknown = set(overrides) - {*SERVICE_LINES, CLIENT_MULTIPLIERS}
    if unknown:
        raise InvalidRate(f"Unknown rate section(s): {', '.join(sorted(unknown))}")
    changes: dict[str, Any] = {}
    for section, values in overrides.items():
        if section == CLIENT_MULTIPLIERS:
            merged = dict(catalog.client_multipliers)
            merged.update(_coerce_table(CLIENT_MULTIPLIERS, values))
            changes[section] = _frozen(merged)
        else:
            changes[section] = _merge_service(section, catalog.service(section), values)
    return replace(catalog, **changes)


def _deep_merge(current: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(current)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _dump_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: _dump_overrides(value) if isinstance(value, Mapping) else _dump(value)
        for key, value in overrides.items()
    }


DEFAULT_CATALOG = RateCatalog.from_dict(
    {
        "web": {
            "base_rates": {
                "landing": 3000,
                "business": 6000,
                "advanced": 10000,
                "catalog": 12000,
                "ecommerce": 18000,
            },
            "feature_costs": {
                "contactForm": 500,
                "gallery": 1000,
                "responsive": 1500,
                "slideshow": 1200,
                "map": 800,
                "seo": 1500,
                "social": 1000,
                "analytics": 800,
                "firebase": 3500,
                "fireAuth": 2500,
            },
            "complexity_multipliers": {"simple": "0.8", "standard": 1, "complex": "1.3"},
            "timeline_multipliers": {"standard": 1, "rush": "1.2", "urgent": "1.35"},
            "backend_costs": {"none": 0, "basic": 2000, "medium": 5000, "complex": 10000},
            "maintenance_costs": {"none": 0, "basic": 500, "standard": 1000},
            "included_pages": {
                "landing": 1,
                "business": 3,
                "advanced": 6,
                "catalog": 5,
                "ecommerce": 5,
            },
            "extra_page_cost": 800,
        },
        "design": {
            "base_rates": {
                "logo": 5000,
                "branding": 12000,
                "social": 3000,
                "banner": 2500,
                "print": 4000,
                "packaging": 8000,
            },
            "feature_costs": {
                "sourceFiles": 1000,
                "variations": 2000,
                "socialSizes": 1500,
                "printReady": 1000,
            },
            "complexity_multipliers": {"basic": "0.8", "standard": 1, "premium": "1.5"},
            "revision_multipliers": {"standard": 1, "unlimited": "1.3"},
            "timeline_multipliers": {"standard": 1, "rush": "1.2", "urgent": "1.35"},
            "ai_discounts": {"none": 0, "partial": "0.15", "heavy": "0.3"},
        },
        "video": {
            "base_rates": {
                "explainer": 15000,
                "promo": 12000,
                "social": 8000,
                "tutorial": 10000,
                "testimonial": 7000,
                "corporate": 20000,
            },
            "feature_costs": {
                "scriptwriting": 3000,
                "voiceover": 4000,
                "music": 2000,
                "animation": 5000,
                "captions": 1500,
                "multiple-formats": 2500,
            },
            "duration_multipliers": {
                "short": 1,
                "medium": "1.5",
                "long": 2,
                "extended": "2.5",
            },
            "complexity_multipliers": {"basic": "0.8", "standard": 1, "premium": "1.5"},
            "timeline_multipliers": {"standard": 1, "rush": "1.25", "urgent": "1.5"},
            "revision_multipliers": {"standard": 1, "unlimited": "1.4"},
        },
        CLIENT_MULTIPLIERS: {
            "startup": "0.8",
            "standard": "1.0",
            "corporate": "1.3",
            "enterprise": "1.5",
        },
    }
)


async def load_overrides(session: AsyncSession) -> dict[str, Any]:
    return await document_service.get_document(session, CATALOG_DOCUMENT_KEY) or {}


async def load_catalog(session: AsyncSession) -> RateCatalog:
    """Build a fresh snapshot: defaults with stored overrides applied."""
    overrides = await load_overrides(session)
    if not overrides:
        return DEFAULT_CATALOG
    return merge_overrides(DEFAULT_CATALOG, overrides)


async def save_overrides(
    session: AsyncSession, overrides: Mapping[str, Any]
) -> RateCatalog:
    """Validate and persist ``overrides`` on top of any stored ones."""
    combined = _deep_merge(await load_overrides(session), overrides)
    catalog = merge_overrides(DEFAULT_CATALOG, combined)
    await document_service.put_document(
        session, CATALOG_DOCUMENT_KEY, _dump_overrides(combined)
    )
    logger.info("Saved rate overrides for %s", ", ".join(sorted(overrides)) or "nothing")
    return catalog


async def reset_overrides(session: AsyncSession) -> RateCatalog:
    if await document_service.delete_document(session, CATALOG_DOCUMENT_KEY):
        logger.info("Rate overrides cleared; defaults restored")
    return DEFAULT_CATALOG


# Display labels for catalog keys, keyed by (service line, axis). Service line
# ``None`` holds labels shared by every line.
LABELS: dict[tuple[str | None, str], dict[str, str]] = {
    ("web", "variant"): {
        "landing": "Landing Page",
        "business": "Basic Business Site",
        "advanced": "Advanced Business Site",
        "catalog": "Product Catalog",
        "ecommerce": "Simple E-commerce",
    },
    ("design", "variant"): {
        "logo": "Logo Design",
        "branding": "Brand Identity Package",
        "social": "Social Media Graphics",
        "banner": "Website Banner/Header",
        "print": "Print Materials",
        "packaging": "Product Packaging",
    },
    ("video", "variant"): {
        "explainer": "Explainer Video",
        "promo": "Promotional Video",
        "social": "Social Media Video",
        "tutorial": "Tutorial/How-To",
        "testimonial": "Testimonial/Interview",
        "corporate": "Corporate Video",
    },
    ("web", "feature"): {
        "contactForm": "Contact Form",
        "gallery": "Image Gallery",
        "responsive": "Responsive Design",
        "slideshow": "Image Slideshow",
        "map": "Google Maps Integration",
        "seo": "Basic SEO Setup",
        "social": "Social Media Integration",
        "analytics": "Analytics Integration",
        "firebase": "Firebase Backend",
        "fireAuth": "Firebase Authentication",
    },
    ("design", "feature"): {
        "sourceFiles": "Source Files",
        "variations": "Additional Variations",
        "socialSizes": "Social Media Sizes",
        "printReady": "Print-Ready Files",
    },
    ("video", "feature"): {
        "scriptwriting": "Scriptwriting",
        "voiceover": "Professional Voiceover",
        "music": "Licensed Music",
        "animation": "Custom Animation",
        "captions": "Captions/Subtitles",
        "multiple-formats": "Multiple Export Formats",
    },
    ("web", "backend"): {
        "basic": "Basic Backend Integration",
        "medium": "Medium Backend Integration",
        "complex": "Complex Backend Integration",
    },
    ("web", "complexity"): {
        "simple": "Simple Design/Complexity Discount",
        "complex": "Complex Design Premium",
    },
    ("design", "complexity"): {
        "basic": "Simple Design/Complexity Discount",
        "premium": "Premium Design Complexity",
    },
    ("video", "complexity"): {
        "basic": "Basic Production Discount",
        "premium": "Premium Production Complexity",
    },
    ("web", "timeline"): {
        "rush": "Rush Delivery (1-2 weeks)",
        "urgent": "Urgent Delivery (Less than 1 week)",
    },
    ("design", "timeline"): {
        "rush": "Rush Delivery (2-4 days)",
        "urgent": "Urgent Delivery (24-48 hours)",
    },
    ("video", "timeline"): {
        "rush": "Rush Delivery (3-5 days)",
        "urgent": "Urgent Delivery (1-2 days)",
    },
    (None, "revisions"): {"unlimited": "Unlimited Revisions"},
    ("video", "duration"): {
        "medium": "Medium Duration (1-3 minutes)",
        "long": "Long Duration (3-5 minutes)",
        "extended": "Extended Duration (5+ minutes)",
    },
    ("design", "ai"): {
        "partial": "Partial AI Assistance Discount",
        "heavy": "Heavy AI Assistance Discount",
    },
    ("web", "maintenance"): {
        "basic": "Basic Maintenance Package",
        "standard": "Standard Maintenance Package",
    },
    (None, "client"): {
        "startup": "Startup/Small Business Discount",
        "corporate": "Corporate Client Premium",
        "enterprise": "Enterprise Client Premium",
    },
}

_FALLBACK_SUFFIXES = {
    "backend": "Backend Integration",
    "complexity": "Complexity",
    "timeline": "Delivery",
    "revisions": "Revisions",
    "duration": "Duration",
    "ai": "AI Assistance Discount",
    "maintenance": "Maintenance Package",
    "client": "Client Adjustment",
}

_WORD_BREAK = re.compile(r"[-_\s]+|(?<=[a-z0-9])(?=[A-Z])")


def titleize(key: str) -> str:
    """``fireAuth`` -> ``Fire Auth``; ``multiple-formats`` -> ``Multiple Formats``."""
    words = [word for word in _WORD_BREAK.split(key) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def label_for(service_type: str, axis: str, key: str) -> str:
    """Human label for a catalog key, with a title-cased fallback."""
    for scope in (service_type, None):
        label = LABELS.get((scope, axis), {}).get(key)
        if label is not None:
            return label
    suffix = _FALLBACK_SUFFIXES.get(axis)
    return f"{titleize(key)} {suffix}" if suffix else titleize(key)
