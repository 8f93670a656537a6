"""Tests for the pricing engine."""

from __future__ import annotations

from decimal import Decimal

import pytest

from quotekit.services.errors import PricingError, UnknownVariant
from quotekit.services.pricing_service import (
    BreakdownLine,
    DesignQuoteRequest,
    LineKind,
    VideoQuoteRequest,
    WebQuoteRequest,
    calculate_quote,
    display_value,
    quote_design,
    quote_video,
    quote_web,
    request_from_dict,
    request_to_dict,
)
from quotekit.services.rate_catalog_service import DEFAULT_CATALOG, merge_overrides


def _labels(quote) -> list[str]:
    return [line.label for line in quote.breakdown]


def test_business_site_example() -> None:
    request = WebQuoteRequest(
        site_type="business",
        pages=5,
        backend="medium",
        features=frozenset({"responsive"}),
    )

    quote = quote_web(DEFAULT_CATALOG, request)

    assert quote.subtotal == Decimal("14100")
    assert quote.total == Decimal("14100")
    assert quote.recurring_monthly == 0
    assert _labels(quote) == [
        "Base Price (Basic Business Site)",
        "Additional Pages (2)",
        "Medium Backend Integration",
        "Responsive Design",
    ]
    assert [line.amount for line in quote.breakdown] == [
        Decimal("6000"),
        Decimal("1600"),
        Decimal("5000"),
        Decimal("1500"),
    ]


def test_logo_example_applies_every_multiplier_to_subtotal() -> None:
    request = DesignQuoteRequest(
        design_type="logo",
        complexity="premium",
        ai_assistance="heavy",
        client_profile="corporate",
    )

    quote = quote_design(DEFAULT_CATALOG, request)

    assert quote.subtotal == Decimal("5000")
    assert quote.total == Decimal("6825")
    assert _labels(quote) == [
        "Base Price (Logo Design)",
        "Premium Design Complexity",
        "Heavy AI Assistance Discount",
        "Corporate Client Premium",
    ]
    ai_line = quote.breakdown[2]
    assert ai_line.kind is LineKind.PERCENTAGE
    assert ai_line.percent == Decimal("-30")
    assert ai_line.amount == Decimal("-1500")


def test_web_breakdown_follows_display_order() -> None:
    request = WebQuoteRequest(
        site_type="business",
        pages=5,
        backend="medium",
        features=frozenset({"seo", "responsive"}),
        complexity="complex",
        timeline="rush",
        maintenance="basic",
        client_profile="corporate",
    )

    quote = quote_web(DEFAULT_CATALOG, request)

    assert _labels(quote) == [
        "Base Price (Basic Business Site)",
        "Additional Pages (2)",
        "Medium Backend Integration",
        "Responsive Design",
        "Basic SEO Setup",
        "Complex Design Premium",
        "Rush Delivery (1-2 weeks)",
        "Basic Maintenance Package",
        "Corporate Client Premium",
    ]
    assert quote.subtotal == Decimal("15600")
    # 15600 * 1.3 * 1.2 * 1.3 = 31636.8
    assert quote.total == Decimal("31637")
    assert quote.recurring_monthly == Decimal("500")

    complexity, timeline, maintenance, client = quote.breakdown[5:]
    assert (complexity.percent, complexity.amount) == (Decimal("30"), Decimal("4680"))
    assert (timeline.percent, timeline.amount) == (Decimal("20"), Decimal("3120"))
    assert maintenance.kind is LineKind.RECURRING
    assert maintenance.amount == Decimal("500")
    assert client.amount == Decimal("4680")


def test_maintenance_never_changes_total() -> None:
    without = quote_web(DEFAULT_CATALOG, WebQuoteRequest(site_type="advanced", pages=6))
    with_plan = quote_web(
        DEFAULT_CATALOG,
        WebQuoteRequest(site_type="advanced", pages=6, maintenance="standard"),
    )

    assert with_plan.total == without.total == Decimal("10000")
    assert with_plan.recurring_monthly == Decimal("1000")


def test_landing_page_includes_single_page() -> None:
    quote = quote_web(DEFAULT_CATALOG, WebQuoteRequest(site_type="landing", pages=3))

    assert quote.breakdown[1].label == "Additional Pages (2)"
    assert quote.subtotal == Decimal("3000") + 2 * Decimal("800")


def test_landing_baseline_ignores_catalog_override() -> None:
    catalog = merge_overrides(DEFAULT_CATALOG, {"web": {"included_pages": {"landing": 4}}})

    quote = quote_web(catalog, WebQuoteRequest(site_type="landing", pages=2))

    assert quote.subtotal == Decimal("3800")


def test_site_type_without_included_pages_uses_default_of_five() -> None:
    catalog = merge_overrides(DEFAULT_CATALOG, {"web": {"base_rates": {"portfolio": 4500}}})

    quote = quote_web(catalog, WebQuoteRequest(site_type="portfolio", pages=7))

    assert quote.breakdown[0].label == "Base Price (Portfolio)"
    assert quote.subtotal == Decimal("4500") + 2 * Decimal("800")


def test_video_duration_sits_with_quantity_lines() -> None:
    request = VideoQuoteRequest(
        video_type="explainer",
        duration="medium",
        features=frozenset({"scriptwriting"}),
        complexity="premium",
        timeline="rush",
        revisions="unlimited",
        client_profile="startup",
    )

    quote = quote_video(DEFAULT_CATALOG, request)

    assert _labels(quote) == [
        "Base Price (Explainer Video)",
        "Medium Duration (1-3 minutes)",
        "Scriptwriting",
        "Premium Production Complexity",
        "Unlimited Revisions",
        "Rush Delivery (3-5 days)",
        "Startup/Small Business Discount",
    ]
    assert quote.subtotal == Decimal("18000")
    assert quote.total == Decimal("56700")
    duration = quote.breakdown[1]
    assert duration.percent == Decimal("50")
    assert duration.amount == Decimal("9000")
    startup = quote.breakdown[-1]
    assert startup.percent == Decimal("-20")
    assert startup.amount == Decimal("-3600")


def test_default_selections_emit_only_base_line() -> None:
    quote = quote_video(DEFAULT_CATALOG, VideoQuoteRequest(video_type="social"))

    assert _labels(quote) == ["Base Price (Social Media Video)"]
    assert quote.total == Decimal("8000")


def test_simple_complexity_discount_line() -> None:
    quote = quote_web(
        DEFAULT_CATALOG, WebQuoteRequest(site_type="business", complexity="simple")
    )

    assert quote.breakdown[-1].label == "Simple Design/Complexity Discount"
    assert quote.breakdown[-1].amount == Decimal("-1200")
    assert quote.total == Decimal("4800")


def test_unknown_feature_flags_are_ignored() -> None:
    request = DesignQuoteRequest(
        design_type="banner", features=frozenset({"sourceFiles", "hologram"})
    )

    quote = quote_design(DEFAULT_CATALOG, request)

    assert _labels(quote) == ["Base Price (Website Banner/Header)", "Source Files"]
    assert quote.total == Decimal("3500")


def test_unknown_variant_is_rejected() -> None:
    with pytest.raises(UnknownVariant) as excinfo:
        quote_web(DEFAULT_CATALOG, WebQuoteRequest(site_type="portal"))

    assert excinfo.value.axis == "site type"
    assert excinfo.value.key == "portal"


@pytest.mark.parametrize(
    ("request_obj", "axis"),
    [
        (WebQuoteRequest(site_type="business", timeline="yesterday"), "timeline"),
        (WebQuoteRequest(site_type="business", backend="quantum"), "backend tier"),
        (DesignQuoteRequest(design_type="logo", ai_assistance="total"), "AI assistance level"),
        (VideoQuoteRequest(video_type="promo", duration="epic"), "duration"),
        (VideoQuoteRequest(video_type="promo", client_profile="vip"), "client profile"),
    ],
)
def test_unknown_selection_names_its_axis(request_obj, axis: str) -> None:
    with pytest.raises(UnknownVariant) as excinfo:
        calculate_quote(DEFAULT_CATALOG, request_obj)

    assert excinfo.value.axis == axis


def test_identical_inputs_give_identical_quotes() -> None:
    request = WebQuoteRequest(
        site_type="ecommerce",
        pages=12,
        features=frozenset({"gallery", "analytics", "fireAuth"}),
        timeline="urgent",
        client_profile="enterprise",
    )

    first = calculate_quote(DEFAULT_CATALOG, request)
    second = calculate_quote(DEFAULT_CATALOG, request)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_total_rounds_once_half_up() -> None:
    catalog = merge_overrides(DEFAULT_CATALOG, {"design": {"base_rates": {"logo": 5}}})

    quote = quote_design(
        catalog, DesignQuoteRequest(design_type="logo", revisions="unlimited")
    )

    # 5 * 1.3 = 6.5
    assert quote.total == Decimal("7")


def test_request_round_trips_through_plain_data() -> None:
    request = request_from_dict(
        "web",
        {
            "site_type": "catalog",
            "pages": "8",
            "features": {"map": True, "seo": False},
            "timeline": "rush",
            "ignored": "value",
        },
    )

    assert request == WebQuoteRequest(
        site_type="catalog", pages=8, features=frozenset({"map"}), timeline="rush"
    )
    assert request_to_dict(request)["features"] == ["map"]


def test_display_value_renders_each_kind() -> None:
    rates = {"INR": Decimal("1"), "USD": Decimal("82")}

    assert display_value(BreakdownLine("Base", LineKind.AMOUNT, Decimal("14100"))) == "₹14,100"
    assert (
        display_value(
            BreakdownLine("Rush", LineKind.PERCENTAGE, Decimal("2820"), Decimal("20"))
        )
        == "+20% (₹2,820)"
    )
    assert (
        display_value(
            BreakdownLine("AI", LineKind.PERCENTAGE, Decimal("-750"), Decimal("-15.00"))
        )
        == "-15% (₹750)"
    )
    assert (
        display_value(BreakdownLine("Plan", LineKind.RECURRING, Decimal("1000")))
        == "₹1,000/month"
    )
    assert (
        display_value(BreakdownLine("Off", LineKind.DISCOUNT, Decimal("-2000")))
        == "-₹2,000"
    )
    assert (
        display_value(BreakdownLine("Base", LineKind.AMOUNT, Decimal("8200")), "USD", rates)
        == "$100"
    )


@pytest.mark.parametrize(
    ("service_type", "data"),
    [
        ("web", {"site_type": "business", "pages": None}),
        ("web", {"site_type": "business", "pages": "many"}),
        ("web", {"site_type": "business", "pages": 2.5}),
        ("web", {"site_type": "business", "pages": True}),
        ("web", {"site_type": "business", "pages": 0}),
        ("web", {"site_type": ["business"]}),
        ("web", {"site_type": "business", "timeline": None}),
        ("design", {"design_type": "logo", "features": 3}),
        ("design", {"design_type": "logo", "features": [1, 2]}),
        ("video", {"video_type": {"explainer": True}}),
        ("video", {"duration": "short"}),
    ],
)
def test_malformed_request_data_is_rejected(service_type: str, data: dict) -> None:
    with pytest.raises(PricingError):
        request_from_dict(service_type, data)


def test_unhashable_selection_reports_its_axis() -> None:
    request = WebQuoteRequest(site_type=["business"])  # type: ignore[arg-type]

    with pytest.raises(UnknownVariant) as excinfo:
        quote_web(DEFAULT_CATALOG, request)

    assert excinfo.value.axis == "site type"


def test_display_value_uses_configured_base_currency() -> None:
    rates = {"USD": Decimal("1"), "INR": Decimal("0.012")}
    line = BreakdownLine("Base", LineKind.AMOUNT, Decimal("1200"))

    assert display_value(line, rates=rates, base_currency="USD") == "$1,200"
    assert display_value(line, "INR", rates, base_currency="USD") == "₹100,000"
