"""Tests for the plain-text report formatter."""

import dataclasses
from decimal import Decimal

from token_risk.analyzer.engine import assess
from token_risk.analyzer.scorer import RECOMMENDATION_ALLOWLISTED
from token_risk.formatters import format_report, format_supply, format_usd
from token_risk.models.analysis import (
    AnalysisResult,
    HolderProfile,
    RiskLevel,
    SecurityProfile,
    TokenMetadata,
)


def test_format_usd() -> None:
    assert format_usd(Decimal("2500000000")) == "$2.50B"
    assert format_usd(Decimal("1500000")) == "$1.50M"
    assert format_usd(12500) == "$12.50K"
    assert format_usd(Decimal("0.5")) == "$0.50"


def test_format_supply() -> None:
    assert format_supply(Decimal("2000000000000")) == "2.00T"
    assert format_supply(Decimal("1000000000")) == "1.00B"
    assert format_supply(Decimal("42")) == "42.00"


def test_report_lists_factors(make_data) -> None:
    result = assess(make_data(security={"is_verified": False}, holders={"total_holders": 50}))

    report = format_report(result)

    assert "Clean Token (CLN)" in report
    assert "Risk: Medium (35/100)" in report
    assert "!!  [Security] Contract source code is not verified (+25)" in report
    assert "[Distribution] Very few holders (50) (+10)" in report
    assert "Risk factors (2):" in report
    assert "Holders: 50, top10 20.0%" in report


def test_report_clean_token(make_data) -> None:
    report = format_report(assess(make_data()))

    assert "Risk factors: none" in report
    assert "Market: price $1.250000 (+3.50% 24h), mcap $50.00M, vol $2.00M" in report
    assert "verified=yes" in report


def test_report_partial_data(make_data) -> None:
    data = make_data(market=None, holders=HolderProfile.pessimistic())
    result = assess(data)
    result = dataclasses.replace(result, unavailable_sources=("market", "holders"))

    report = format_report(result)

    assert "Market: not listed" in report
    assert "Holders: unavailable" in report
    assert "Unavailable sources: market, holders" in report


def test_report_allowlisted() -> None:
    address = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
    result = AnalysisResult(
        token_data=TokenMetadata(address, "Tether USD", "USDT", "1000000", 6),
        market_data=None,
        security_analysis=SecurityProfile.trusted(),
        holder_analysis=HolderProfile.unknown(),
        risk_factors=(),
        overall_risk_score=0,
        risk_level=RiskLevel.VERY_LOW,
        recommendation=RECOMMENDATION_ALLOWLISTED,
        is_allowlisted=True,
    )

    report = format_report(result)

    assert report.endswith(RECOMMENDATION_ALLOWLISTED)
    assert "Market" not in report
    assert "Risk factors" not in report
