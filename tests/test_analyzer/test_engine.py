"""Tests for the analysis pipeline."""

from unittest.mock import AsyncMock

import pytest

from token_risk.analyzer.aggregator import AggregatedData, Aggregator
from token_risk.analyzer.allowlist import Allowlist
from token_risk.analyzer.engine import TokenRiskAnalyzer, assess
from token_risk.analyzer.scorer import (
    RECOMMENDATION_ALLOWLISTED,
    RECOMMENDATION_AVOID,
    RECOMMENDATION_CAUTION,
    RECOMMENDATION_VERY_LOW,
)
from token_risk.models.analysis import (
    HolderProfile,
    RiskCategory,
    RiskLevel,
    SecurityProfile,
    Severity,
    TokenMetadata,
)

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
UNKNOWN_TOKEN = "0x8888888888888888888888888888888888888888"


def _mock_aggregator(data: AggregatedData | None = None, metadata: TokenMetadata | None = None) -> AsyncMock:
    aggregator = AsyncMock(spec=Aggregator)
    aggregator.gather.return_value = data
    aggregator.fetch_metadata.return_value = metadata
    return aggregator


class TestAssess:
    def test_rug_profile_scenario(self, make_data) -> None:
        data = make_data(
            market=None,
            security={"is_verified": False, "has_blacklist_function": True},
            holders={"top10_holders_percentage": 85.0, "total_holders": 40, "creator_percentage": 60.0},
        )

        result = assess(data)

        summary = [(f.category, f.severity, f.impact) for f in result.risk_factors]
        assert summary == [
            (RiskCategory.SECURITY, Severity.HIGH, 25),
            (RiskCategory.SECURITY, Severity.HIGH, 25),
            (RiskCategory.DISTRIBUTION, Severity.HIGH, 25),
            (RiskCategory.DISTRIBUTION, Severity.CRITICAL, 30),
            (RiskCategory.DISTRIBUTION, Severity.MEDIUM, 10),
        ]
        assert result.overall_risk_score == 100
        assert result.risk_level is RiskLevel.VERY_HIGH
        assert result.recommendation == RECOMMENDATION_AVOID
        assert result.market_data is None

    def test_clean_scenario(self, make_data) -> None:
        result = assess(make_data())

        assert result.risk_factors == ()
        assert result.overall_risk_score == 0
        assert result.risk_level is RiskLevel.VERY_LOW
        assert result.recommendation == RECOMMENDATION_VERY_LOW
        assert result.is_allowlisted is False

    def test_market_outage_is_not_penalized(self, make_data) -> None:
        data = make_data(market=None, security={"has_mint_function": True})

        result = assess(data)

        assert result.market_data is None
        assert all(f.category is not RiskCategory.MARKET for f in result.risk_factors)
        assert result.overall_risk_score == 15
        assert result.risk_level is RiskLevel.LOW

    def test_all_sources_down(self) -> None:
        address = UNKNOWN_TOKEN
        data = AggregatedData(
            metadata=TokenMetadata.placeholder(address),
            market=None,
            security=SecurityProfile.pessimistic(),
            holders=HolderProfile.pessimistic(),
            unavailable_sources=("metadata", "market", "security", "holders"),
        )

        result = assess(data)

        assert result.overall_risk_score == 100
        assert result.risk_level is RiskLevel.VERY_HIGH
        assert result.unavailable_sources == data.unavailable_sources
        assert result.security_analysis.rug_pull_risk == 100

    def test_critical_forces_avoid_on_medium_tier(self, make_data) -> None:
        result = assess(make_data(holders={"creator_percentage": 75.0}))

        assert result.overall_risk_score == 30
        assert result.risk_level is RiskLevel.MEDIUM
        assert result.recommendation == RECOMMENDATION_AVOID

    def test_high_tier_caution(self, make_data) -> None:
        data = make_data(security={"is_verified": False, "has_proxy_contract": True, "has_pause_function": True})

        result = assess(data)

        assert result.overall_risk_score == 60
        assert result.risk_level is RiskLevel.HIGH
        assert result.recommendation == RECOMMENDATION_CAUTION

    def test_assess_is_deterministic(self, make_data) -> None:
        data = make_data(security={"has_mint_function": True}, holders={"total_holders": 12})
        assert assess(data) == assess(data)

    def test_score_matches_clamped_factor_sum(self, make_data) -> None:
        data = make_data(security=SecurityProfile.pessimistic(), holders={"total_holders": 3})
        result = assess(data)
        assert result.overall_risk_score == min(100, sum(f.impact for f in result.risk_factors))


class TestTokenRiskAnalyzer:
    @pytest.mark.asyncio
    async def test_allowlisted_skips_analysis(self) -> None:
        metadata = TokenMetadata(USDC, "USD Coin", "USDC", "25000000000000000", 6)
        aggregator = _mock_aggregator(metadata=metadata)
        analyzer = TokenRiskAnalyzer(aggregator, Allowlist.default())

        result = await analyzer.analyze(USDC)

        aggregator.gather.assert_not_awaited()
        aggregator.fetch_metadata.assert_awaited_once_with(USDC)
        assert result.is_allowlisted is True
        assert result.token_data == metadata
        assert result.market_data is None
        assert result.risk_factors == ()
        assert result.overall_risk_score == 0
        assert result.risk_level is RiskLevel.VERY_LOW
        assert result.recommendation == RECOMMENDATION_ALLOWLISTED
        assert result.security_analysis == SecurityProfile.trusted()
        assert result.holder_analysis == HolderProfile.unknown()

    @pytest.mark.asyncio
    async def test_allowlist_match_ignores_case(self) -> None:
        lower = USDC.lower()
        aggregator = _mock_aggregator(metadata=TokenMetadata.placeholder(lower))
        analyzer = TokenRiskAnalyzer(aggregator, Allowlist.default())

        result = await analyzer.analyze(lower)

        assert result.is_allowlisted is True
        aggregator.gather.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_allowlisted_source_sees_no_security_or_holder_calls(self) -> None:
        """The real aggregator must only touch the metadata source."""
        metadata_source = AsyncMock()
        metadata_source.get_token_metadata.return_value = TokenMetadata(USDC, "USD Coin", "USDC", "1", 6)
        market, security, holders = AsyncMock(), AsyncMock(), AsyncMock()
        analyzer = TokenRiskAnalyzer(Aggregator(metadata_source, market, security, holders), Allowlist.default())

        result = await analyzer.analyze(USDC)

        assert result.token_data.symbol == "USDC"
        market.get_market_snapshot.assert_not_awaited()
        security.get_security_profile.assert_not_awaited()
        holders.get_holder_profile.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_regular_token_is_gathered_and_assessed(self, make_data) -> None:
        data = make_data(security={"has_mint_function": True})
        aggregator = _mock_aggregator(data=data)
        analyzer = TokenRiskAnalyzer(aggregator, Allowlist.default())

        result = await analyzer.analyze(UNKNOWN_TOKEN)

        aggregator.gather.assert_awaited_once_with(UNKNOWN_TOKEN)
        aggregator.fetch_metadata.assert_not_awaited()
        assert result == assess(data)

    @pytest.mark.asyncio
    async def test_extra_allowlist_entries(self, make_data) -> None:
        aggregator = _mock_aggregator(data=make_data(), metadata=TokenMetadata.placeholder(UNKNOWN_TOKEN))
        analyzer = TokenRiskAnalyzer(aggregator, Allowlist.from_csv(UNKNOWN_TOKEN))

        result = await analyzer.analyze(UNKNOWN_TOKEN)

        assert result.is_allowlisted is True
