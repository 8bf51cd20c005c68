"""Token risk analysis pipeline.

address -> allowlist check -> parallel fetch -> factors -> score -> tier
-> recommendation. ``assess`` is the pure post-fetch half: the same
aggregated bundle always yields the same result.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from config.settings import Settings
from token_risk.analyzer.aggregator import AggregatedData, Aggregator
from token_risk.analyzer.allowlist import Allowlist
from token_risk.analyzer.risk_factors import derive_risk_factors
from token_risk.analyzer.scorer import (
    RECOMMENDATION_ALLOWLISTED,
    build_recommendation,
    compute_risk_score,
    risk_level_for,
)
from token_risk.models.analysis import (
    AnalysisResult,
    HolderProfile,
    RiskLevel,
    SecurityProfile,
)
from token_risk.parsers.coingecko.client import CoinGeckoClient
from token_risk.parsers.etherscan.client import EtherscanClient
from token_risk.parsers.tatum.client import TatumClient


def assess(data: AggregatedData) -> AnalysisResult:
    factors = derive_risk_factors(data)
    score = compute_risk_score(factors)
    level = risk_level_for(score)
    return AnalysisResult(
        token_data=data.metadata,
        market_data=data.market,
        security_analysis=data.security,
        holder_analysis=data.holders,
        risk_factors=tuple(factors),
        overall_risk_score=score,
        risk_level=level,
        recommendation=build_recommendation(level, factors),
        unavailable_sources=data.unavailable_sources,
    )


class TokenRiskAnalyzer:
    def __init__(self, aggregator: Aggregator, allowlist: Allowlist) -> None:
        self._aggregator = aggregator
        self._allowlist = allowlist

    async def analyze(self, address: str) -> AnalysisResult:
        """Best-effort assessment of a pre-validated contract address."""
        if address in self._allowlist:
            logger.info(f"[ANALYZER] {address[:10]} allowlisted, skipping full analysis")
            metadata = await self._aggregator.fetch_metadata(address)
            return AnalysisResult(
                token_data=metadata,
                market_data=None,
                security_analysis=SecurityProfile.trusted(),
                holder_analysis=HolderProfile.unknown(),
                risk_factors=(),
                overall_risk_score=0,
                risk_level=RiskLevel.VERY_LOW,
                recommendation=RECOMMENDATION_ALLOWLISTED,
                is_allowlisted=True,
            )

        data = await self._aggregator.gather(address)
        result = assess(data)
        logger.info(
            f"[ANALYZER] {address[:10]} score={result.overall_risk_score} "
            f"level={result.risk_level.value} factors={len(result.risk_factors)}"
        )
        return result


class SourceClients:
    """Owns the provider clients for one process; closes them on exit."""

    def __init__(self, settings: Settings) -> None:
        timeout = settings.request_timeout_sec
        self.tatum = TatumClient(
            settings.tatum_api_key,
            base_url=settings.tatum_base_url,
            chain=settings.tatum_chain,
            timeout=timeout,
        )
        self.coingecko = CoinGeckoClient(
            settings.coingecko_api_key,
            base_url=settings.coingecko_base_url,
            platform=settings.coingecko_platform,
            timeout=timeout,
        )
        self.etherscan = EtherscanClient(
            settings.etherscan_api_key,
            base_url=settings.etherscan_base_url,
            chain_id=settings.etherscan_chain_id,
            timeout=timeout,
            max_rps=settings.etherscan_max_rps,
            holder_page_size=settings.holder_page_size,
        )

    def aggregator(self) -> Aggregator:
        return Aggregator(
            metadata_source=self.tatum,
            market_source=self.coingecko,
            security_source=self.etherscan,
            holder_source=self.etherscan,
        )

    async def close(self) -> None:
        await asyncio.gather(
            self.tatum.close(),
            self.coingecko.close(),
            self.etherscan.close(),
            return_exceptions=True,
        )

    async def __aenter__(self) -> SourceClients:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


def build_analyzer(settings: Settings, clients: SourceClients) -> TokenRiskAnalyzer:
    return TokenRiskAnalyzer(clients.aggregator(), Allowlist.from_csv(settings.allowlist_extra))


async def analyze_token_async(address: str, settings: Settings) -> AnalysisResult:
    async with SourceClients(settings) as clients:
        return await build_analyzer(settings, clients).analyze(address)


def analyze_token(address: str, settings: Settings | None = None) -> AnalysisResult:
    """Synchronous entry point: one analysis with freshly built clients."""
    if settings is None:
        from config.settings import settings as default_settings

        settings = default_settings
    return asyncio.run(analyze_token_async(address, settings))
