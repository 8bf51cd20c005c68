"""Risk factor derivation from the aggregated (possibly partial) bundle.

Each rule is an independent predicate with a fixed impact; several may fire
at once and nothing is deduplicated. Output keeps the evaluation order
Security -> Market -> Distribution -> Metadata -> Tokenomics.
"""

from decimal import Decimal

from token_risk.analyzer.aggregator import AggregatedData
from token_risk.models.analysis import (
    HolderProfile,
    MarketSnapshot,
    RiskCategory,
    RiskFactor,
    SecurityProfile,
    Severity,
    TokenMetadata,
)

# Market thresholds (USD / percent)
MIN_VOLUME_24H = Decimal(10_000)
MIN_MARKET_CAP = Decimal(100_000)
MAX_PRICE_DROP_24H = Decimal(-50)

# Distribution thresholds
MAX_TOP10_PCT = 80.0
MAX_CREATOR_PCT = 50.0
MIN_HOLDERS = 100

# Tokenomics
MAX_NORMALIZED_SUPPLY = Decimal(10) ** 12

PLACEHOLDER_NAMES = {"", "unknown", "unknown token"}
PLACEHOLDER_SYMBOLS = {"", "unknown"}


def _security_factors(sec: SecurityProfile) -> list[RiskFactor]:
    factors = []
    if not sec.is_verified:
        factors.append(RiskFactor(RiskCategory.SECURITY, Severity.HIGH, "Contract source code is not verified", 25))
    if sec.has_mint_function:
        factors.append(RiskFactor(RiskCategory.SECURITY, Severity.MEDIUM, "Contract can mint new tokens", 15))
    if sec.has_blacklist_function:
        factors.append(RiskFactor(RiskCategory.SECURITY, Severity.HIGH, "Contract can blacklist addresses", 25))
    if sec.has_pause_function:
        factors.append(RiskFactor(RiskCategory.SECURITY, Severity.MEDIUM, "Contract can pause transfers", 15))
    if sec.has_proxy_contract:
        factors.append(RiskFactor(RiskCategory.SECURITY, Severity.MEDIUM, "Upgradeable proxy contract", 20))
    return factors


def _market_factors(market: MarketSnapshot | None) -> list[RiskFactor]:
    if market is None:
        return []
    factors = []
    if market.volume_24h < MIN_VOLUME_24H:
        factors.append(
            RiskFactor(RiskCategory.MARKET, Severity.MEDIUM, f"Low 24h trading volume (${market.volume_24h:,.0f})", 15)
        )
    if market.market_cap < MIN_MARKET_CAP:
        factors.append(
            RiskFactor(RiskCategory.MARKET, Severity.MEDIUM, f"Very low market cap (${market.market_cap:,.0f})", 10)
        )
    if market.price_change_24h < MAX_PRICE_DROP_24H:
        factors.append(
            RiskFactor(RiskCategory.MARKET, Severity.HIGH, f"Price crashed {market.price_change_24h:.1f}% in 24h", 20)
        )
    return factors


def _distribution_factors(holders: HolderProfile) -> list[RiskFactor]:
    # Zero holders = no holder data; not treated as full concentration.
    if holders.total_holders <= 0:
        return []
    factors = []
    if holders.top10_holders_percentage > MAX_TOP10_PCT:
        factors.append(
            RiskFactor(
                RiskCategory.DISTRIBUTION,
                Severity.HIGH,
                f"Top 10 holders own {holders.top10_holders_percentage:.1f}% of supply",
                25,
            )
        )
    if holders.creator_percentage > MAX_CREATOR_PCT:
        factors.append(
            RiskFactor(
                RiskCategory.DISTRIBUTION,
                Severity.CRITICAL,
                f"Creator holds {holders.creator_percentage:.1f}% of supply",
                30,
            )
        )
    if holders.total_holders < MIN_HOLDERS:
        factors.append(
            RiskFactor(
                RiskCategory.DISTRIBUTION,
                Severity.MEDIUM,
                f"Very few holders ({holders.total_holders})",
                10,
            )
        )
    return factors


def is_placeholder_name(name: str | None) -> bool:
    return (name or "").strip().lower() in PLACEHOLDER_NAMES


def is_placeholder_symbol(symbol: str | None) -> bool:
    return (symbol or "").strip().lower() in PLACEHOLDER_SYMBOLS


def _metadata_factors(metadata: TokenMetadata) -> list[RiskFactor]:
    if is_placeholder_name(metadata.name) or is_placeholder_symbol(metadata.symbol):
        return [RiskFactor(RiskCategory.METADATA, Severity.MEDIUM, "Missing or placeholder token name/symbol", 10)]
    return []


def _tokenomics_factors(metadata: TokenMetadata) -> list[RiskFactor]:
    if metadata.normalized_supply > MAX_NORMALIZED_SUPPLY:
        return [RiskFactor(RiskCategory.TOKENOMICS, Severity.MEDIUM, "Extremely large total supply (>1 trillion)", 15)]
    return []


def derive_risk_factors(data: AggregatedData) -> list[RiskFactor]:
    """All factors that fire for the bundle, in fixed category order."""
    return [
        *_security_factors(data.security),
        *_market_factors(data.market),
        *_distribution_factors(data.holders),
        *_metadata_factors(data.metadata),
        *_tokenomics_factors(data.metadata),
    ]
