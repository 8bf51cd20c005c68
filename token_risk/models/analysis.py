"""Domain types for a single token risk analysis.

Every bundle is a frozen dataclass built fresh per request. Fallback
constructors (``placeholder``/``pessimistic``) never understate risk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

PLACEHOLDER_NAME = "Unknown"
PLACEHOLDER_SYMBOL = "UNKNOWN"
PLACEHOLDER_SUPPLY = "0"
DEFAULT_DECIMALS = 18

# Rug-pull risk weights per security flag (sum clamped to 100)
RUG_RISK_UNVERIFIED = 30
RUG_RISK_PROXY = 15
RUG_RISK_MINT = 20
RUG_RISK_PAUSE = 10
RUG_RISK_BLACKLIST = 20
RUG_RISK_OWNER_ACTIVE = 15


class RiskCategory(str, Enum):
    SECURITY = "Security"
    MARKET = "Market"
    DISTRIBUTION = "Distribution"
    METADATA = "Metadata"
    TOKENOMICS = "Tokenomics"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = (Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)


class RiskLevel(str, Enum):
    VERY_LOW = "Very Low"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


def _num(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


@dataclass(frozen=True)
class TokenMetadata:
    """ERC-20 metadata read from the contract itself."""

    contract_address: str
    name: str = PLACEHOLDER_NAME
    symbol: str = PLACEHOLDER_SYMBOL
    total_supply: str = PLACEHOLDER_SUPPLY  # raw integer, smallest denomination
    decimals: int = DEFAULT_DECIMALS

    @classmethod
    def placeholder(cls, contract_address: str) -> TokenMetadata:
        return cls(contract_address=contract_address)

    @property
    def normalized_supply(self) -> Decimal:
        """Total supply in whole tokens; 0 when the raw supply is unparsable."""
        try:
            raw = Decimal(self.total_supply)
        except (InvalidOperation, TypeError, ValueError):
            return Decimal(0)
        if not raw.is_finite():
            return Decimal(0)
        return raw.scaleb(-self.decimals)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "totalSupply": self.total_supply,
            "decimals": self.decimals,
            "contractAddress": self.contract_address,
        }


@dataclass(frozen=True)
class MarketSnapshot:
    """Market data for a listed token (USD quotes)."""

    price: Decimal
    market_cap: Decimal
    volume_24h: Decimal
    price_change_24h: Decimal  # signed percentage
    circulating_supply: Decimal = Decimal(0)
    total_supply: Decimal = Decimal(0)
    max_supply: Decimal | None = None
    ath: Decimal = Decimal(0)
    ath_change_percentage: Decimal = Decimal(0)
    atl: Decimal = Decimal(0)
    atl_change_percentage: Decimal = Decimal(0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": float(self.price),
            "marketCap": float(self.market_cap),
            "volume24h": float(self.volume_24h),
            "priceChange24h": float(self.price_change_24h),
            "circulatingSupply": float(self.circulating_supply),
            "totalSupply": float(self.total_supply),
            "maxSupply": _num(self.max_supply),
            "ath": float(self.ath),
            "athChangePercentage": float(self.ath_change_percentage),
            "atl": float(self.atl),
            "atlChangePercentage": float(self.atl_change_percentage),
        }


@dataclass(frozen=True)
class SecurityProfile:
    """Contract-level security flags.

    ``rug_pull_risk`` is derived from the flags and cannot be set directly.
    """

    is_verified: bool
    has_proxy_contract: bool
    has_mint_function: bool
    has_pause_function: bool
    has_blacklist_function: bool
    has_ownership_renounced: bool

    @classmethod
    def pessimistic(cls, *, has_ownership_renounced: bool = False) -> SecurityProfile:
        """Profile used when the source cannot be inspected.

        Ownership can still be determined on-chain without verified source,
        every other flag assumes the worst.
        """
        return cls(
            is_verified=False,
            has_proxy_contract=True,
            has_mint_function=True,
            has_pause_function=True,
            has_blacklist_function=True,
            has_ownership_renounced=has_ownership_renounced,
        )

    @classmethod
    def trusted(cls) -> SecurityProfile:
        return cls(
            is_verified=True,
            has_proxy_contract=False,
            has_mint_function=False,
            has_pause_function=False,
            has_blacklist_function=False,
            has_ownership_renounced=True,
        )

    @property
    def rug_pull_risk(self) -> int:
        risk = 0
        if not self.is_verified:
            risk += RUG_RISK_UNVERIFIED
        if self.has_proxy_contract:
            risk += RUG_RISK_PROXY
        if self.has_mint_function:
            risk += RUG_RISK_MINT
        if self.has_pause_function:
            risk += RUG_RISK_PAUSE
        if self.has_blacklist_function:
            risk += RUG_RISK_BLACKLIST
        if not self.has_ownership_renounced:
            risk += RUG_RISK_OWNER_ACTIVE
        return min(risk, 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "isVerified": self.is_verified,
            "hasProxyContract": self.has_proxy_contract,
            "hasMintFunction": self.has_mint_function,
            "hasPauseFunction": self.has_pause_function,
            "hasBlacklistFunction": self.has_blacklist_function,
            "hasOwnershipRenounced": self.has_ownership_renounced,
            "rugPullRisk": self.rug_pull_risk,
        }


@dataclass(frozen=True)
class HolderProfile:
    """Holder distribution summary (percentages are 0-100)."""

    total_holders: int
    top10_holders_percentage: float
    creator_percentage: float
    distribution_score: float  # higher = healthier

    @classmethod
    def pessimistic(cls) -> HolderProfile:
        """Absence of holder data is not evidence of a healthy distribution."""
        return cls(
            total_holders=0,
            top10_holders_percentage=100.0,
            creator_percentage=100.0,
            distribution_score=0.0,
        )

    @classmethod
    def unknown(cls) -> HolderProfile:
        return cls(
            total_holders=0,
            top10_holders_percentage=0.0,
            creator_percentage=0.0,
            distribution_score=0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHolders": self.total_holders,
            "top10HoldersPercentage": self.top10_holders_percentage,
            "creatorPercentage": self.creator_percentage,
            "distributionScore": self.distribution_score,
        }


@dataclass(frozen=True)
class RiskFactor:
    category: RiskCategory
    severity: Severity
    description: str
    impact: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class AnalysisResult:
    token_data: TokenMetadata
    market_data: MarketSnapshot | None
    security_analysis: SecurityProfile
    holder_analysis: HolderProfile
    risk_factors: tuple[RiskFactor, ...]
    overall_risk_score: int
    risk_level: RiskLevel
    recommendation: str
    is_allowlisted: bool = False
    unavailable_sources: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokenData": self.token_data.to_dict(),
            "marketData": self.market_data.to_dict() if self.market_data else None,
            "securityAnalysis": self.security_analysis.to_dict(),
            "holderAnalysis": self.holder_analysis.to_dict(),
            "riskFactors": [f.to_dict() for f in self.risk_factors],
            "overallRiskScore": self.overall_risk_score,
            "riskLevel": self.risk_level.value,
            "recommendation": self.recommendation,
            "isAllowlisted": self.is_allowlisted,
            "unavailableSources": list(self.unavailable_sources),
        }
