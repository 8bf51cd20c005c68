from token_risk.models.analysis import (
    AnalysisResult,
    HolderProfile,
    MarketSnapshot,
    RiskCategory,
    RiskFactor,
    RiskLevel,
    SecurityProfile,
    Severity,
    TokenMetadata,
)

__all__ = [
    "AnalysisResult",
    "HolderProfile",
    "MarketSnapshot",
    "RiskCategory",
    "RiskFactor",
    "RiskLevel",
    "SecurityProfile",
    "Severity",
    "TokenMetadata",
]
