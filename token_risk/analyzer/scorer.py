"""Score, tier and recommendation from derived risk factors."""

from collections.abc import Sequence

from token_risk.models.analysis import RiskFactor, RiskLevel, Severity

MAX_SCORE = 100

# Inclusive upper bounds, checked in order
RISK_LEVEL_THRESHOLDS: tuple[tuple[int, RiskLevel], ...] = (
    (10, RiskLevel.VERY_LOW),
    (25, RiskLevel.LOW),
    (50, RiskLevel.MEDIUM),
    (75, RiskLevel.HIGH),
)

HIGH_SEVERITY_ESCALATION = 3

RECOMMENDATION_AVOID = (
    "AVOID: Critical risk factors detected. This token shows signs of a potential scam or rug pull."
)
RECOMMENDATION_HIGH_RISK = (
    "HIGH RISK: Multiple serious red flags detected. "
    "Exercise extreme caution and only risk what you can afford to lose."
)
RECOMMENDATION_CAUTION = "CAUTION: Significant risk factors present. Research thoroughly before investing."
RECOMMENDATION_MODERATE = "MODERATE RISK: Some risk factors identified. Review the details carefully before investing."
RECOMMENDATION_LOW = (
    "LOW RISK: Minor concerns detected. Token appears relatively safe, but always do your own research."
)
RECOMMENDATION_VERY_LOW = "VERY LOW RISK: No significant risk factors detected."
RECOMMENDATION_ALLOWLISTED = (
    "VERY LOW RISK: Well-established token with a publicly settled risk profile. Full analysis skipped."
)


def compute_risk_score(factors: Sequence[RiskFactor]) -> int:
    return min(MAX_SCORE, sum(f.impact for f in factors))


def risk_level_for(score: int) -> RiskLevel:
    for upper, level in RISK_LEVEL_THRESHOLDS:
        if score <= upper:
            return level
    return RiskLevel.VERY_HIGH


def build_recommendation(level: RiskLevel, factors: Sequence[RiskFactor]) -> str:
    """First matching rule wins; a single critical factor outranks the tier."""
    if any(f.severity is Severity.CRITICAL for f in factors):
        return RECOMMENDATION_AVOID
    high_count = sum(1 for f in factors if f.severity is Severity.HIGH)
    if level is RiskLevel.VERY_HIGH or high_count >= HIGH_SEVERITY_ESCALATION:
        return RECOMMENDATION_HIGH_RISK
    if level is RiskLevel.HIGH:
        return RECOMMENDATION_CAUTION
    if level is RiskLevel.MEDIUM:
        return RECOMMENDATION_MODERATE
    if level is RiskLevel.LOW:
        return RECOMMENDATION_LOW
    return RECOMMENDATION_VERY_LOW
