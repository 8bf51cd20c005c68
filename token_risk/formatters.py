"""Format an AnalysisResult as a plain-text report for the CLI."""

from decimal import Decimal

from token_risk.models.analysis import AnalysisResult

SEVERITY_MARKS = {"low": "·", "medium": "!", "high": "!!", "critical": "!!!"}


def format_usd(value: Decimal | float) -> str:
    num = float(value)
    if num >= 1e9:
        return f"${num / 1e9:.2f}B"
    if num >= 1e6:
        return f"${num / 1e6:.2f}M"
    if num >= 1e3:
        return f"${num / 1e3:.2f}K"
    return f"${num:.2f}"


def format_supply(value: Decimal) -> str:
    num = float(value)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if num >= threshold:
            return f"{num / threshold:.2f}{suffix}"
    return f"{num:.2f}"


def format_report(result: AnalysisResult) -> str:
    token = result.token_data
    lines = [
        f"{token.name} ({token.symbol})",
        f"Contract: {token.contract_address}",
        f"Supply: {format_supply(token.normalized_supply)} (decimals={token.decimals})",
        "",
        f"Risk: {result.risk_level.value} ({result.overall_risk_score}/100)",
        result.recommendation,
    ]

    if result.is_allowlisted:
        return "\n".join(lines)

    market = result.market_data
    lines.append("")
    if market:
        lines.append(
            f"Market: price ${float(market.price):.6f} ({float(market.price_change_24h):+.2f}% 24h), "
            f"mcap {format_usd(market.market_cap)}, vol {format_usd(market.volume_24h)}"
        )
    else:
        lines.append("Market: not listed")

    sec = result.security_analysis
    lines.append(
        f"Security: verified={'yes' if sec.is_verified else 'no'}, "
        f"renounced={'yes' if sec.has_ownership_renounced else 'no'}, "
        f"rug-pull risk {sec.rug_pull_risk}/100"
    )

    holders = result.holder_analysis
    if holders.total_holders > 0:
        lines.append(
            f"Holders: {holders.total_holders:,}, top10 {holders.top10_holders_percentage:.1f}%, "
            f"creator {holders.creator_percentage:.1f}%, distribution {holders.distribution_score:.0f}/100"
        )
    else:
        lines.append("Holders: unavailable")

    if result.unavailable_sources:
        lines.append(f"Unavailable sources: {', '.join(result.unavailable_sources)}")

    lines.append("")
    if result.risk_factors:
        lines.append(f"Risk factors ({len(result.risk_factors)}):")
        for f in result.risk_factors:
            mark = SEVERITY_MARKS.get(f.severity.value, "")
            lines.append(f"  {mark:<3} [{f.category.value}] {f.description} (+{f.impact})")
    else:
        lines.append("Risk factors: none")

    return "\n".join(lines)
