"""Holder distribution health: Gini coefficient over holder balances.

0 = one wallet holds everything (or no usable data), 100 = perfectly equal.
"""

from collections.abc import Iterable
from decimal import Decimal


def gini_coefficient(balances: Iterable[int | float | Decimal]) -> float | None:
    """Discrete Gini coefficient of the non-negative balances.

    Negative balances are ignored; zero balances count as holders. Returns
    None when there is nothing to measure (no positive balance). Uses
    ``2·Σ(i·x_i)/(n·Σx) − (n+1)/n`` over the ascending balances with
    1-based rank ``i``.
    """
    values = sorted(float(b) for b in balances if b >= 0)
    n = len(values)
    total = sum(values)
    if n == 0 or total <= 0:
        return None
    if n == 1:
        # A single holder owns the entire measured supply.
        return 1.0

    weighted = sum(rank * x for rank, x in enumerate(values, start=1))
    return (2 * weighted) / (n * total) - (n + 1) / n


def distribution_score(balances: Iterable[int | float | Decimal]) -> float:
    """Map the Gini coefficient to a 0-100 distribution health score."""
    gini = gini_coefficient(balances)
    if gini is None:
        return 0.0
    score = (1 - gini) * 100
    return round(min(max(score, 0.0), 100.0), 2)
