"""Plan health score and rule-based recommendations.

Everything here reads a finished :class:`SimulationResult`; nothing feeds
back into the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..calculators.params import SimulationParams
from ..calculators.results import SimulationResult

SCORE_WEIGHTS = {"success_pct": 0.6, "spend_rate": 0.25, "liquidity": 0.15}
LABEL_BANDS = (
    ("needs attention", 0, 59),
    ("moderate", 60, 79),
    ("strong", 80, 100),
)

# initial withdrawal rate scored 100 at or below the first, 0 at or above the second
SAFE_WITHDRAWAL_RATE = 0.04
MAX_WITHDRAWAL_RATE = 0.10

MAX_RECOMMENDATIONS = 6


@dataclass(frozen=True)
class Recommendation:
    title: str
    category: str
    body: str
    impact: str  # "High", "Medium" or "Low"


def bridge_cash_need(params: SimulationParams) -> float:
    """Today's-money spend between retirement and the legal pension age."""
    years = max(0, params.legal_pension_age - params.retirement_age)
    yearly = params.monthly_expense_total * 12.0 + params.annual_expense_total
    return yearly * years


def initial_withdrawal_rate(result: SimulationResult) -> float:
    """Net first-year draw at retirement relative to median assets then.

    Returns ``0.0`` when the pension covers spending and ``inf`` when the
    median pool is already empty.
    """
    params = result.params
    idx = result.index_of_age(max(params.retirement_age, params.current_age))
    spend = result.spending_percentiles.p50[idx] * 12.0
    pension = params.monthly_pension * 12.0 if params.retirement_age >= params.legal_pension_age else 0.0
    need = spend - pension
    if need <= 0:
        return 0.0
    assets = result.asset_percentiles.p50[idx]
    if assets <= 0:
        return float("inf")
    return need / assets


def _spend_rate_score(rate: float) -> float:
    if rate <= SAFE_WITHDRAWAL_RATE:
        return 100.0
    if rate >= MAX_WITHDRAWAL_RATE:
        return 0.0
    span = MAX_WITHDRAWAL_RATE - SAFE_WITHDRAWAL_RATE
    return 100.0 * (MAX_WITHDRAWAL_RATE - rate) / span


def _liquidity_score(result: SimulationResult) -> float:
    need = bridge_cash_need(result.params)
    if need <= 0:
        return 100.0
    params = result.params
    idx = result.index_of_age(max(params.retirement_age, params.current_age))
    coverage = result.asset_percentiles.p50[idx] / need
    return 100.0 * max(0.0, min(1.0, coverage))


def score_components(result: SimulationResult) -> Dict[str, float]:
    return {
        "success_pct": max(0.0, min(100.0, result.success_rate)),
        "spend_rate": _spend_rate_score(initial_withdrawal_rate(result)),
        "liquidity": _liquidity_score(result),
    }


def plan_health_score(result: SimulationResult) -> int:
    """Weighted 0-100 blend of success rate, withdrawal rate and liquidity."""
    parts = score_components(result)
    score = sum(SCORE_WEIGHTS[k] * v for k, v in parts.items())
    return int(round(max(0.0, min(100.0, score))))


def plan_health_label(score: float) -> str:
    for label, low, _high in reversed(LABEL_BANDS):
        if score >= low:
            return label
    return LABEL_BANDS[0][0]


def generate_recommendations(params: SimulationParams, result: SimulationResult) -> List[Recommendation]:
    """Return at most six recommendations, most pressing first."""
    recs: List[Recommendation] = []
    success = result.success_rate

    if success < 70:
        recs.append(Recommendation(
            "Increase Savings Rate", "Savings Strategy",
            "Your current success rate indicates potential challenges. Consider increasing your "
            "annual savings by 10-20% to improve retirement security.",
            "High",
        ))
        recs.append(Recommendation(
            "Delay Retirement", "Timing",
            "Working an additional 2-3 years could significantly improve your success rate by "
            "allowing more time for asset accumulation.",
            "High",
        ))
    elif success < 85:
        recs.append(Recommendation(
            "Optimize Investment Mix", "Investment Strategy",
            "Review your asset allocation to ensure appropriate balance between growth and "
            "stability for your risk tolerance.",
            "Medium",
        ))

    yearly_expenses = params.monthly_expense_total * 12.0 + params.annual_expense_total
    if yearly_expenses > params.annual_savings * 3:
        recs.append(Recommendation(
            "Review Spending Plan", "Expense Management",
            "Your expenses are high relative to savings. Consider reviewing discretionary "
            "spending to improve financial flexibility.",
            "Medium",
        ))

    recs.append(Recommendation(
        "Maximize Tax-Deferred Contributions", "Tax Planning",
        "Ensure you are taking full advantage of tax-advantaged retirement accounts to reduce "
        "current tax liability and enhance long-term growth.",
        "High" if params.capital_gains_tax > 25 else "Medium",
    ))

    if params.roi_volatility > 0.18:
        recs.append(Recommendation(
            "Consider Volatility Reduction", "Risk Management",
            "Your portfolio has high volatility. As you approach retirement, consider gradually "
            "shifting to more stable investments.",
            "Medium",
        ))

    recs.append(Recommendation(
        "Review Insurance Coverage", "Protection",
        "Evaluate current insurance policies including health, long-term care, and life "
        "insurance to ensure adequate protection.",
        "Low",
    ))

    return recs[:MAX_RECOMMENDATIONS]


def generate_insights(result: SimulationResult) -> str:
    """Return a short insight about simulation results."""
    success = result.success_rate
    median_terminal = result.median_terminal_assets
    last_age = result.ages[-1] if result.ages else "end"

    if success >= 85:
        outlook = "high chance of success"
    elif success >= 60:
        outlook = "moderate chance of success"
    else:
        outlook = "plan may be at risk"

    text = (
        f"Your plan has a {outlook}. Median projected assets at age {last_age} "
        f"are €{median_terminal:,.0f}."
    )
    exhausted = result.exhaustion_age()
    if exhausted is not None:
        text += f" In a poor market (10th percentile) assets run out around age {exhausted}."
    return text


def summarize(params: SimulationParams, result: SimulationResult) -> Dict:
    score = plan_health_score(result)
    return {
        "plan_health_score": score,
        "plan_health_label": plan_health_label(score),
        "score_components": score_components(result),
        "bridge": {
            "from_age": params.retirement_age,
            "to_age": params.legal_pension_age,
            "cash_need": bridge_cash_need(params),
        },
        "insight": generate_insights(result),
        "recommendations": generate_recommendations(params, result),
    }


__all__ = [
    "Recommendation",
    "bridge_cash_need",
    "initial_withdrawal_rate",
    "score_components",
    "plan_health_score",
    "plan_health_label",
    "generate_recommendations",
    "generate_insights",
    "summarize",
]
