"""
Trend analysis and spending insights.

Reads the observed and forecasted months plus the expense breakdown and
turns them into short, human-readable observations:
1. Trends: recent movement of income, expense and savings
2. Insights: savings rate, rising predicted expenses, dominant categories
"""
from decimal import Decimal
from typing import List, Sequence

from fincast.forecast.types import (
    CashflowTrends,
    CategoryBreakdown,
    ForecastResult,
    InsightType,
    PredictionPoint,
    SpendingInsight,
    TrendAnalysis,
    TrendDirection,
    ZERO,
)

TREND_WINDOW = 6
TREND_THRESHOLD_PCT = Decimal("5")

RECENT_MONTHS = 3
LOW_SAVINGS_PCT = Decimal("10")
HIGH_SAVINGS_PCT = Decimal("30")
TARGET_SAVINGS_RATE = Decimal("0.2")
RISING_EXPENSE_PCT = Decimal("10")
DOMINANT_CATEGORY_PCT = Decimal("25")

# Housing is expected to dominate a budget
HOUSING_CATEGORIES = frozenset({"Housing", "Rent", "Rent/Mortgage"})


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def analyze_trend(values: Sequence[Decimal], label: str) -> TrendAnalysis:
    """Compare the first half of a series against the second half."""
    if len(values) < 2:
        return TrendAnalysis(TrendDirection.STABLE, ZERO, "Insufficient data")

    half = len(values) // 2
    # Odd-length series share the middle value between both halves
    first_avg = _mean(values[:len(values) - half])
    second_avg = _mean(values[half:])

    change_pct = ((second_avg - first_avg) / first_avg * 100) if first_avg > 0 else ZERO
    change_pct = change_pct.quantize(Decimal("0.1"))

    if abs(change_pct) > TREND_THRESHOLD_PCT:
        direction = TrendDirection.INCREASING if change_pct > 0 else TrendDirection.DECREASING
        verb = "up" if change_pct > 0 else "down"
        description = f"{label} trending {verb} by {abs(change_pct)}% over recent months"
    else:
        direction = TrendDirection.STABLE
        description = f"{label} remaining relatively stable"

    return TrendAnalysis(direction, change_pct, description)


def analyze_trends(forecast: ForecastResult) -> CashflowTrends:
    """Trends over the most recent observed months."""
    recent = forecast.history[-TREND_WINDOW:]
    return CashflowTrends(
        income=analyze_trend([p.income for p in recent], "Income"),
        expense=analyze_trend([p.expense for p in recent], "Expenses"),
        savings=analyze_trend([p.net for p in recent], "Savings"),
    )


def _savings_insight(recent: Sequence[PredictionPoint]) -> List[SpendingInsight]:
    avg_income = _mean([p.income for p in recent])
    avg_savings = avg_income - _mean([p.expense for p in recent])
    if avg_income <= 0:
        return []

    savings_rate = (avg_savings / avg_income * 100).quantize(Decimal("0.1"))
    target = avg_income * TARGET_SAVINGS_RATE
    if savings_rate < LOW_SAVINGS_PCT:
        return [SpendingInsight(
            type=InsightType.WARNING,
            title="Low Savings Rate",
            description=(
                f"Your savings rate is {savings_rate}%. "
                "Experts recommend saving at least 20% of income."
            ),
            impact=(target - avg_savings).quantize(Decimal("0.01")),
        )]
    if savings_rate > HIGH_SAVINGS_PCT:
        return [SpendingInsight(
            type=InsightType.POSITIVE,
            title="Excellent Savings Rate",
            description=(
                f"Your savings rate of {savings_rate}% is exceptional! "
                "You're on track for strong financial health."
            ),
            impact=(avg_savings - target).quantize(Decimal("0.01")),
        )]
    return []


def _rising_expense_insight(
    recent: Sequence[PredictionPoint],
    upcoming: Sequence[PredictionPoint],
) -> List[SpendingInsight]:
    avg_expense = _mean([p.expense for p in recent])
    if not upcoming or avg_expense <= 0:
        return []

    future_avg = _mean([p.expense for p in upcoming])
    increase_pct = ((future_avg - avg_expense) / avg_expense * 100).quantize(Decimal("0.1"))
    if increase_pct <= RISING_EXPENSE_PCT:
        return []
    return [SpendingInsight(
        type=InsightType.WARNING,
        title="Rising Expenses Predicted",
        description=(
            f"Expenses may increase by {increase_pct}% in coming months. "
            "Consider reviewing your budget."
        ),
        impact=(future_avg - avg_expense).quantize(Decimal("0.01")),
    )]


def _category_insights(expenses: CategoryBreakdown) -> List[SpendingInsight]:
    insights = []
    for total in expenses.totals:
        share = expenses.share_of(total).quantize(Decimal("0.1"))
        if share > DOMINANT_CATEGORY_PCT and total.category_name not in HOUSING_CATEGORIES:
            insights.append(SpendingInsight(
                type=InsightType.WARNING,
                title=f"High {total.category_name} Spending",
                description=(
                    f"{total.category_name} accounts for {share}% of your expenses. "
                    "Consider if this aligns with your priorities."
                ),
                impact=total.amount,
                category=total.category_name,
            ))
    return insights


def generate_insights(
    forecast: ForecastResult,
    expenses: CategoryBreakdown,
) -> List[SpendingInsight]:
    """
    Build actionable insights from recent history, the forecast and
    the expense breakdown.
    """
    recent = forecast.history[-RECENT_MONTHS:]
    upcoming = forecast.forecast[:RECENT_MONTHS]

    insights: List[SpendingInsight] = []
    if recent:
        insights.extend(_savings_insight(recent))
        insights.extend(_rising_expense_insight(recent, upcoming))
    insights.extend(_category_insights(expenses))
    return insights
