"""
Result Assembler.

Combines the forecast, the two category breakdowns, trends and insights
into the CashflowDashboard handed to presentation layers. Performs no
computation of its own; refuses to build from incomplete inputs.
"""
from typing import Iterable, Optional

from fincast.forecast.errors import ForecastValidationError
from fincast.forecast.types import (
    CashflowDashboard,
    CashflowTrends,
    CategoryBreakdown,
    ForecastResult,
    SpendingInsight,
    TransactionType,
)


def assemble_dashboard(
    tenant_id: str,
    forecast: Optional[ForecastResult],
    income_categories: Optional[CategoryBreakdown],
    expense_categories: Optional[CategoryBreakdown],
    trends: Optional[CashflowTrends],
    insights: Iterable[SpendingInsight] = (),
) -> CashflowDashboard:
    """
    Build the presentation-ready result for one tenant.

    Raises:
        ForecastValidationError: A component is missing or a breakdown
            holds the wrong side
    """
    missing = [
        name for name, value in (
            ("forecast", forecast),
            ("income_categories", income_categories),
            ("expense_categories", expense_categories),
            ("trends", trends),
        )
        if value is None
    ]
    if missing:
        raise ForecastValidationError(
            f"Cannot assemble dashboard without: {', '.join(missing)}",
            details={"tenant_id": tenant_id, "missing": missing},
        )

    for breakdown, expected in (
        (income_categories, TransactionType.INCOME),
        (expense_categories, TransactionType.EXPENSE),
    ):
        if breakdown.type != expected or any(t.type != expected for t in breakdown.totals):
            raise ForecastValidationError(
                f"Breakdown passed as {expected.value} holds other category types",
                details={"tenant_id": tenant_id, "expected": expected.value},
            )

    return CashflowDashboard(
        tenant_id=tenant_id,
        forecast=forecast,
        income_categories=income_categories,
        expense_categories=expense_categories,
        trends=trends,
        insights=tuple(insights),
    )
