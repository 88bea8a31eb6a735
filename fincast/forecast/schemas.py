"""Cashflow dashboard response schemas."""
from pydantic import BaseModel
from typing import List

from fincast.forecast.types import (
    CashflowDashboard,
    CategoryBreakdown,
    PredictionPoint,
    TrendAnalysis,
)


class PredictionPointResponse(BaseModel):
    """A single observed or forecasted month."""
    month: str
    label: str
    income: str
    expense: str
    net: str
    predicted: bool
    confidence: float | None  # Per-point confidence, forecasted months only

    @classmethod
    def from_point(cls, point: PredictionPoint) -> "PredictionPointResponse":
        return cls(
            month=point.key,
            label=point.label,
            income=str(point.income),
            expense=str(point.expense),
            net=str(point.net),
            predicted=point.predicted,
            confidence=point.basis.confidence if point.basis else None,
        )


class CategoryTotalResponse(BaseModel):
    """Aggregate for one category."""
    category_id: str | None
    category_name: str
    type: str
    amount: str
    percentage: str
    color: str | None
    transaction_count: int


class CategoryBreakdownResponse(BaseModel):
    """One side of the category split."""
    type: str
    total: str
    categories: List[CategoryTotalResponse]

    @classmethod
    def from_breakdown(cls, breakdown: CategoryBreakdown) -> "CategoryBreakdownResponse":
        return cls(
            type=breakdown.type.value,
            total=str(breakdown.total),
            categories=[
                CategoryTotalResponse(
                    category_id=t.category_id,
                    category_name=t.category_name,
                    type=t.type.value,
                    amount=str(t.amount),
                    percentage=f"{breakdown.share_of(t):.1f}",
                    color=t.color,
                    transaction_count=t.transaction_count,
                )
                for t in breakdown.totals
            ],
        )


class TrendResponse(BaseModel):
    """Recent movement of one series."""
    direction: str
    percentage: str
    description: str

    @classmethod
    def from_trend(cls, trend: TrendAnalysis) -> "TrendResponse":
        return cls(
            direction=trend.direction.value,
            percentage=str(trend.percentage),
            description=trend.description,
        )


class TrendsResponse(BaseModel):
    income: TrendResponse
    expense: TrendResponse
    savings: TrendResponse


class InsightResponse(BaseModel):
    """A spending insight."""
    type: str
    title: str
    description: str
    impact: str
    category: str | None


class CashflowSummary(BaseModel):
    """Totals across the observed period."""
    total_income: str
    total_expense: str
    net: str
    months_observed: int
    months_forecast: int


class CashflowDashboardResponse(BaseModel):
    """Complete cashflow dashboard response."""
    tenant_id: str
    has_data: bool
    confidence: float
    predictions: List[PredictionPointResponse]
    income_categories: CategoryBreakdownResponse
    expense_categories: CategoryBreakdownResponse
    trends: TrendsResponse
    insights: List[InsightResponse]
    summary: CashflowSummary

    @classmethod
    def from_dashboard(cls, dashboard: CashflowDashboard) -> "CashflowDashboardResponse":
        forecast = dashboard.forecast
        return cls(
            tenant_id=dashboard.tenant_id,
            has_data=dashboard.has_data,
            confidence=forecast.confidence,
            predictions=[PredictionPointResponse.from_point(p) for p in forecast.predictions],
            income_categories=CategoryBreakdownResponse.from_breakdown(dashboard.income_categories),
            expense_categories=CategoryBreakdownResponse.from_breakdown(dashboard.expense_categories),
            trends=TrendsResponse(
                income=TrendResponse.from_trend(dashboard.trends.income),
                expense=TrendResponse.from_trend(dashboard.trends.expense),
                savings=TrendResponse.from_trend(dashboard.trends.savings),
            ),
            insights=[
                InsightResponse(
                    type=i.type.value,
                    title=i.title,
                    description=i.description,
                    impact=str(i.impact),
                    category=i.category,
                )
                for i in dashboard.insights
            ],
            summary=CashflowSummary(
                total_income=str(dashboard.total_income),
                total_expense=str(dashboard.total_expense),
                net=str(dashboard.net),
                months_observed=len(forecast.history),
                months_forecast=len(forecast.forecast),
            ),
        )
