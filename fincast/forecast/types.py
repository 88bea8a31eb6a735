"""
Forecast Types - Core Data Structures.

Plain, immutable data passed between the aggregators, the forecast
engine and the result assembler:
- TransactionRecord / CategoryInfo: the normalized input feed
- MonthBucket: one calendar month of income and expense
- CategoryTotal / CategoryBreakdown: per-category totals for one side
- PredictionPoint: an observed or forecasted month
- ForecastResult: history followed by forecast, plus confidence
- CashflowDashboard: everything the presentation layer renders
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from fincast.forecast.errors import ForecastValidationError


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"  # Between the tenant's own accounts, never aggregated


class TrendDirection(str, Enum):
    """Direction of a recent trend."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class InsightType(str, Enum):
    """Tone of a spending insight."""
    WARNING = "warning"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


ZERO = Decimal("0")


def month_start(value: date) -> date:
    """Pin a date (or datetime) to the first day of its month."""
    return date(value.year, value.month, 1)


# =============================================================================
# INPUT FEED
# =============================================================================

@dataclass(frozen=True)
class TransactionRecord:
    """
    A single normalized transaction for one tenant.

    `type` may be omitted, in which case the sign of `amount` decides:
    non-negative amounts are income, negative amounts are expense.
    Amounts are always aggregated by absolute value.
    """
    id: str
    tenant_id: str
    amount: Decimal
    occurred_at: Optional[date]
    category_id: Optional[str] = None
    type: Optional[TransactionType] = None
    currency: str = "GBP"
    description: Optional[str] = None

    @property
    def resolved_type(self) -> TransactionType:
        if self.type is not None:
            return TransactionType(self.type)
        return TransactionType.INCOME if self.amount >= 0 else TransactionType.EXPENSE

    @property
    def magnitude(self) -> Decimal:
        return abs(Decimal(self.amount))


@dataclass(frozen=True)
class CategoryInfo:
    """Category metadata reachable by category id."""
    id: Optional[str]
    tenant_id: Optional[str]  # None for a default that is not persisted yet
    name: str
    type: TransactionType
    color: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[str] = None


# =============================================================================
# AGGREGATES
# =============================================================================

@dataclass(frozen=True)
class MonthBucket:
    """Income and expense totals for one calendar month."""
    month: date  # Always the first day of the month
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def key(self) -> str:
        return self.month.strftime("%Y-%m")

    @property
    def label(self) -> str:
        return self.month.strftime("%b %Y")


@dataclass(frozen=True)
class CategoryTotal:
    """Aggregate amount for one category on one side (income or expense)."""
    category_id: Optional[str]
    category_name: str
    type: TransactionType
    amount: Decimal
    color: Optional[str] = None
    transaction_count: int = 0


@dataclass(frozen=True)
class CategoryBreakdown:
    """One side of the category split, sorted for presentation."""
    type: TransactionType
    totals: Tuple[CategoryTotal, ...] = ()

    @property
    def total(self) -> Decimal:
        return sum((t.amount for t in self.totals), ZERO)

    def share_of(self, total: CategoryTotal) -> Decimal:
        """Percentage of this side's total held by one category."""
        side_total = self.total
        if side_total == 0:
            return ZERO
        return total.amount / side_total * 100


# =============================================================================
# PREDICTIONS
# =============================================================================

@dataclass(frozen=True)
class ForecastBasis:
    """How a forecasted point was derived."""
    method: str
    window_months: int
    steps_ahead: int
    income_slope: Decimal
    expense_slope: Decimal
    confidence: float


@dataclass(frozen=True)
class PredictionPoint:
    """
    One month of the blended series.

    Observed when `basis` is None, Forecasted when it carries the
    ForecastBasis it was extrapolated from.
    """
    month: date
    income: Decimal
    expense: Decimal
    basis: Optional[ForecastBasis] = None

    @classmethod
    def observed(cls, bucket: MonthBucket) -> "PredictionPoint":
        return cls(month=bucket.month, income=bucket.income, expense=bucket.expense)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def predicted(self) -> bool:
        return self.basis is not None

    @property
    def key(self) -> str:
        return self.month.strftime("%Y-%m")

    @property
    def label(self) -> str:
        return self.month.strftime("%b %Y")


@dataclass(frozen=True)
class ForecastResult:
    """
    Observed history followed by forecasted months.

    History and forecast are held separately so observed points always
    precede predicted ones; `predictions` is the blended series.
    """
    history: Tuple[PredictionPoint, ...]
    forecast: Tuple[PredictionPoint, ...]
    confidence: float

    def __post_init__(self):
        if any(p.predicted for p in self.history):
            raise ForecastValidationError("History may only contain observed points")
        if any(not p.predicted for p in self.forecast):
            raise ForecastValidationError("Forecast may only contain predicted points")
        if not 0.0 <= self.confidence <= 1.0:
            raise ForecastValidationError(
                "Confidence must lie in [0, 1]",
                details={"confidence": self.confidence},
            )
        months = [p.month for p in self.predictions]
        if any(later <= earlier for earlier, later in zip(months, months[1:])):
            raise ForecastValidationError("Prediction months must be strictly increasing")

    @property
    def predictions(self) -> Tuple[PredictionPoint, ...]:
        return self.history + self.forecast

    @property
    def has_forecast(self) -> bool:
        return bool(self.forecast)


@dataclass(frozen=True)
class TrendAnalysis:
    """Recent movement of one series."""
    direction: TrendDirection
    percentage: Decimal
    description: str


@dataclass(frozen=True)
class CashflowTrends:
    """Trends for income, expense and savings (net)."""
    income: TrendAnalysis
    expense: TrendAnalysis
    savings: TrendAnalysis


@dataclass(frozen=True)
class SpendingInsight:
    """An actionable observation about the tenant's cashflow."""
    type: InsightType
    title: str
    description: str
    impact: Decimal
    category: Optional[str] = None


# =============================================================================
# ASSEMBLED RESULT
# =============================================================================

@dataclass(frozen=True)
class CashflowDashboard:
    """Presentation-ready result for a single tenant."""
    tenant_id: str
    forecast: ForecastResult
    income_categories: CategoryBreakdown
    expense_categories: CategoryBreakdown
    trends: CashflowTrends
    insights: Tuple[SpendingInsight, ...] = field(default_factory=tuple)

    @property
    def total_income(self) -> Decimal:
        return self.income_categories.total

    @property
    def total_expense(self) -> Decimal:
        return self.expense_categories.total

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def has_data(self) -> bool:
        """False means "no data yet", which is not an error."""
        return bool(self.forecast.history)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for logging and debugging."""
        return {
            "tenant_id": self.tenant_id,
            "confidence": self.forecast.confidence,
            "months_observed": len(self.forecast.history),
            "months_forecast": len(self.forecast.forecast),
            "total_income": str(self.total_income),
            "total_expense": str(self.total_expense),
            "net": str(self.net),
            "insights": [i.title for i in self.insights],
        }

