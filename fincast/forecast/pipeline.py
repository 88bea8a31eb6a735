"""
Cashflow Pipeline - transactions to dashboard in one pure call.

Flow:
1. Monthly Aggregator reduces transactions to monthly buckets
2. Category Aggregator splits them by category and side
3. Forecast Engine extrapolates the monthly series
4. Trends and insights are derived from the forecast
5. Result Assembler builds the CashflowDashboard

Any failure aborts the whole run; no partial dashboard is returned.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from fincast.data.categories.defaults import DEFAULT_CATEGORIES, DefaultCategory
from fincast.forecast.assembler import assemble_dashboard
from fincast.forecast.categories import aggregate_categories
from fincast.forecast.engine import (
    CONFIDENCE_CEILING,
    DEFAULT_HORIZON,
    DEFAULT_TRAILING_WINDOW,
    forecast_cashflow,
)
from fincast.forecast.monthly import aggregate_monthly
from fincast.forecast.trends import analyze_trends, generate_insights
from fincast.forecast.types import CashflowDashboard, CategoryInfo, TransactionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """Parameters for a pipeline run."""
    horizon: int = DEFAULT_HORIZON
    trailing_window: int = DEFAULT_TRAILING_WINDOW
    confidence_ceiling: float = CONFIDENCE_CEILING
    dense: bool = False
    seasonal_factors: Optional[Mapping[int, Tuple[Decimal, Decimal]]] = None


def build_cashflow_dashboard(
    tenant_id: str,
    transactions: Iterable[TransactionRecord],
    lookup: Mapping[str, CategoryInfo],
    config: Optional[PipelineConfig] = None,
    defaults: Sequence[DefaultCategory] = DEFAULT_CATEGORIES,
) -> CashflowDashboard:
    """
    Run aggregation, forecasting and assembly for one tenant.

    Args:
        tenant_id: Tenant the dashboard is built for
        transactions: The tenant's transactions
        lookup: Category metadata by category id
        config: Optional pipeline configuration
        defaults: Default category table for the Uncategorized fallback

    Returns:
        CashflowDashboard

    Raises:
        ForecastValidationError: Malformed transactions or parameters
        AggregationInconsistency: Data from another tenant in the input
    """
    config = config or PipelineConfig()
    transactions = list(transactions)

    buckets = aggregate_monthly(transactions, tenant_id, dense=config.dense)
    income, expense = aggregate_categories(transactions, lookup, tenant_id, defaults)
    forecast = forecast_cashflow(
        buckets,
        horizon=config.horizon,
        trailing_window=config.trailing_window,
        confidence_ceiling=config.confidence_ceiling,
        seasonal_factors=config.seasonal_factors,
    )

    dashboard = assemble_dashboard(
        tenant_id=tenant_id,
        forecast=forecast,
        income_categories=income,
        expense_categories=expense,
        trends=analyze_trends(forecast),
        insights=generate_insights(forecast, expense),
    )
    if not dashboard.has_data:
        logger.info(f"No transaction history yet for tenant {tenant_id}")
    elif not forecast.has_forecast:
        logger.warning(
            f"Insufficient history for tenant {tenant_id}: "
            f"{len(forecast.history)} month(s), forecast skipped"
        )
    return dashboard
