"""
Cashflow Service - loads a tenant's data and runs the pipeline.

The only async part of forecasting: repositories fetch transactions and
category metadata, then the pure pipeline computes the dashboard.
"""
import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from fincast.config import settings
from fincast.data.categories.repository import CategoryRepository
from fincast.data.transactions.repository import TransactionRepository
from fincast.forecast.engine import DEFAULT_SEASONAL_FACTORS
from fincast.forecast.pipeline import PipelineConfig, build_cashflow_dashboard
from fincast.forecast.types import CashflowDashboard, month_start

logger = logging.getLogger(__name__)


def config_from_settings(
    horizon: Optional[int] = None,
    trailing_window: Optional[int] = None,
) -> PipelineConfig:
    """Pipeline configuration from application settings and request overrides."""
    return PipelineConfig(
        horizon=horizon if horizon is not None else settings.FORECAST_DEFAULT_HORIZON,
        trailing_window=trailing_window if trailing_window is not None else settings.FORECAST_TRAILING_WINDOW,
        confidence_ceiling=settings.FORECAST_CONFIDENCE_CEILING,
        dense=settings.FORECAST_DENSE_HISTORY,
        seasonal_factors=DEFAULT_SEASONAL_FACTORS if settings.FORECAST_APPLY_SEASONALITY else None,
    )


async def get_cashflow_dashboard(
    db: AsyncSession,
    tenant_id: str,
    horizon: Optional[int] = None,
    trailing_window: Optional[int] = None,
    as_of: Optional[date] = None,
    category_repository: Optional[CategoryRepository] = None,
) -> CashflowDashboard:
    """
    Build the cashflow dashboard for a tenant.

    Loads FORECAST_HISTORY_MONTHS of history ending at `as_of`
    (defaults to today), resolves referenced categories and runs the
    forecasting pipeline.

    Args:
        db: Database session
        tenant_id: Tenant ID
        horizon: Months to forecast (settings default when None)
        trailing_window: Months the trend is fitted on (settings default when None)
        as_of: Last day of the history window
        category_repository: Override for tenant-specific default categories

    Returns:
        CashflowDashboard

    Raises:
        ForecastValidationError: Malformed data or parameters
        AggregationInconsistency: Cross-tenant data detected
    """
    config = config_from_settings(horizon, trailing_window)
    as_of = as_of or date.today()
    since = month_start(as_of) - relativedelta(months=settings.FORECAST_HISTORY_MONTHS - 1)

    transactions = await TransactionRepository(db).list_for_tenant(tenant_id, since=since, until=as_of)
    categories = category_repository or CategoryRepository(db)
    lookup = await categories.get_lookup(t.category_id for t in transactions)

    logger.info(
        f"Building cashflow dashboard for tenant {tenant_id}: "
        f"{len(transactions)} transactions since {since.isoformat()}, horizon={config.horizon}"
    )
    return build_cashflow_dashboard(
        tenant_id,
        transactions,
        lookup,
        config=config,
        defaults=categories.defaults,
    )
