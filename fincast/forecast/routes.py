"""Cashflow forecast API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fincast.config import settings
from fincast.database import get_db
from fincast.forecast.errors import AggregationInconsistency, ForecastValidationError
from fincast.forecast.schemas import CashflowDashboardResponse
from fincast.forecast.service import get_cashflow_dashboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{tenant_id}", response_model=CashflowDashboardResponse)
async def get_forecast(
    tenant_id: str,
    months: int = Query(
        settings.FORECAST_DEFAULT_HORIZON,
        ge=1,
        le=settings.FORECAST_MAX_HORIZON,
        description="Months to forecast",
    ),
    window: int | None = Query(None, ge=2, description="Trailing months used for the trend"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get the cashflow forecast and category breakdown for a tenant.

    Args:
        tenant_id: Tenant ID
        months: Forecast horizon
        window: Trailing window for trend estimation
        db: Database session

    Returns:
        Observed and forecasted months, confidence, category breakdowns,
        trends and insights
    """
    try:
        dashboard = await get_cashflow_dashboard(db, tenant_id, horizon=months, trailing_window=window)
    except ForecastValidationError as e:
        logger.warning(f"Rejected forecast request for tenant {tenant_id}: {e.message}")
        raise HTTPException(status_code=422, detail=e.message)
    except AggregationInconsistency as e:
        logger.warning(f"Tenant isolation violation for tenant {tenant_id}: {e.message}")
        raise HTTPException(status_code=409, detail=e.message)
    except Exception as e:
        logger.error(f"Error calculating forecast for tenant {tenant_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error calculating forecast: {str(e)}")

    return CashflowDashboardResponse.from_dashboard(dashboard)
