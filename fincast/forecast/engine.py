"""
Forecast Engine - Linear trend extrapolation with confidence scoring.

Given the chronological monthly buckets, the engine projects a number of
future months and scores how far the projection can be trusted.

Method:
- Income and expense are each fitted with an ordinary least-squares line
  over a trailing window of observed months. The x axis is months
  elapsed, so sparse histories keep their real spacing.
- Forecast month k takes the fitted value k months after the last
  observed month, clamped at zero and rounded to cents. Net is always
  recomputed as income - expense, never projected on its own.
- An optional seasonal table scales the projected values per calendar
  month.

Confidence:
- quality = min(1, observed months / 12)
- stability = max(0.3, 1 - mean coefficient of variation of income and
  expense over the window)
- confidence = min(ceiling, quality * stability), 0 with < 2 months

The engine is a pure function of its inputs: no I/O, no shared state,
Decimal arithmetic throughout, so identical history gives identical
output.
"""
import logging
import statistics
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from fincast.forecast.errors import ForecastValidationError
from fincast.forecast.types import (
    ForecastBasis,
    ForecastResult,
    MonthBucket,
    PredictionPoint,
    ZERO,
)

logger = logging.getLogger(__name__)

DEFAULT_HORIZON = 6
DEFAULT_TRAILING_WINDOW = 6
MIN_HISTORY = 2

# Full certainty is never claimed, even for perfectly flat history
CONFIDENCE_CEILING = 0.95
STABILITY_FLOOR = Decimal("0.3")
FULL_QUALITY_MONTHS = 12

# Per-point confidence decays 10% per month ahead, never below 30%
HORIZON_DECAY = Decimal("0.1")
HORIZON_FLOOR = Decimal("0.3")

TREND_METHOD = "linear_trend"
CENTS = Decimal("0.01")

# Calendar month -> (income factor, expense factor); December bonus, January dip,
# holiday spending
DEFAULT_SEASONAL_FACTORS: Mapping[int, Tuple[Decimal, Decimal]] = {
    1: (Decimal("0.95"), Decimal("1.15")),
    2: (Decimal("0.98"), Decimal("0.90")),
    3: (Decimal("1.02"), Decimal("1.00")),
    4: (Decimal("1.00"), Decimal("1.05")),
    5: (Decimal("1.00"), Decimal("1.00")),
    6: (Decimal("1.00"), Decimal("1.10")),
    7: (Decimal("0.98"), Decimal("1.08")),
    8: (Decimal("0.98"), Decimal("1.05")),
    9: (Decimal("1.00"), Decimal("0.95")),
    10: (Decimal("1.00"), Decimal("1.00")),
    11: (Decimal("1.05"), Decimal("1.10")),
    12: (Decimal("1.15"), Decimal("1.20")),
}


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def fit_trend(xs: Sequence[int], ys: Sequence[Decimal]) -> Tuple[Decimal, Decimal]:
    """
    Least-squares line through (x, y) points.

    Returns:
        (slope, intercept); slope is 0 when all x are equal
    """
    n = Decimal(len(xs))
    x_mean = Decimal(sum(xs)) / n
    y_mean = sum(ys, ZERO) / n
    sxx = sum(((Decimal(x) - x_mean) ** 2 for x in xs), ZERO)
    if sxx == 0:
        return ZERO, y_mean
    sxy = sum(((Decimal(x) - x_mean) * (y - y_mean) for x, y in zip(xs, ys)), ZERO)
    slope = sxy / sxx
    return slope, y_mean - slope * x_mean


def coefficient_of_variation(values: Sequence[Decimal]) -> Decimal:
    """Population stdev over mean; a zero-mean series counts as stable."""
    mean = statistics.mean(values)
    if mean == 0:
        return ZERO
    return statistics.pstdev(values) / mean


def calculate_confidence(
    history: Sequence[MonthBucket],
    window: Sequence[MonthBucket],
    ceiling: float = CONFIDENCE_CEILING,
) -> float:
    """
    Score forecast reliability from history length and stability.

    Args:
        history: All observed buckets
        window: Trailing buckets the trend is fitted on
        ceiling: Upper bound for the score

    Returns:
        Confidence in [0, ceiling], rounded to 4 places
    """
    if len(history) < MIN_HISTORY:
        return 0.0

    quality = min(Decimal(1), Decimal(len(history)) / FULL_QUALITY_MONTHS)
    income_cv = coefficient_of_variation([b.income for b in window])
    expense_cv = coefficient_of_variation([b.expense for b in window])
    stability = max(STABILITY_FLOOR, 1 - (income_cv + expense_cv) / 2)

    confidence = min(float(quality * stability), ceiling)
    return round(max(confidence, 0.0), 4)


def _validate_parameters(horizon, trailing_window, confidence_ceiling) -> None:
    if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon <= 0:
        raise ForecastValidationError(
            "Forecast horizon must be a positive number of months",
            details={"horizon": horizon},
        )
    if isinstance(trailing_window, bool) or not isinstance(trailing_window, int) or trailing_window < MIN_HISTORY:
        raise ForecastValidationError(
            f"Trailing window must be at least {MIN_HISTORY} months",
            details={"trailing_window": trailing_window},
        )
    if not 0 < confidence_ceiling <= 1:
        raise ForecastValidationError(
            "Confidence ceiling must lie in (0, 1]",
            details={"confidence_ceiling": confidence_ceiling},
        )


def _validate_history(history: Sequence[MonthBucket]) -> None:
    months = [b.month for b in history]
    if any(later <= earlier for earlier, later in zip(months, months[1:])):
        raise ForecastValidationError(
            "Monthly history must be strictly chronological with one bucket per month"
        )


def forecast_cashflow(
    history: Sequence[MonthBucket],
    horizon: int = DEFAULT_HORIZON,
    trailing_window: int = DEFAULT_TRAILING_WINDOW,
    confidence_ceiling: float = CONFIDENCE_CEILING,
    seasonal_factors: Optional[Mapping[int, Tuple[Decimal, Decimal]]] = None,
) -> ForecastResult:
    """
    Extrapolate future months from observed monthly buckets.

    With fewer than two observed months the result holds only the
    observed points and a confidence of 0. This is a valid "no data yet"
    result, not an error.

    Args:
        history: Observed buckets in ascending month order
        horizon: Number of months to forecast
        trailing_window: Number of most recent months the trend is fitted on
        confidence_ceiling: Upper bound for the confidence score
        seasonal_factors: Optional calendar month -> (income, expense) multipliers

    Returns:
        ForecastResult with history followed by `horizon` forecasted months

    Raises:
        ForecastValidationError: Bad parameters or unordered history
    """
    _validate_parameters(horizon, trailing_window, confidence_ceiling)
    _validate_history(history)

    observed = tuple(PredictionPoint.observed(b) for b in history)
    if len(history) < MIN_HISTORY:
        logger.debug(f"Only {len(history)} observed month(s); skipping extrapolation")
        return ForecastResult(history=observed, forecast=(), confidence=0.0)

    window = list(history[-trailing_window:])
    origin = window[0].month
    xs = [months_between(origin, b.month) for b in window]
    income_slope, income_intercept = fit_trend(xs, [b.income for b in window])
    expense_slope, expense_intercept = fit_trend(xs, [b.expense for b in window])

    confidence = calculate_confidence(history, window, confidence_ceiling)

    last_month = history[-1].month
    forecast: List[PredictionPoint] = []
    for step in range(1, horizon + 1):
        month = last_month + relativedelta(months=step)
        x = Decimal(months_between(origin, month))

        income = max(ZERO, income_intercept + income_slope * x)
        expense = max(ZERO, expense_intercept + expense_slope * x)
        if seasonal_factors:
            income_factor, expense_factor = seasonal_factors.get(month.month, (Decimal(1), Decimal(1)))
            income *= Decimal(str(income_factor))
            expense *= Decimal(str(expense_factor))

        point_confidence = Decimal(str(confidence)) * max(HORIZON_FLOOR, 1 - HORIZON_DECAY * (step - 1))
        forecast.append(PredictionPoint(
            month=month,
            income=_quantize(income),
            expense=_quantize(expense),
            basis=ForecastBasis(
                method=TREND_METHOD,
                window_months=len(window),
                steps_ahead=step,
                income_slope=_quantize(income_slope),
                expense_slope=_quantize(expense_slope),
                confidence=round(float(point_confidence), 4),
            ),
        ))

    logger.debug(
        f"Forecast {horizon} month(s) from {len(history)} observed "
        f"(window={len(window)}, confidence={confidence})"
    )
    return ForecastResult(history=observed, forecast=tuple(forecast), confidence=confidence)
