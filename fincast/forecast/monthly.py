"""
Monthly Aggregator.

Reduces a tenant's transactions to one income/expense bucket per
calendar month, in chronological order.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from fincast.forecast.errors import AggregationInconsistency, ForecastValidationError
from fincast.forecast.types import (
    MonthBucket,
    TransactionRecord,
    TransactionType,
    ZERO,
    month_start,
)

logger = logging.getLogger(__name__)


def check_tenant(transaction: TransactionRecord, tenant_id: str) -> None:
    """Reject a transaction that belongs to another tenant."""
    if transaction.tenant_id != tenant_id:
        raise AggregationInconsistency(
            f"Transaction {transaction.id} belongs to another tenant",
            details={
                "transaction_id": transaction.id,
                "requested_tenant": tenant_id,
                "transaction_tenant": transaction.tenant_id,
            },
        )


def check_occurred_at(transaction: TransactionRecord) -> date:
    """Return the transaction's date, rejecting missing or malformed ones."""
    occurred_at = transaction.occurred_at
    if not isinstance(occurred_at, date):
        raise ForecastValidationError(
            f"Transaction {transaction.id} has no resolvable date",
            details={"transaction_id": transaction.id, "occurred_at": repr(occurred_at)},
        )
    return occurred_at


def iter_months(start: date, end: date) -> Iterable[date]:
    """Yield the first day of every month from start to end inclusive."""
    current = month_start(start)
    last = month_start(end)
    while current <= last:
        yield current
        current += relativedelta(months=1)


def aggregate_monthly(
    transactions: Iterable[TransactionRecord],
    tenant_id: str,
    dense: bool = False,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[MonthBucket]:
    """
    Group transactions into monthly income/expense buckets.

    Only months with at least one income or expense transaction get a
    bucket unless `dense` is set, in which case every month between the
    first and last month (or the given `start`/`end`) is present, empty
    months as zero buckets. Transfers are skipped.

    Args:
        transactions: Transactions for a single tenant, in any order
        tenant_id: Tenant the aggregation is run for
        dense: Fill months without activity with zero buckets
        start: Earliest month of the dense range (widens, never truncates)
        end: Latest month of the dense range (widens, never truncates)

    Returns:
        Buckets sorted ascending by month

    Raises:
        ForecastValidationError: A transaction has no usable date
        AggregationInconsistency: A transaction belongs to another tenant
    """
    income: Dict[date, Decimal] = {}
    expense: Dict[date, Decimal] = {}

    for transaction in transactions:
        check_tenant(transaction, tenant_id)
        occurred_at = check_occurred_at(transaction)

        kind = transaction.resolved_type
        if kind == TransactionType.TRANSFER:
            continue

        month = month_start(occurred_at)
        income.setdefault(month, ZERO)
        expense.setdefault(month, ZERO)
        if kind == TransactionType.INCOME:
            income[month] += transaction.magnitude
        else:
            expense[month] += transaction.magnitude

    months = sorted(income)
    if dense:
        if start and end and month_start(start) > month_start(end):
            raise ForecastValidationError(
                "Dense range start is after its end",
                details={"start": start.isoformat(), "end": end.isoformat()},
            )
        # Bounds widen the range but never hide observed activity
        bounds = months + [month_start(d) for d in (start, end) if d is not None]
        if months or (start and end):
            months = list(iter_months(min(bounds), max(bounds)))

    buckets = [
        MonthBucket(month=m, income=income.get(m, ZERO), expense=expense.get(m, ZERO))
        for m in months
    ]
    logger.debug(f"Aggregated {len(buckets)} monthly buckets for tenant {tenant_id}")
    return buckets
