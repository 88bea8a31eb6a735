"""
Category Aggregator.

Splits a tenant's transactions into per-category totals for the income
and expense sides. Transactions whose category does not resolve land in
the "Uncategorized" sentinel of the matching type.
"""
import logging
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from fincast.data.categories.defaults import (
    DEFAULT_CATEGORIES,
    UNCATEGORIZED,
    UNCATEGORIZED_COLOR,
    DefaultCategory,
    uncategorized_for,
)
from fincast.forecast.errors import AggregationInconsistency
from fincast.forecast.monthly import check_occurred_at, check_tenant
from fincast.forecast.types import (
    CategoryBreakdown,
    CategoryInfo,
    CategoryTotal,
    TransactionRecord,
    TransactionType,
    ZERO,
)

logger = logging.getLogger(__name__)

# (category_id, type); category_id is None for the Uncategorized sentinel,
# including a persisted "Uncategorized" row
CategoryKey = Tuple[Optional[str], TransactionType]


def _resolve_category(
    transaction: TransactionRecord,
    lookup: Mapping[str, CategoryInfo],
    tenant_id: str,
) -> Optional[CategoryInfo]:
    """Find the transaction's category, rejecting ones owned by another tenant."""
    if transaction.category_id is None:
        return None
    category = lookup.get(transaction.category_id)
    if category is None:
        return None
    if category.tenant_id is not None and category.tenant_id != tenant_id:
        raise AggregationInconsistency(
            f"Transaction {transaction.id} references category "
            f"{transaction.category_id} owned by another tenant",
            details={
                "transaction_id": transaction.id,
                "category_id": transaction.category_id,
                "requested_tenant": tenant_id,
                "category_tenant": category.tenant_id,
            },
        )
    return category


def _sorted_totals(totals: Iterable[CategoryTotal]) -> Tuple[CategoryTotal, ...]:
    """Descending by amount, ties broken by name ascending."""
    return tuple(sorted(totals, key=lambda t: (-t.amount, t.category_name, t.category_id or "")))


def aggregate_categories(
    transactions: Iterable[TransactionRecord],
    lookup: Mapping[str, CategoryInfo],
    tenant_id: str,
    defaults: Sequence[DefaultCategory] = DEFAULT_CATEGORIES,
) -> Tuple[CategoryBreakdown, CategoryBreakdown]:
    """
    Total transactions per category, split into income and expense.

    Every income/expense transaction contributes to exactly one
    CategoryTotal; transfers are skipped.

    Args:
        transactions: Transactions for a single tenant
        lookup: Category metadata by category id
        tenant_id: Tenant the aggregation is run for
        defaults: Default table supplying the Uncategorized sentinel

    Returns:
        (income breakdown, expense breakdown), each sorted by descending amount

    Raises:
        AggregationInconsistency: A transaction or its category belongs to another tenant
        ForecastValidationError: A transaction has no usable date
    """
    amounts: Dict[CategoryKey, Decimal] = {}
    counts: Dict[CategoryKey, int] = {}
    names: Dict[CategoryKey, Tuple[str, Optional[str]]] = {}
    sentinel_ids: Dict[TransactionType, str] = {}

    for transaction in transactions:
        check_tenant(transaction, tenant_id)
        check_occurred_at(transaction)

        kind = transaction.resolved_type
        if kind == TransactionType.TRANSFER:
            continue

        category = _resolve_category(transaction, lookup, tenant_id)
        if category is None or category.name == UNCATEGORIZED:
            key: CategoryKey = (None, kind)
            if category is not None and category.type == kind:
                sentinel_ids.setdefault(kind, category.id)
                names[key] = (category.name, category.color or UNCATEGORIZED_COLOR)
            else:
                sentinel = uncategorized_for(kind, defaults)
                names.setdefault(key, (sentinel.name, sentinel.color))
        else:
            key = (category.id, kind)
            names.setdefault(key, (category.name, category.color))

        amounts[key] = amounts.get(key, ZERO) + transaction.magnitude
        counts[key] = counts.get(key, 0) + 1

    sides = {TransactionType.INCOME: [], TransactionType.EXPENSE: []}
    for key, amount in amounts.items():
        category_id, kind = key
        name, color = names[key]
        if category_id is None:
            category_id = sentinel_ids.get(kind)
        sides[kind].append(CategoryTotal(
            category_id=category_id,
            category_name=name,
            type=kind,
            amount=amount,
            color=color,
            transaction_count=counts[key],
        ))

    income = CategoryBreakdown(TransactionType.INCOME, _sorted_totals(sides[TransactionType.INCOME]))
    expense = CategoryBreakdown(TransactionType.EXPENSE, _sorted_totals(sides[TransactionType.EXPENSE]))
    logger.debug(
        f"Aggregated {len(income.totals)} income and {len(expense.totals)} "
        f"expense categories for tenant {tenant_id}"
    )
    return income, expense
