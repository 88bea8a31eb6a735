"""
Default categories seeded for every new tenant.

The table is immutable and passed explicitly to the category aggregator
and repository, so callers can substitute tenant-specific overrides.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from fincast.forecast.types import TransactionType

UNCATEGORIZED = "Uncategorized"
UNCATEGORIZED_COLOR = "#6b7280"


@dataclass(frozen=True)
class DefaultCategory:
    """A seed category definition (not tied to a tenant)."""
    name: str
    type: TransactionType
    color: str
    icon: Optional[str] = None
    parent: Optional[str] = None  # Name of a default of the same type


DEFAULT_CATEGORIES: Tuple[DefaultCategory, ...] = (
    # Income
    DefaultCategory("Salary", TransactionType.INCOME, "#10b981", "💼"),
    DefaultCategory("Freelance", TransactionType.INCOME, "#14b8a6", "💻"),
    DefaultCategory("Investments", TransactionType.INCOME, "#06b6d4", "📈"),
    DefaultCategory("Rental Income", TransactionType.INCOME, "#0ea5e9", "🏠"),
    DefaultCategory("Other Income", TransactionType.INCOME, "#3b82f6", "💰"),
    # Expense
    DefaultCategory("Groceries", TransactionType.EXPENSE, "#f59e0b", "🛒"),
    DefaultCategory("Dining & Restaurants", TransactionType.EXPENSE, "#f97316", "🍽️"),
    DefaultCategory("Transportation", TransactionType.EXPENSE, "#ef4444", "🚗"),
    DefaultCategory("Utilities", TransactionType.EXPENSE, "#8b5cf6", "⚡"),
    DefaultCategory("Rent/Mortgage", TransactionType.EXPENSE, "#ec4899", "🏡"),
    DefaultCategory("Healthcare", TransactionType.EXPENSE, "#06b6d4", "⚕️"),
    DefaultCategory("Entertainment", TransactionType.EXPENSE, "#d946ef", "🎬"),
    DefaultCategory("Shopping", TransactionType.EXPENSE, "#a855f7", "🛍️"),
    DefaultCategory("Insurance", TransactionType.EXPENSE, "#3b82f6", "🛡️"),
    DefaultCategory("Education", TransactionType.EXPENSE, "#6366f1", "📚"),
    DefaultCategory("Personal Care", TransactionType.EXPENSE, "#ec4899", "💅"),
    DefaultCategory("Subscriptions", TransactionType.EXPENSE, "#f43f5e", "📱"),
    DefaultCategory("Travel", TransactionType.EXPENSE, "#14b8a6", "✈️"),
    DefaultCategory("Gifts & Donations", TransactionType.EXPENSE, "#10b981", "🎁"),
    DefaultCategory(UNCATEGORIZED, TransactionType.EXPENSE, UNCATEGORIZED_COLOR, "❓"),
)


def uncategorized_for(
    type: TransactionType,
    defaults: Sequence[DefaultCategory] = DEFAULT_CATEGORIES,
) -> DefaultCategory:
    """
    Sentinel category for transactions whose category does not resolve.

    Uses the seeded "Uncategorized" entry of the matching type when the
    table has one, otherwise a synthesized entry with the same name.
    """
    for category in defaults:
        if category.name == UNCATEGORIZED and category.type == type:
            return category
    return DefaultCategory(UNCATEGORIZED, type, UNCATEGORIZED_COLOR)
