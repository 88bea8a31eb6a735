"""Shared test fixtures and configuration for Fincast tests."""
import itertools
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fincast.forecast.types import CategoryInfo, MonthBucket, TransactionRecord, TransactionType

TENANT_ID = "tenant_a"
OTHER_TENANT_ID = "tenant_b"


@pytest.fixture
def tenant_id():
    return TENANT_ID


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    return AsyncMock()


@pytest.fixture
def make_transaction():
    """Factory for transaction records with sensible defaults."""
    counter = itertools.count(1)

    def _make(
        amount,
        occurred_at=date(2024, 1, 15),
        type=TransactionType.EXPENSE,
        category_id=None,
        tenant_id=TENANT_ID,
    ):
        return TransactionRecord(
            id=f"txn_{next(counter)}",
            tenant_id=tenant_id,
            amount=Decimal(str(amount)),
            occurred_at=occurred_at,
            category_id=category_id,
            type=type,
        )

    return _make


@pytest.fixture
def categories():
    """Category metadata for the primary tenant, keyed by id."""
    return {
        "cat_salary": CategoryInfo("cat_salary", TENANT_ID, "Salary", TransactionType.INCOME, "#10b981"),
        "cat_food": CategoryInfo("cat_food", TENANT_ID, "Groceries", TransactionType.EXPENSE, "#f59e0b"),
        "cat_rent": CategoryInfo("cat_rent", TENANT_ID, "Rent/Mortgage", TransactionType.EXPENSE, "#ec4899"),
        "cat_fun": CategoryInfo("cat_fun", TENANT_ID, "Entertainment", TransactionType.EXPENSE, "#d946ef"),
    }


def bucket(year, month, income, expense):
    """Shorthand for a MonthBucket."""
    return MonthBucket(date(year, month, 1), Decimal(str(income)), Decimal(str(expense)))
