"""
Tests for the transaction and category repositories.

Database sessions are mocked; the tests check row conversion, the
category lookup and seeding.
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from fincast.data.categories.defaults import DEFAULT_CATEGORIES, DefaultCategory
from fincast.data.categories.repository import CategoryRepository, seed_default_categories
from fincast.data.transactions.repository import TransactionRepository
from fincast.forecast.types import TransactionType

from tests.conftest import OTHER_TENANT_ID


# =============================================================================
# Fixtures
# =============================================================================

def scalars_result(rows):
    """Mock an execute() result whose scalars().all() returns rows."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


@pytest.fixture
def transaction_row(tenant_id):
    row = MagicMock()
    row.id = "txn_1"
    row.tenant_id = tenant_id
    row.category_id = "cat_food"
    row.amount = Decimal("-12.50")
    row.type = "expense"
    row.occurred_at = date(2024, 1, 5)
    row.currency = "GBP"
    row.description = "Corner shop"
    return row


@pytest.fixture
def category_row():
    row = MagicMock()
    row.id = "cat_food"
    row.tenant_id = OTHER_TENANT_ID
    row.name = "Groceries"
    row.type = "expense"
    row.color = "#f59e0b"
    row.icon = None
    row.parent_id = None
    return row


# =============================================================================
# TransactionRepository
# =============================================================================

class TestTransactionRepository:
    """Tests for tenant-scoped transaction loading."""

    @pytest.mark.asyncio
    async def test_converts_rows(self, mock_db, tenant_id, transaction_row):
        mock_db.execute.return_value = scalars_result([transaction_row])

        records = await TransactionRepository(mock_db).list_for_tenant(tenant_id)

        assert mock_db.execute.called
        assert len(records) == 1
        record = records[0]
        assert record.tenant_id == tenant_id
        assert record.type == TransactionType.EXPENSE
        assert record.magnitude == Decimal("12.50")
        assert record.occurred_at == date(2024, 1, 5)

    @pytest.mark.asyncio
    async def test_untyped_rows_keep_sign_semantics(self, mock_db, tenant_id, transaction_row):
        transaction_row.type = None
        mock_db.execute.return_value = scalars_result([transaction_row])

        records = await TransactionRepository(mock_db).list_for_tenant(
            tenant_id, since=date(2024, 1, 1), until=date(2024, 1, 31)
        )

        assert records[0].type is None
        assert records[0].resolved_type == TransactionType.EXPENSE

    @pytest.mark.asyncio
    async def test_query_filters_by_tenant(self, mock_db, tenant_id):
        mock_db.execute.return_value = scalars_result([])

        await TransactionRepository(mock_db).list_for_tenant(tenant_id)

        statement = mock_db.execute.call_args[0][0]
        assert "transactions.tenant_id" in str(statement)


# =============================================================================
# CategoryRepository
# =============================================================================

class TestCategoryRepository:
    """Tests for category lookup."""

    @pytest.mark.asyncio
    async def test_lookup_keeps_foreign_tenant(self, mock_db, category_row):
        """Rows are returned with their owner so the aggregator can reject them."""
        mock_db.execute.return_value = scalars_result([category_row])

        lookup = await CategoryRepository(mock_db).get_lookup(["cat_food", None, "cat_food"])

        assert list(lookup) == ["cat_food"]
        assert lookup["cat_food"].tenant_id == OTHER_TENANT_ID
        assert lookup["cat_food"].type == TransactionType.EXPENSE

    @pytest.mark.asyncio
    async def test_lookup_without_ids_skips_query(self, mock_db):
        lookup = await CategoryRepository(mock_db).get_lookup([None, None])

        assert lookup == {}
        assert not mock_db.execute.called


# =============================================================================
# Seeding
# =============================================================================

class TestSeeding:
    """Tests for default-category seeding."""

    @pytest.mark.asyncio
    async def test_seeds_every_default(self, mock_db, tenant_id):
        mock_db.add_all = MagicMock()

        rows = await seed_default_categories(mock_db, tenant_id)

        assert len(rows) == len(DEFAULT_CATEGORIES)
        assert all(row.tenant_id == tenant_id for row in rows)
        assert {row.type for row in rows} == {"income", "expense"}
        mock_db.add_all.assert_called_once_with(rows)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_parent_resolves_to_seeded_id(self, mock_db, tenant_id):
        mock_db.add_all = MagicMock()
        defaults = (
            DefaultCategory("Bills", TransactionType.EXPENSE, "#8b5cf6"),
            DefaultCategory("Utilities", TransactionType.EXPENSE, "#8b5cf6", parent="Bills"),
        )

        bills, utilities = await seed_default_categories(mock_db, tenant_id, defaults)

        assert bills.id.startswith("cat_")
        assert bills.parent_id is None
        assert utilities.parent_id == bills.id

    @pytest.mark.asyncio
    async def test_unknown_parent_is_rejected(self, mock_db, tenant_id):
        mock_db.add_all = MagicMock()
        defaults = (DefaultCategory("Utilities", TransactionType.EXPENSE, "#8b5cf6", parent="Bills"),)

        with pytest.raises(ValueError):
            await seed_default_categories(mock_db, tenant_id, defaults)

        mock_db.add_all.assert_not_called()
        mock_db.commit.assert_not_awaited()
