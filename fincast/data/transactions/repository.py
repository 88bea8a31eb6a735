"""Tenant-scoped access to stored transactions."""
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fincast.data.transactions.models import Transaction
from fincast.forecast.types import TransactionRecord, TransactionType


def to_record(row: Transaction) -> TransactionRecord:
    """Convert an ORM row into the engine's immutable record."""
    return TransactionRecord(
        id=row.id,
        tenant_id=row.tenant_id,
        amount=row.amount,
        occurred_at=row.occurred_at,
        category_id=row.category_id,
        type=TransactionType(row.type) if row.type else None,
        currency=row.currency,
        description=row.description,
    )


class TransactionRepository:
    """Reads a single tenant's transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_tenant(
        self,
        tenant_id: str,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> List[TransactionRecord]:
        """
        Get a tenant's transactions, oldest first.

        Undated rows are always included so the aggregators can reject
        them instead of the query silently hiding them.

        Args:
            tenant_id: Tenant to load
            since: Earliest occurrence date to include
            until: Latest occurrence date to include

        Returns:
            TransactionRecords ordered by occurrence date
        """
        query = select(Transaction).where(Transaction.tenant_id == tenant_id)
        if since is not None:
            query = query.where((Transaction.occurred_at >= since) | (Transaction.occurred_at.is_(None)))
        if until is not None:
            query = query.where((Transaction.occurred_at <= until) | (Transaction.occurred_at.is_(None)))

        result = await self.db.execute(query.order_by(Transaction.occurred_at, Transaction.id))
        return [to_record(row) for row in result.scalars().all()]
