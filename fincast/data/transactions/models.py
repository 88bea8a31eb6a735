"""Transaction model for tenant cashflow history."""
from sqlalchemy import Column, String, Date, Numeric, Text, ForeignKey, Index

from fincast.database import Base
from fincast.data.base import TenantScopedMixin, generate_id


class Transaction(TenantScopedMixin, Base):
    """A single income, expense or transfer, already in the tenant's currency."""

    __tablename__ = "transactions"

    id = Column(String, primary_key=True, default=lambda: generate_id("txn"))
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    amount = Column(Numeric(precision=15, scale=2), nullable=False)
    type = Column(String, nullable=True)  # "income" | "expense" | "transfer"; sign decides when null
    occurred_at = Column(Date, nullable=True)
    currency = Column(String, nullable=False, default="GBP")
    description = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_transactions_tenant_occurred", "tenant_id", "occurred_at"),
    )
