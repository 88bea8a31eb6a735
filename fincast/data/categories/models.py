"""Category model for grouping transactions."""
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint

from fincast.database import Base
from fincast.data.base import TenantScopedMixin, generate_id


class Category(TenantScopedMixin, Base):
    """Tenant-owned category; seeded from the default table on signup."""

    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=lambda: generate_id("cat"))
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # "income" | "expense"
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    parent_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", "type", name="uq_categories_tenant_name_type"),
    )
