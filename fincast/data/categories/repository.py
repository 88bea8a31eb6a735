"""Category lookup and default-category seeding."""
import logging
from typing import Dict, Iterable, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fincast.data.base import generate_id
from fincast.data.categories.defaults import DEFAULT_CATEGORIES, DefaultCategory
from fincast.data.categories.models import Category
from fincast.forecast.types import CategoryInfo, TransactionType

logger = logging.getLogger(__name__)


def to_info(row: Category) -> CategoryInfo:
    """Convert an ORM row into the engine's category metadata."""
    return CategoryInfo(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        type=TransactionType(row.type),
        color=row.color,
        icon=row.icon,
        parent_id=row.parent_id,
    )


class CategoryRepository:
    """
    Resolves category metadata for a tenant's transactions.

    Lookups are by id only, without a tenant filter, so that a reference
    to another tenant's category reaches the aggregator and is rejected
    there instead of quietly turning into "Uncategorized".
    """

    def __init__(self, db: AsyncSession, defaults: Sequence[DefaultCategory] = DEFAULT_CATEGORIES):
        self.db = db
        self.defaults = tuple(defaults)

    async def get_lookup(self, category_ids: Iterable[str]) -> Dict[str, CategoryInfo]:
        """Get metadata for the given category ids, keyed by id."""
        ids = sorted({c for c in category_ids if c})
        if not ids:
            return {}

        result = await self.db.execute(select(Category).where(Category.id.in_(ids)))
        return {row.id: to_info(row) for row in result.scalars().all()}


async def seed_default_categories(
    db: AsyncSession,
    tenant_id: str,
    defaults: Sequence[DefaultCategory] = DEFAULT_CATEGORIES,
) -> List[Category]:
    """
    Create the default categories for a new tenant.

    Ids are assigned up front so a default can name another default of
    the same type as its parent.

    Raises:
        ValueError: A default names a parent that is not in the table
    """
    ids = {(category.name, category.type): generate_id("cat") for category in defaults}

    rows = []
    for category in defaults:
        parent_id = None
        if category.parent is not None:
            parent_id = ids.get((category.parent, category.type))
            if parent_id is None:
                raise ValueError(f"Default category {category.name} has unknown parent {category.parent}")
        rows.append(Category(
            id=ids[(category.name, category.type)],
            tenant_id=tenant_id,
            name=category.name,
            type=category.type.value,
            color=category.color,
            icon=category.icon,
            parent_id=parent_id,
        ))
    db.add_all(rows)
    await db.commit()

    logger.info(f"Created {len(rows)} default categories for tenant {tenant_id}")
    return rows
