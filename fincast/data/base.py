"""Shared base utilities for tenant-scoped data models."""
import secrets

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func


def generate_id(prefix: str) -> str:
    """Generate a unique ID with a prefix."""
    return f"{prefix}_{secrets.token_hex(6)}"


class TenantScopedMixin:
    """Columns every tenant-owned row carries."""

    tenant_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
