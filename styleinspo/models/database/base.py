# File: styleinspo/models/database/base.py

"""Base configuration and utilities for SQLAlchemy models.

This module provides the foundational setup for all database models, including:
- Base class configuration
- The portable JSON column type (JSONB on PostgreSQL)
- Audit timestamp mixin
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# JSON everywhere, JSONB where the database supports indexing it
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all database models."""


class TimestampMixin:
    """Mixin adding creation and update timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False
    )
