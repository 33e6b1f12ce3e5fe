# styleinspo/models/database/look.py
"""Look model. Items, tags and the derived bundles live in JSON columns."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONType, utcnow


class FashionLook(Base):
    """A published outfit with its shoppable items."""
    __tablename__ = 'fashion_looks'

    id: Mapped[str] = mapped_column(String(200), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    main_image: Mapped[str] = mapped_column(Text, nullable=False)
    items: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list
    )
    tags: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    seo: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    ai_analysis: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=True
    )
    occasion: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    season: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    seo_last_updated: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    __table_args__ = (
        Index('idx_fashion_looks_created_at', 'created_at'),
        Index('idx_fashion_looks_occasion', 'occasion'),
    )
