# styleinspo/models/database/analytics.py
"""Append-only analytics event tables."""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, DateTime, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow

MAX_IP_LENGTH = 64


class PageView(Base):
    """A single page render reported by the site."""
    __tablename__ = 'page_views'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page_path: Mapped[str] = mapped_column(Text, nullable=False)
    look_id: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(MAX_IP_LENGTH), nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )

    __table_args__ = (
        Index('idx_page_views_look_id', 'look_id'),
        Index('idx_page_views_created_at', 'created_at'),
    )


class AffiliateClick(Base):
    """An outbound click on an item's affiliate link."""
    __tablename__ = 'affiliate_clicks'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    look_id: Mapped[str] = mapped_column(String(200), nullable=False)
    item_id: Mapped[str] = mapped_column(String(200), nullable=False)
    item_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    affiliate_url: Mapped[str] = mapped_column(Text, nullable=False)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(MAX_IP_LENGTH), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )

    __table_args__ = (
        Index('idx_affiliate_clicks_look_id', 'look_id'),
        Index('idx_affiliate_clicks_created_at', 'created_at'),
    )
