# styleinspo/models/database/theme.py
"""Theme and site settings models."""

from typing import Any, Dict, Optional

from sqlalchemy import String, Text, Boolean, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONType, TimestampMixin

SITE_SETTINGS_ID = 'default'


class Theme(TimestampMixin, Base):
    """A site theme. At most one row has ``is_active`` set."""
    __tablename__ = 'themes'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    logo: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    colors: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    typography: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    layout: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False
    )

    __table_args__ = (
        Index('idx_themes_is_active', 'is_active'),
    )


class SiteSettingsRecord(TimestampMixin, Base):
    """Singleton row (id ``default``) with footer, social and contact settings."""
    __tablename__ = 'site_settings'

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=SITE_SETTINGS_ID
    )
    footer_logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    footer_logo_size: Mapped[int] = mapped_column(Integer, default=150, nullable=False)
    footer_text_color: Mapped[str] = mapped_column(
        String(50),
        default='#9ca3af',
        nullable=False
    )
    social_facebook: Mapped[str] = mapped_column(Text, default='', nullable=False)
    social_twitter: Mapped[str] = mapped_column(Text, default='', nullable=False)
    social_pinterest: Mapped[str] = mapped_column(Text, default='', nullable=False)
    social_instagram: Mapped[str] = mapped_column(Text, default='', nullable=False)
    social_tiktok: Mapped[str] = mapped_column(Text, default='', nullable=False)
    admin_email: Mapped[str] = mapped_column(String(320), default='', nullable=False)
