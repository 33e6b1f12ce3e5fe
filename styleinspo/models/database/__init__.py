# styleinspo/models/database/__init__.py
"""Database models initialization."""

from .base import Base
from .look import FashionLook
from .theme import Theme, SiteSettingsRecord, SITE_SETTINGS_ID
from .analytics import PageView, AffiliateClick
from .page import Page

# This makes imports cleaner elsewhere in the application
__all__ = [
    'Base',
    'FashionLook',
    'Theme',
    'SiteSettingsRecord',
    'SITE_SETTINGS_ID',
    'PageView',
    'AffiliateClick',
    'Page'
]
