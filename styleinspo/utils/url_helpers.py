"""URL utilities for the StyleInspo application.

This module provides:
- URL slug generation for look pages
- A scheme check for links we are willing to store
"""

import re
from urllib.parse import urlparse

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics to one hyphen, trim hyphens.

    >>> slugify("Red Date-Night Outfit!! - 5 Piece Look")
    'red-date-night-outfit-5-piece-look'
    """
    return _NON_ALNUM.sub('-', (text or '').lower()).strip('-')


def is_http_url(url: str) -> bool:
    parsed = urlparse(url or '')
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)
