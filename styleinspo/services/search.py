"""Gallery search over looks."""

from typing import List, Optional, Sequence

from styleinspo.models.domain.look import LookResponse


def search_content(look: LookResponse) -> str:
    """Lowercased tags, title and item categories, space separated."""
    tags = ' '.join(look.tags)
    categories = ' '.join(item.category for item in look.items)
    return f'{tags} {look.title} {categories}'.lower()


def filter_looks(looks: Sequence[LookResponse], query: Optional[str]) -> List[LookResponse]:
    """Keep looks whose search content contains every query term.

    An empty or blank query keeps every look, in the given order.
    """
    terms = (query or '').lower().split()
    if not terms:
        return list(looks)
    return [
        look for look in looks
        if all(term in search_content(look) for term in terms)
    ]
