"""Tests for gallery search."""

from datetime import datetime, timezone

from styleinspo.models.domain.look import FashionItem, LookResponse
from styleinspo.services.search import filter_looks, search_content


def make_look(look_id, title, tags=(), categories=()):
    return LookResponse(
        id=look_id,
        title=title,
        main_image=f"https://images.example.com/{look_id}.jpg",
        tags=list(tags),
        items=[FashionItem(name=category.title(), category=category) for category in categories],
        created_at=datetime.now(timezone.utc)
    )


OFFICE = make_look("office", "Autumn Office Layers", ["Autumn", "work"], ["outerwear", "tops"])
PICNIC = make_look("picnic", "Summer Picnic", ["summer"], ["dresses"])
LOOKS = [OFFICE, PICNIC]


def test_search_content_is_lowercased():
    assert search_content(OFFICE) == "autumn work autumn office layers outerwear tops"


def test_blank_query_keeps_every_look_in_order():
    assert filter_looks(LOOKS, None) == LOOKS
    assert filter_looks(LOOKS, "   ") == LOOKS


def test_terms_match_tags_title_and_categories():
    assert filter_looks(LOOKS, "OUTERWEAR") == [OFFICE]
    assert filter_looks(LOOKS, "picnic") == [PICNIC]
    assert filter_looks(LOOKS, "work") == [OFFICE]


def test_every_term_must_match():
    assert filter_looks(LOOKS, "summer dresses") == [PICNIC]
    assert filter_looks(LOOKS, "summer outerwear") == []


def test_terms_match_substrings():
    assert filter_looks(LOOKS, "dress") == [PICNIC]
