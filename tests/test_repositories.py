"""Tests for the repository layer."""

from styleinspo.database.repositories.looks import LookRepository
from styleinspo.database.repositories.pages import PageRepository
from styleinspo.database.repositories.themes import SiteSettingsRepository, ThemeRepository
from styleinspo.database.session import init_db
from styleinspo.services.theme import default_sections


async def test_create_if_absent_keeps_first_write(session_manager):
    async with session_manager.transaction() as session:
        repo = LookRepository(session)
        first, created = await repo.create_if_absent(
            "look-1", title="First", main_image="https://images.example.com/1.jpg"
        )
        again, created_again = await repo.create_if_absent(
            "look-1", title="Second", main_image="https://images.example.com/2.jpg"
        )

    assert created is True
    assert created_again is False
    assert again.title == "First"


async def test_merge_update_ignores_none(session_manager):
    async with session_manager.transaction() as session:
        repo = LookRepository(session)
        await repo.create(id="look-1", title="Title", main_image="https://images.example.com/1.jpg")
        look = await repo.merge_update("look-1", {"title": None, "tags": ["new"]})

    assert look.title == "Title"
    assert look.tags == ["new"]


async def test_delete_reports_whether_a_row_went(session_manager):
    async with session_manager.transaction() as session:
        repo = LookRepository(session)
        await repo.create(id="look-1", title="Title", main_image="https://images.example.com/1.jpg")
        assert await repo.delete("look-1") is True
        assert await repo.delete("look-1") is False
        assert await repo.update("look-1", title="x") is None


async def test_upsert_active_leaves_one_active_theme(session_manager):
    async with session_manager.transaction() as session:
        repo = ThemeRepository(session)
        await repo.upsert_active("a", name="A", **default_sections())
        await repo.deactivate_all()
        await repo.upsert_active("b", name="B", **default_sections())

    async with session_manager.session() as session:
        repo = ThemeRepository(session)
        active = await repo.get_active()
        assert active.id == "b"
        assert (await repo.get("a")).is_active is False


async def test_site_settings_singleton(session_manager):
    async with session_manager.transaction() as session:
        repo = SiteSettingsRepository(session)
        first = await repo.get_or_create()
        second = await repo.get_or_create()

    assert first is second
    assert first.id == "default"
    assert first.footer_logo_size == 150


async def test_init_db_is_idempotent(session_manager):
    await init_db(session_manager)

    async with session_manager.session() as session:
        pages = await PageRepository(session).list_all()

    assert [page.id for page in pages] == sorted(page.id for page in pages)
    assert len(pages) == 5
