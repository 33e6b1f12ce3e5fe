"""Service for the singleton site settings record."""

from sqlalchemy.exc import SQLAlchemyError

from styleinspo.core.exceptions import PersistenceError
from styleinspo.core.logging import get_logger
from styleinspo.database.repositories.themes import SiteSettingsRepository
from styleinspo.database.session import SessionManager, with_tracing
from styleinspo.models.domain.theme import PublicSiteSettings, SiteSettings, SiteSettingsUpdate

logger = get_logger(__name__)


class SiteSettingsService:
    """Footer, social links and the contact recipient."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    @with_tracing
    async def get(self) -> SiteSettings:
        """Load the settings row, creating it with defaults on first use."""
        try:
            async with self.session_manager.transaction() as session:
                record = await SiteSettingsRepository(session).get_or_create()
                return SiteSettings.model_validate(record)
        except SQLAlchemyError as e:
            logger.error("Failed to load site settings", error=e)
            raise PersistenceError("Failed to fetch settings") from e

    async def get_public(self) -> PublicSiteSettings:
        settings = await self.get()
        return PublicSiteSettings.model_validate(settings.model_dump())

    @with_tracing
    async def update(self, changes: SiteSettingsUpdate) -> SiteSettings:
        """Apply the provided fields. An empty string clears a social link."""
        fields = {}
        for name in changes.model_fields_set:
            value = getattr(changes, name)
            if value is None:
                continue
            fields[name] = value.strip() if isinstance(value, str) else value
        if "footer_logo_url" in fields and not fields["footer_logo_url"]:
            fields["footer_logo_url"] = None

        try:
            async with self.session_manager.transaction() as session:
                repo = SiteSettingsRepository(session)
                record = await repo.get_or_create()
                record = await repo.update(record.id, **fields)
                result = SiteSettings.model_validate(record)
        except SQLAlchemyError as e:
            logger.error("Failed to update site settings", error=e)
            raise PersistenceError("Failed to update settings") from e

        logger.info("Site settings updated", fields=sorted(fields))
        return result

    async def admin_email(self) -> str:
        return (await self.get()).admin_email.strip()
