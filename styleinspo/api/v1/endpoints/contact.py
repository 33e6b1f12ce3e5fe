"""Contact form relay."""

from fastapi import APIRouter, Depends

from styleinspo.api.dependencies import get_email_service, get_site_settings_service
from styleinspo.core.logging import get_logger
from styleinspo.models.domain.common import SuccessResponse
from styleinspo.models.domain.page import ContactRequest
from styleinspo.services.email import EmailService
from styleinspo.services.site_settings import SiteSettingsService

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=SuccessResponse)
async def submit_contact(
    contact: ContactRequest,
    email: EmailService = Depends(get_email_service),
    site_settings: SiteSettingsService = Depends(get_site_settings_service)
):
    """Email the submission to the admin address from site settings."""
    recipient = await site_settings.admin_email()
    await email.send_contact(recipient, contact)
    logger.info("Contact form relayed")
    return SuccessResponse(message="Message sent successfully")
