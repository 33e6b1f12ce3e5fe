"""Outbound email through the Resend HTTP API."""

from html import escape
from typing import Optional

import httpx

from styleinspo.core.config import EmailSettings
from styleinspo.core.exceptions import UpstreamUnavailableError
from styleinspo.core.logging import get_logger
from styleinspo.models.domain.page import ContactRequest

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Contact form not configured. Please email us directly."
SEND_FAILED_MESSAGE = "Failed to send message"


def render_contact_email(contact: ContactRequest) -> str:
    """HTML body for a contact form relay. Every user value is escaped."""
    message = escape(contact.message).replace("\n", "<br>")
    return (
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Name:</strong> {escape(contact.name)}</p>"
        f"<p><strong>Email:</strong> {escape(contact.email)}</p>"
        f"<p><strong>Subject:</strong> {escape(contact.subject)}</p>"
        "<p><strong>Message:</strong></p>"
        f"<p>{message}</p>"
    )


class EmailService:
    """Send transactional email."""

    api_url = "https://api.resend.com/emails"

    def __init__(self, settings: EmailSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.settings.configured

    async def send(self, to: str, subject: str, html: str, reply_to: Optional[str] = None) -> None:
        """Send one message.

        Raises:
            UpstreamUnavailableError: Not configured or the provider rejected it
        """
        if not self.configured:
            logger.warning("Email provider not configured")
            raise UpstreamUnavailableError(NOT_CONFIGURED_MESSAGE)

        payload = {
            "from": self.settings.EMAIL_FROM,
            "to": [to],
            "subject": subject,
            "html": html
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.EMAIL_TIMEOUT_SECONDS,
                transport=self._transport
            ) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self.settings.RESEND_API_KEY}",
                        "Content-Type": "application/json"
                    }
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Email send failed", error=e, subject=subject)
            raise UpstreamUnavailableError(SEND_FAILED_MESSAGE) from e

        logger.info("Email sent", subject=subject)

    async def send_contact(self, recipient: str, contact: ContactRequest) -> None:
        """Relay a contact form submission to the site admin."""
        if not recipient:
            logger.warning("Admin email not configured")
            raise UpstreamUnavailableError(NOT_CONFIGURED_MESSAGE)
        await self.send(
            to=recipient,
            subject=f"Contact Form: {contact.subject}",
            html=render_contact_email(contact),
            reply_to=contact.email
        )
