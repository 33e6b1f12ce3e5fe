"""Shared pytest fixtures and configurations for the StyleInspo application.

This module provides test fixtures and configurations used across all test files,
including:
- Environment configuration (set before the application is imported)
- Database session management
- Fake integrations (image storage, vision, email transport)
- Test client setup
- Authentication fixtures
- Test data fixtures
"""

import os

# Settings are read once and cached, so the environment must be in place
# before anything from styleinspo is imported
os.environ.update({
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
    "ADMIN_EMAIL": "admin@example.com",
    "ADMIN_PASSWORD": "correct-horse-battery",
    "SECRET_KEY": "test-secret-key",
    "AZURE_STORAGE_CONNECTION_STRING": "",
    "REPLICATE_API_TOKEN": "",
    "OPENAI_API_KEY": "",
    "RESEND_API_KEY": "",
    "APPLICATIONINSIGHTS_CONNECTION_STRING": "",
})

import io
from typing import AsyncGenerator, Generator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from styleinspo.core.config import (
    AzureStorageSettings,
    DatabaseSettings,
    EmailSettings,
    get_settings
)
from styleinspo.core.exceptions import ValidationError
from styleinspo.database.session import SessionManager, init_db
from styleinspo.main import create_application
from styleinspo.models.domain.seo import VisionAnalysisResult
from styleinspo.services.email import EmailService
from styleinspo.services.media import MediaGateway
from styleinspo.services.vision import VisionAnalyzer, VisionProvider
from styleinspo.utils.image_helpers import ImageValidationError, MIME_TYPES, validate_image

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"
BLOB_BASE = "https://testaccount.blob.core.windows.net/styleinspo"


class FakeMediaGateway(MediaGateway):
    """Records uploads and deletes instead of talking to Azure."""

    def __init__(self):
        super().__init__(AzureStorageSettings(AZURE_STORAGE_CONTAINER="styleinspo"))
        self.uploaded: List[str] = []
        self.deleted: List[str] = []
        self.fail_deletes = False

    @property
    def configured(self) -> bool:
        return True

    async def upload(self, data, filename=None, content_type=None) -> str:
        try:
            mime_type = validate_image(data, content_type)
        except ImageValidationError as e:
            raise ValidationError(str(e))
        url = f"{BLOB_BASE}/looks/upload-{len(self.uploaded) + 1}{MIME_TYPES[mime_type]}"
        self.uploaded.append(url)
        return url

    async def delete(self, public_id: str) -> bool:
        if self.fail_deletes:
            raise RuntimeError("storage unavailable")
        self.deleted.append(public_id)
        return True


class StubVisionProvider(VisionProvider):
    """Vision provider returning a canned result or raising a canned error."""

    def __init__(
        self,
        name: str,
        result: Optional[VisionAnalysisResult] = None,
        error: Optional[Exception] = None,
        configured: bool = True
    ):
        self.name = name
        self.result = result
        self.error = error
        self._configured = configured
        self.calls: List[str] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def analyze(self, image_url: str) -> VisionAnalysisResult:
        self.calls.append(image_url)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingEmailTransport:
    """httpx mock handler capturing every request sent to the email provider."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"id": "email-1"})


def make_image(size=(10, 10), fmt="PNG", color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def look_payload(look_id: str = "look-1", **overrides) -> dict:
    """Wire-format body for creating a look with two items."""
    payload = {
        "id": look_id,
        "title": "Autumn Office Layers",
        "mainImage": f"{BLOB_BASE}/looks/{look_id}-main.jpg",
        "items": [
            {
                "id": "item-1",
                "name": "Camel Blazer",
                "price": "$120",
                "affiliateLink": "https://shop.example.com/blazer",
                "image": f"{BLOB_BASE}/looks/{look_id}-item-1.jpg",
                "category": "outerwear"
            },
            {
                "id": "item-2",
                "name": "Silk Blouse",
                "price": "$49.99",
                "affiliateLink": "https://shop.example.com/blouse",
                "image": "https://images.example.com/blouse.jpg",
                "category": "tops"
            }
        ],
        "tags": ["autumn", "office"],
        "occasion": "professional",
        "season": "fall"
    }
    payload.update(overrides)
    return payload


def seo_payload(**overrides) -> dict:
    payload = {
        "pageTitle": "Camel Professional Outfit - 2 Piece Look",
        "metaDescription": "Camel professional outfit.",
        "urlSlug": "camel-professional-outfit-2-piece-look",
        "h1": "Camel Professional Outfit Inspiration",
        "itemDescriptions": {
            "item-1": "Hand written blazer copy.",
            "removed-item": "Stale copy."
        },
        "itemAltTexts": {"item-1": "Camel blazer"}
    }
    payload.update(overrides)
    return payload


# Integration fixtures
@pytest.fixture
def media() -> FakeMediaGateway:
    return FakeMediaGateway()


@pytest.fixture
def email_transport() -> RecordingEmailTransport:
    return RecordingEmailTransport()


@pytest.fixture
def email_service(email_transport: RecordingEmailTransport) -> EmailService:
    return EmailService(
        EmailSettings(RESEND_API_KEY="re_test_key"),
        transport=httpx.MockTransport(email_transport)
    )


# FastAPI test client
@pytest.fixture
def client(media: FakeMediaGateway, email_service: EmailService) -> Generator[TestClient, None, None]:
    """Test client over a fresh application with its own in-memory database."""
    app = create_application(
        get_settings(),
        media=media,
        analyzer=VisionAnalyzer([]),
        email_service=email_service
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    """Bearer headers for the configured admin."""
    response = client.post(
        "/api/v1/auth/token",
        data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


# Database fixtures
@pytest.fixture
async def session_manager() -> AsyncGenerator[SessionManager, None]:
    """Session manager over a fresh in-memory database with seeded pages."""
    manager = SessionManager(DatabaseSettings(DATABASE_URL="sqlite+aiosqlite:///:memory:"))
    await init_db(manager)
    yield manager
    await manager.dispose()
