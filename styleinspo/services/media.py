"""Media gateway for the StyleInspo application.

This service handles all hosted-image operations including:
- Upload validation and normalization (via ``utils.image_helpers``)
- Storage in Azure Blob Storage
- Mapping public URLs back to blob names
- Best-effort deletion
"""

from typing import Optional
from urllib.parse import unquote, urlparse
from uuid import uuid4

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from styleinspo.core.config import AzureStorageSettings
from styleinspo.core.exceptions import UpstreamUnavailableError, ValidationError
from styleinspo.core.logging import get_logger
from styleinspo.utils.image_helpers import (
    ImageValidationError,
    MIME_TYPES,
    optimize_image,
    validate_image
)

logger = get_logger(__name__)

BLOB_HOST_SUFFIX = ".blob.core.windows.net"


def extract_public_id(url: str, container: str) -> Optional[str]:
    """Return the blob name for a URL hosted in ``container``, else None.

    >>> extract_public_id(
    ...     "https://acct.blob.core.windows.net/styleinspo/looks/a.jpg", "styleinspo")
    'looks/a.jpg'
    >>> extract_public_id("https://cdn.example.com/a.jpg", "styleinspo") is None
    True
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    if parsed.scheme not in ("http", "https") or not host.endswith(BLOB_HOST_SUFFIX):
        return None

    parts = parsed.path.lstrip("/").split("/", 1)
    if len(parts) != 2 or parts[0] != container or not parts[1]:
        return None
    return unquote(parts[1])


class MediaGateway:
    """Upload and delete look images in Azure Blob Storage."""

    def __init__(self, storage_settings: AzureStorageSettings):
        self.settings = storage_settings
        self.container_name = storage_settings.AZURE_STORAGE_CONTAINER
        self.folder = storage_settings.AZURE_STORAGE_FOLDER.strip("/")

    @property
    def configured(self) -> bool:
        return self.settings.configured

    def _client(self) -> BlobServiceClient:
        return BlobServiceClient.from_connection_string(
            self.settings.AZURE_STORAGE_CONNECTION_STRING
        )

    def extract_public_id(self, url: str) -> Optional[str]:
        return extract_public_id(url, self.container_name)

    async def upload(
        self,
        data: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> str:
        """Validate, normalize and store an image.

        Returns:
            str: Public URL of the stored blob

        Raises:
            ValidationError: The upload is not an acceptable image
            UpstreamUnavailableError: Storage is not configured or failed
        """
        try:
            mime_type = validate_image(
                data,
                content_type,
                max_size=self.settings.MAX_UPLOAD_BYTES
            )
        except ImageValidationError as e:
            raise ValidationError(str(e))

        if not self.configured:
            raise UpstreamUnavailableError("Image storage is not configured")

        body, metadata = optimize_image(data, mime_type)
        blob_name = f"{self.folder}/{uuid4().hex}{MIME_TYPES[mime_type]}"

        try:
            async with self._client() as service:
                container = service.get_container_client(self.container_name)

                # Ensure container exists
                try:
                    await container.create_container(public_access="blob")
                except ResourceExistsError:
                    pass

                blob_client = container.get_blob_client(blob_name)
                await blob_client.upload_blob(
                    body,
                    overwrite=True,
                    content_settings=ContentSettings(content_type=mime_type)
                )
                url = blob_client.url
        except Exception as e:
            logger.error(
                "Image upload failed",
                error=e,
                filename=filename,
                blob_name=blob_name
            )
            raise UpstreamUnavailableError("Image upload failed")

        logger.info("Image uploaded", blob_name=blob_name, **metadata)
        return url

    async def delete(self, public_id: str) -> bool:
        """Delete a blob. Never raises.

        Returns:
            True when deleted or already gone, False on failure
        """
        if not self.configured:
            logger.warning("Image storage is not configured", public_id=public_id)
            return False
        try:
            async with self._client() as service:
                blob_client = service.get_blob_client(self.container_name, public_id)
                await blob_client.delete_blob()
            logger.info("Image deleted", public_id=public_id)
            return True
        except ResourceNotFoundError:
            return True
        except Exception as e:
            logger.error("Image deletion failed", error=e, public_id=public_id)
            return False
