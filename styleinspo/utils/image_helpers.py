"""Image processing utilities for the StyleInspo application.

This module provides the low-level image functions used by the media gateway.
It handles:
- Upload validation (declared MIME type, size, decodability)
- Normalization before storage (EXIF orientation, maximum dimension)

Note: This module focuses on utility functions used by ``MediaGateway``
and should not be used directly by endpoints.
"""

from typing import Dict, Optional, Tuple
import io

from PIL import Image, ImageOps, UnidentifiedImageError

from styleinspo.core.logging import get_logger

logger = get_logger(__name__)

# Constants for image processing
MAX_IMAGE_SIZE = 2000  # Maximum dimension
JPEG_QUALITY = 88      # JPEG compression quality
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
    'image/gif': '.gif'
}
PIL_FORMATS = {
    'image/jpeg': 'JPEG',
    'image/png': 'PNG',
    'image/webp': 'WEBP',
    'image/gif': 'GIF'
}


class ImageValidationError(Exception):
    """Raised when an upload is not an acceptable image."""
    pass


def validate_image(
    image_data: bytes,
    content_type: Optional[str],
    max_size: int = MAX_FILE_SIZE
) -> str:
    """Validate image data and declared format.

    Args:
        image_data: Raw image bytes
        content_type: MIME type declared by the client
        max_size: Maximum allowed file size in bytes

    Returns:
        str: The normalized MIME type

    Raises:
        ImageValidationError: If validation fails
    """
    if not image_data:
        raise ImageValidationError("No file provided")

    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type == "image/jpg":
        mime_type = "image/jpeg"
    if mime_type not in MIME_TYPES:
        raise ImageValidationError(
            "Invalid file type. Only JPEG, PNG, WebP and GIF are allowed."
        )

    if len(image_data) > max_size:
        raise ImageValidationError(
            f"File too large. Maximum size is {max_size // (1024 * 1024)}MB."
        )

    try:
        with Image.open(io.BytesIO(image_data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning("Upload is not a decodable image", error=e)
        raise ImageValidationError("File is not a valid image")

    return mime_type


def optimize_image(
    image_data: bytes,
    mime_type: str,
    max_dimension: int = MAX_IMAGE_SIZE,
    quality: int = JPEG_QUALITY
) -> Tuple[bytes, Dict[str, int]]:
    """Apply EXIF orientation and cap the longest side.

    GIFs are passed through untouched so animations survive.

    Returns:
        Tuple containing:
        - Normalized image bytes
        - Metadata dictionary with dimensions
    """
    if mime_type == 'image/gif':
        return image_data, {'original_size': len(image_data)}

    with Image.open(io.BytesIO(image_data)) as img:
        img = ImageOps.exif_transpose(img)

        width, height = img.size
        if max(width, height) > max_dimension:
            ratio = max_dimension / max(width, height)
            new_size = tuple(max(1, int(dim * ratio)) for dim in (width, height))
            img = img.resize(new_size, Image.LANCZOS)

        fmt = PIL_FORMATS[mime_type]
        if fmt == 'JPEG' and img.mode not in ('RGB', 'L'):
            img = img.convert('RGB')

        output = io.BytesIO()
        save_kwargs = {'optimize': True}
        if fmt in ('JPEG', 'WEBP'):
            save_kwargs['quality'] = quality
        img.save(output, format=fmt, **save_kwargs)

        return output.getvalue(), {
            'width': img.width,
            'height': img.height,
            'original_size': len(image_data),
            'optimized_size': output.tell()
        }
