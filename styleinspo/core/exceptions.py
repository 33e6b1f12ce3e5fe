"""Application exception hierarchy.

Every exception carries the HTTP status it maps to and a short human-readable
message. The handlers registered in ``styleinspo.main`` turn them into the
``{"success": false, "error": "..."}`` response body.
"""

from fastapi import status


class AppException(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str = None, status_code: int = None):
        self.detail = detail or self.default_detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.detail)


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ValidationError(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class UnauthorizedError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class UpstreamUnavailableError(AppException):
    """An external service (storage, vision, email) is missing or failing."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Upstream service unavailable"


class PersistenceError(AppException):
    default_detail = "Database operation failed"
