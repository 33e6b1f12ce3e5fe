"""Admin authentication endpoints."""

from datetime import timedelta

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from styleinspo.core.config import get_settings
from styleinspo.core.exceptions import UnauthorizedError
from styleinspo.core.logging import get_logger
from styleinspo.core.security import authenticate_admin, create_access_token, get_current_admin
from styleinspo.models.domain.auth import AdminIdentity, Token

router = APIRouter()
logger = get_logger(__name__)


@router.post("/token", response_model=Token)
async def login(form_data: OAuth2PasswordRequestForm = Depends()):
    """Exchange the admin email and password for a bearer token."""
    admin = authenticate_admin(form_data.username, form_data.password)
    if admin is None:
        logger.warning("Admin login rejected")
        raise UnauthorizedError("Incorrect email or password")

    settings = get_settings()
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token({"sub": admin.email, "role": admin.role}, expires_delta=expires)
    logger.info("Admin logged in")
    return Token(access_token=token, expires_in=int(expires.total_seconds()))


@router.get("/me", response_model=AdminIdentity)
async def read_current_admin(admin: AdminIdentity = Depends(get_current_admin)):
    return admin
