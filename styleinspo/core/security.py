"""Security infrastructure for the StyleInspo application.

The site has exactly one privileged identity, the configured admin. This
module provides:
- Credential checks against the configured admin email/password
- JWT access token issue and validation
- The ``get_current_admin`` dependency that every mutating endpoint declares
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from styleinspo.core.config import get_settings
from styleinspo.core.exceptions import UnauthorizedError
from styleinspo.core.logging import get_logger
from styleinspo.models.domain.auth import AdminIdentity

logger = get_logger(__name__)

# Password hashing context, used when ADMIN_PASSWORD holds a bcrypt hash
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{get_settings().API_V1_PREFIX}/auth/token",
    auto_error=False
)

ADMIN_ROLE = "admin"


def verify_admin_password(plain_password: str, configured: str) -> bool:
    """Check a password against the configured value, hashed or plain."""
    if pwd_context.identify(configured):
        return pwd_context.verify(plain_password, configured)
    return secrets.compare_digest(plain_password.encode(), configured.encode())


def authenticate_admin(email: str, password: str) -> Optional[AdminIdentity]:
    """Return the admin identity when the credentials match, else None."""
    settings = get_settings()
    admin_email = settings.ADMIN.ADMIN_EMAIL
    admin_password = settings.ADMIN.ADMIN_PASSWORD

    if not admin_email or not admin_password:
        logger.error("Admin credentials not configured")
        return None

    if not email or not password:
        return None

    if email.strip().lower() != admin_email.strip().lower():
        return None

    if not verify_admin_password(password, admin_password):
        return None

    return AdminIdentity(email=admin_email, role=ADMIN_ROLE)


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token with optional expiration."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_access_token(token: str) -> AdminIdentity:
    """Validate a bearer token and return the identity it carries."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")

    email = payload.get("sub")
    role = payload.get("role")
    if not email or role != ADMIN_ROLE:
        raise UnauthorizedError("Could not validate credentials")

    # Tokens issued to a previous admin address stop working once it changes
    admin_email = settings.ADMIN.ADMIN_EMAIL
    if not admin_email or email.lower() != admin_email.lower():
        raise UnauthorizedError("Could not validate credentials")

    return AdminIdentity(email=email, role=role)


async def get_current_admin(
    token: Optional[str] = Depends(oauth2_scheme)
) -> AdminIdentity:
    """Authorization check performed at the start of every mutating operation."""
    if not token:
        raise UnauthorizedError()
    return decode_access_token(token)
