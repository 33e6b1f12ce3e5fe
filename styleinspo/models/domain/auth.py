# styleinspo/models/domain/auth.py
from pydantic import BaseModel


class AdminIdentity(BaseModel):
    """The authenticated admin."""
    email: str
    role: str = "admin"


class Token(BaseModel):
    """OAuth2 bearer token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
