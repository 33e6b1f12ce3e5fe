# styleinspo/models/domain/page.py
from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from .common import CamelModel


class PageResponse(CamelModel):
    """Editable static page copy (about, privacy, ...)."""
    id: str
    title: str
    content: str
    updated_at: Optional[datetime] = None


class PageUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None

    @model_validator(mode="after")
    def require_a_field(self):
        if self.title is None and self.content is None:
            raise ValueError("Provide a title or content to update")
        return self


class ContactRequest(CamelModel):
    """Contact form submission relayed to the site admin."""
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    subject: str = Field(..., min_length=1, max_length=300)
    message: str = Field(..., min_length=1, max_length=10000)
