# styleinspo/models/domain/common.py
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )

    def to_json_dict(self) -> dict:
        """JSON-compatible dict with wire names, as stored in JSON columns."""
        return self.model_dump(mode="json", by_alias=True)


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint family."""
    success: bool = False
    error: str


class SuccessResponse(BaseModel):
    """Acknowledgement for operations without a resource to return."""
    success: bool = True
    message: Optional[str] = None
