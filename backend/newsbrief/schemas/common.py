"""
Shared schema pieces: the response envelope and the camelCase base model.

Every endpoint answers with the same envelope::

    {"success": true, "data": ..., "count": 3}
    {"success": false, "error": "Article not found"}

Resource payloads keep the field names the web client was built against
(``_id``, ``imageUrl``, ``publishedAt``, ...). Python code uses snake_case;
the camelCase names only exist on the wire.
"""

from datetime import datetime
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from newsbrief.db.base import as_utc

T = TypeVar("T")

# SQLite hands back naive datetimes; everything is stored in UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Accepts snake_case attributes or camelCase keys; serializes as camelCase."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ================================
# Envelopes
# ================================

class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ListResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int = Field(..., description="Number of items in data")
    data: list[T]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Example:
        {
            "success": false,
            "error": "Invalid credentials"
        }
    """
    success: bool = False
    error: str = Field(..., description="Error message")
