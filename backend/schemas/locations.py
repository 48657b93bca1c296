"""Pydantic schemas for location API."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models.location import (
    DEFAULT_SYSTEM_TYPE,
    DESCRIPTION_MAX_LENGTH,
    IDENTIFIER_MAX_LENGTH,
    SYSTEM_TYPE_MAX_LENGTH,
)


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationInput(CamelModel):
    """One record of a bulk payload. Missing identifiers are reported per item, not rejected."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    identifier: Optional[str] = None
    description: Optional[str] = None
    system_type_name: Optional[str] = None


class LocationCreate(LocationInput):
    """Payload for creating or updating a location. Identifier is ignored on update."""

    identifier: str = Field(..., min_length=1, max_length=IDENTIFIER_MAX_LENGTH)
    description: Optional[str] = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    system_type_name: str = Field(default=DEFAULT_SYSTEM_TYPE, min_length=1, max_length=SYSTEM_TYPE_MAX_LENGTH)

    @field_validator("identifier")
    @classmethod
    def identifier_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("identifier must not be blank")
        return v


class LocationResponse(CamelModel):
    """Location in API responses."""

    id: int
    identifier: str
    description: str
    system_type_name: str
    created_date: datetime
    updated_date: Optional[datetime] = None


class BulkInsertRequest(CamelModel):
    """Payload for POST /locations/bulk."""

    locations: list[LocationInput] = Field(default_factory=list)


class BulkInsertResponse(CamelModel):
    """Outcome of a bulk insert: counts plus one error string per rejected item."""

    success: bool
    inserted_count: int = 0
    duplicates_skipped: int = 0
    errors: list[str] = Field(default_factory=list)
