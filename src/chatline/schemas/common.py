"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC, treating naive datetimes as already UTC.

    Some backends (SQLite) drop the offset of timezone-aware columns.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ApiModel(BaseModel):
    """Base model exchanging camelCase JSON keys with the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StatusResponse(ApiModel):
    """Envelope for operations that return no payload."""

    success: bool = Field(True, description="Always true for successful calls")
    message: str = Field(..., description="Human-readable outcome")
