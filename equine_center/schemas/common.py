"""Common schema types."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime
    updated_at: datetime


class BulkDeleteRequest(BaseSchema):
    """IDs selected for a bulk delete."""

    ids: list[int]


class BulkDeleteResponse(BaseSchema):
    deleted: int


class CountItem(BaseSchema):
    """Labelled count for charts and summaries."""

    label: str
    count: int
