"""
Base entity classes.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def _to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision timestamps are stored with."""
    return _to_millis(datetime.now(timezone.utc))


def new_id() -> str:
    return uuid.uuid4().hex


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return _to_millis(value.astimezone(timezone.utc))


def format_timestamp(value: datetime) -> str:
    """Fixed-width ISO-8601 UTC with milliseconds, so string order == time order."""
    value = _as_utc(value)
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{value.microsecond // 1000:03d}Z"


Timestamp = Annotated[
    datetime,
    AfterValidator(_as_utc),
    PlainSerializer(format_timestamp, return_type=str),
]


class Record(BaseModel):
    """
    Base for everything stored in a collection.

    Stored documents use camelCase keys (projectId, createdAt, ...);
    Python code uses the snake_case attribute names.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields in stored documents
        str_strip_whitespace=True,
    )

    id: str = Field(default_factory=new_id, min_length=1)

    def to_record(self) -> dict:
        """Plain JSON-serializable dict, absent optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, data: dict):
        return cls.model_validate(data)


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps. A new entity starts with both equal."""
    created_at: Timestamp = Field(default_factory=utcnow)
    updated_at: Timestamp = Field(default_factory=lambda data: data["created_at"])


class BaseEntity(Record, TimestampMixin):
    """Persistent entity with an id and timestamps."""

    def touch(self) -> None:
        """Move updated_at forward - always strictly, even within one clock tick."""
        now = utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(milliseconds=1)
        self.updated_at = now
