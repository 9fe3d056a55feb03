"""Data models for Aurelius' core entities.

The models are implemented using :mod:`pydantic` so that they provide
runtime validation and convenient serialisation to and from dictionaries.
Field names are used for the local JSON document while the aliases match the
column names of the remote ``streams`` table, so the same model can be dumped
for either side (``by_alias=True`` for the remote mirror).
"""

from __future__ import annotations

import datetime
import uuid
from datetime import UTC
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime.datetime:
    return datetime.datetime.now(tz=UTC)


class StreamStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(StrEnum):
    SHOWCASE = "showcase"
    SPONSORED = "sponsored"
    OPEN = "open"


class LineItem(BaseModel):
    """One creator/product entry within a stream.

    Attributes
    ----------
    id:
        Identifier unique within the parent stream.
    name, creator_name:
        Required for the item to count as valid (see :meth:`is_valid`).
    creator_id:
        The creator's shop id.
    source_url:
        Optional product link.
    external_id:
        Product id resolved from ``source_url`` by the link enricher. Once set
        it is treated as cached and not resolved again.

    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str = Field(default="", alias="item_name")
    creator_name: str = ""
    creator_id: str = ""
    source_url: str | None = Field(default=None, alias="product_url")
    external_id: str | None = Field(default=None, alias="product_id")
    notes: str | None = None

    def is_valid(self) -> bool:
        return bool(self.name.strip() and self.creator_name.strip())


class StreamRecord(BaseModel):
    """A scheduled content-creation task."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    owner_id: str | None = Field(default=None, alias="user_id")
    organization_name: str | None = Field(default=None, alias="agency_name")
    due_at: datetime.datetime = Field(alias="due_date")
    status: StreamStatus = StreamStatus.ACTIVE
    priority: Priority = Priority.MEDIUM
    category: Category = Field(default=Category.SHOWCASE, alias="stream_type")
    notes: str | None = None
    created_at: datetime.datetime = Field(default_factory=_now)
    completed_at: datetime.datetime | None = None
    items: list[LineItem] = Field(default_factory=list)

    def display_status(self, now: datetime.datetime | None = None) -> StreamStatus:
        """Status as shown to a user; ``overdue`` is derived, never stored."""
        if self.status is StreamStatus.ACTIVE and (now or _now()) > self.due_at:
            return StreamStatus.OVERDUE
        return self.status

    def to_remote(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class StreamDraft(BaseModel):
    """Input for :meth:`StreamStore.create`."""

    due_days: int
    organization_name: str | None = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.SHOWCASE
    notes: str | None = None
    items: list[LineItem] = Field(default_factory=list)


class StreamPatch(BaseModel):
    """Partial update of a stream.

    Only fields explicitly passed are applied; unknown keys are rejected so a
    typo cannot silently add data to a record.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    organization_name: str | None = Field(default=None, alias="agency_name")
    due_at: datetime.datetime | None = Field(default=None, alias="due_date")
    status: StreamStatus | None = None
    priority: Priority | None = None
    category: Category | None = Field(default=None, alias="stream_type")
    notes: str | None = None
    items: list[LineItem] | None = None
    completed_at: datetime.datetime | None = None

    @field_validator("due_at", "status", "priority", "category", "items")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    def changes(self) -> dict:
        """Explicitly set fields as model values, keyed by field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def to_remote(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class OrganizationProfile(BaseModel):
    """A named set of caption templates keyed by platform."""

    id: str = Field(default_factory=_new_id)
    name: str
    templates: dict[str, str] = Field(default_factory=dict)
