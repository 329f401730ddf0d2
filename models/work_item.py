"""
Work item schemas.

A work item is one scheduled segment of a machine's future plan: either a
production run that makes fabric, or a SETTINGS placeholder (changeover,
maintenance, deliberate pause) with a fixed day count.

The machine row stores its work items as an embedded ordered list, so these
models are also the persisted shape of `machines.future_plans`.
"""

from pydantic import Field, field_validator
from typing import Any, Optional
from enum import Enum

from models.base import BaseSchema, coerce_number, coerce_text


class WorkItemKind(str, Enum):
    """Work item kinds."""
    PRODUCTION = "PRODUCTION"
    SETTINGS = "SETTINGS"


class WorkItem(BaseSchema):
    """
    One scheduled unit of future work.

    Dates and day counts are computed by the schedule engine; callers
    create items with blank dates.
    """

    kind: WorkItemKind = Field(
        WorkItemKind.PRODUCTION,
        description="PRODUCTION makes fabric, SETTINGS is a non-productive placeholder"
    )
    fabric: str = Field("", description="Fabric name")
    client: str = Field("", description="Client name")
    quantity: float = Field(0, description="Total quantity (kg)")
    rate: float = Field(1, description="Daily production rate (kg/day)")
    days: int = Field(0, description="Computed day count (user-set for SETTINGS)")
    start_date: str = Field("", description="Computed start date (YYYY-MM-DD)")
    end_date: str = Field("", description="Computed end date (YYYY-MM-DD)")
    remaining: float = Field(0, description="Quantity still to produce")
    changeover_days: int = Field(0, description="Computed idle gap placed before this item")
    partially_consumed: bool = Field(
        False,
        description="Keep `remaining` as supplied instead of resetting it to quantity"
    )
    notes: str = Field("", description="Free-text notes")
    order_name: str = Field("", description="Order display name")
    order_reference: str = Field("", description="Order reference code (e.g. ZARA-SJ)")
    order_id: Optional[str] = Field(None, description="Link to the orders collection")
    fabric_id: Optional[str] = Field(None, description="Link to the fabrics collection")
    original_sample_machine: str = Field("", description="Machine the sample was knitted on")

    @field_validator("kind", mode="before")
    @classmethod
    def default_kind(cls, v: Any) -> Any:
        """Missing or unknown kinds are production runs."""
        if isinstance(v, WorkItemKind):
            return v
        if isinstance(v, str) and v.strip().upper() == WorkItemKind.SETTINGS.value:
            return WorkItemKind.SETTINGS
        return WorkItemKind.PRODUCTION

    @field_validator("quantity", "remaining", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> float:
        return coerce_number(v, 0)

    @field_validator("rate", mode="before")
    @classmethod
    def coerce_rate(cls, v: Any) -> float:
        return coerce_number(v, 1)

    @field_validator("days", "changeover_days", mode="before")
    @classmethod
    def coerce_days(cls, v: Any) -> int:
        return int(coerce_number(v, 0))

    @field_validator(
        "fabric", "client", "start_date", "end_date", "notes",
        "order_name", "order_reference", "original_sample_machine",
        mode="before"
    )
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return coerce_text(v)

    @property
    def is_settings(self) -> bool:
        return self.kind == WorkItemKind.SETTINGS


class WorkItemCreate(BaseSchema):
    """
    Append a work item to a machine's plan.

    Everything is optional: an empty body appends a blank row of the
    requested kind, the way the planning grid's "add row" buttons do.
    """

    kind: WorkItemKind = Field(WorkItemKind.PRODUCTION)
    fabric: Optional[str] = None
    client: Optional[str] = None
    quantity: Optional[float] = Field(None, ge=0)
    rate: Optional[float] = Field(None, ge=0)
    days: Optional[int] = Field(None, ge=1, description="Day count for SETTINGS items")
    notes: Optional[str] = None
    order_name: Optional[str] = None
    order_reference: Optional[str] = None
    order_id: Optional[str] = None
    fabric_id: Optional[str] = None


class WorkItemUpdate(BaseSchema):
    """
    Edit fields of an existing work item.

    All fields optional - only provided fields are updated.
    """

    fabric: Optional[str] = None
    client: Optional[str] = None
    quantity: Optional[float] = Field(None, ge=0)
    rate: Optional[float] = Field(None, ge=0)
    days: Optional[int] = Field(None, ge=1)
    remaining: Optional[float] = Field(
        None,
        ge=0,
        description="Setting this marks the item as partially consumed"
    )
    notes: Optional[str] = None
    order_name: Optional[str] = None
    order_reference: Optional[str] = None
    order_id: Optional[str] = None
    fabric_id: Optional[str] = None


class WorkItemMove(BaseSchema):
    """Drag-and-drop reorder request."""

    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


class ParsedWorkItem(BaseSchema):
    """
    Raw output of the plan-parsing assistant.

    The assistant returns a loosely-typed record (or nothing at all when it
    found no match), so the payload is accepted as-is and cleaned up by
    the plan mutation helpers.
    """

    item: Optional[dict[str, Any]] = Field(
        None,
        description="Candidate work item, or null when the parser found no match"
    )
