"""
Settings schemas.

Settings are key-value pairs stored in the database. The planning screen
only needs one of them: the active day every schedule is anchored on.
"""

from pydantic import Field
from typing import Optional
from datetime import date

from models.base import BaseSchema


class SettingResponse(BaseSchema):
    """Raw setting row."""

    key: str = Field(..., description="Setting key (unique)")
    value: str = Field(..., description="Setting value")
    description: Optional[str] = Field(None, description="Human-readable description")


class ActiveDayUpdate(BaseSchema):
    """Move the planning clock."""

    active_day: str = Field(
        ...,
        min_length=1,
        description="Simulated 'today' for scheduling (YYYY-MM-DD)",
        examples=["2025-03-01"]
    )


class ActiveDayResponse(BaseSchema):
    """Current planning clock."""

    active_day: date
    is_override: bool = Field(
        ...,
        description="True when a stored value is in effect, False when falling back to today"
    )
