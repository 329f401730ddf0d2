"""
Machine schemas.

A machine is the unit of storage: its in-progress job lives in the
machine's own fields and its future work in `future_plans`.
"""

import re
from pydantic import Field, field_validator, model_validator
from typing import Any, Optional
from enum import Enum

from config.settings import get_settings
from models.base import BaseSchema, coerce_number, coerce_text
from models.work_item import WorkItem


def _default_daily_rate() -> float:
    return get_settings().default_daily_rate


class ConstructionClass(str, Enum):
    """Mechanical category of a knitting machine."""
    SINGLE_KNIT = "single_knit"
    DOUBLE_KNIT = "double_knit"
    JACQUARD = "jacquard"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "ConstructionClass":
        """
        Map a free-text machine type onto a construction class.

        Examples:
            "Single Jersey"  → SINGLE_KNIT
            "DOUBLE 34"      → DOUBLE_KNIT
            "Jacquard"       → JACQUARD
            "BOUS" / ""      → OTHER
        """
        if not label:
            return cls.OTHER

        text = label.strip().lower()
        for member in cls:
            if text == member.value:
                return member

        words = set(re.split(r"[^a-z]+", text))
        for member, aliases in _CLASS_ALIASES:
            if words & aliases:
                return member
        return cls.OTHER


_CLASS_ALIASES = (
    (ConstructionClass.SINGLE_KNIT, {"single", "sj"}),
    (ConstructionClass.DOUBLE_KNIT, {"double", "interlock", "rib"}),
    (ConstructionClass.JACQUARD, {"jacquard", "jacq"}),
)


class MachineStatus(str, Enum):
    """Current operating status of a machine."""
    WORKING = "Working"
    UNDER_OPERATION = "Under Operation"
    NO_ORDER = "No Order"
    OUT_OF_SERVICE = "Out of Service"
    CHANGEOVER = "Qalb"
    OTHER = "Other"


class Machine(BaseSchema):
    """
    A knitting machine with its live state and future plan.
    """

    id: str = Field(..., description="Machine identifier")
    name: str = Field("", description="Display name (e.g. M-12)")
    machine_type: str = Field("", description="Machine type label as entered")
    construction_class: ConstructionClass = Field(
        ConstructionClass.OTHER,
        description="Construction class driving changeover duration"
    )
    status: MachineStatus = Field(MachineStatus.NO_ORDER)
    client: str = Field("", description="Client of the in-progress job")
    fabric: str = Field("", description="Fabric of the in-progress job")
    daily_rate: float = Field(
        default_factory=_default_daily_rate,
        description="Average production (kg/day)"
    )
    day_production: float = Field(0, description="Production logged for the active day")
    remaining_mfg: float = Field(0, description="Remaining quantity of the in-progress job")
    gauge: Optional[str] = None
    diameter: Optional[str] = None
    order_reference: str = Field("", description="Reference of the in-progress job")
    order_name: str = Field("", description="Order name of the in-progress job")
    future_plans: list[WorkItem] = Field(default_factory=list)
    last_updated: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def class_from_type(cls, data: Any) -> Any:
        """Rows without a construction class get it from the type label."""
        if isinstance(data, dict) and not data.get("construction_class"):
            data = {**data, "construction_class": data.get("machine_type")}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator(
        "name", "machine_type", "client", "fabric", "order_reference", "order_name",
        mode="before",
    )
    @classmethod
    def coerce_strings(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("gauge", "diameter", mode="before")
    @classmethod
    def blank_spec_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("construction_class", mode="before")
    @classmethod
    def parse_construction_class(cls, v: Any) -> ConstructionClass:
        if isinstance(v, ConstructionClass):
            return v
        return ConstructionClass.from_label(coerce_text(v))

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> MachineStatus:
        if isinstance(v, MachineStatus):
            return v
        text = coerce_text(v).strip().lower()
        if not text:
            return MachineStatus.NO_ORDER
        for member in MachineStatus:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        return MachineStatus.OTHER

    @field_validator("daily_rate", mode="before")
    @classmethod
    def coerce_daily_rate(cls, v: Any) -> float:
        """Missing, zero, negative or unparseable rates take the configured default."""
        rate = coerce_number(v, 0)
        return rate if rate > 0 else _default_daily_rate()

    @field_validator("day_production", "remaining_mfg", mode="before")
    @classmethod
    def coerce_quantities(cls, v: Any) -> float:
        return coerce_number(v, 0)

    @field_validator("future_plans", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return v or []

    @property
    def has_job_in_progress(self) -> bool:
        return self.remaining_mfg > 0

    @property
    def schedule_rate(self) -> float:
        """Rate the in-progress job is finishing at: today's log if any, else the average."""
        if self.day_production > 0:
            return self.day_production
        return self.daily_rate


class MachineSummary(BaseSchema):
    """Machine with headline figures of its plan."""

    machine: Machine
    planned_quantity: float = Field(..., description="Sum of PRODUCTION quantities")
    plan_end_date: Optional[str] = Field(None, description="End date of the last work item")


class MachineListResponse(BaseSchema):
    """List of machines."""

    data: list[Machine]
    total: int
