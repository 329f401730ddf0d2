"""
Fabric definition schemas.

Only the parts of a fabric record that matter for planning: where it has
been knitted before, the machine specs it needs and how fast it knits.
"""

from pydantic import Field, field_validator
from typing import Any, Optional

from models.base import BaseSchema, coerce_number


class SpecPair(BaseSchema):
    """Gauge/diameter combination a fabric can be knitted on. Blank means "any"."""

    gauge: Optional[str] = None
    diameter: Optional[str] = None

    @field_validator("gauge", "diameter", mode="before")
    @classmethod
    def blank_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @property
    def is_empty(self) -> bool:
        return self.gauge is None and self.diameter is None


class FabricDefinition(BaseSchema):
    """Fabric master record."""

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    work_centers: list[str] = Field(
        default_factory=list,
        description="Names of machines this fabric has been produced on"
    )
    specs: Optional[SpecPair] = None
    avg_production_per_day: float = Field(
        0,
        ge=0,
        description="Typical output (kg/day) on any machine; 0 means unknown"
    )
    machine_overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Output (kg/day) on specific machines, keyed by machine id"
    )

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("work_centers", mode="before")
    @classmethod
    def clean_work_centers(cls, v: Any) -> list[str]:
        if not v:
            return []
        return [str(name).strip() for name in v if name and str(name).strip()]

    @field_validator("avg_production_per_day", mode="before")
    @classmethod
    def coerce_rate(cls, v: Any) -> float:
        rate = coerce_number(v, 0)
        return rate if rate > 0 else 0

    @field_validator("machine_overrides", mode="before")
    @classmethod
    def clean_overrides(cls, v: Any) -> dict[str, float]:
        """Keys become strings; blank, zero and unparseable rates are dropped."""
        if not v:
            return {}
        overrides = {}
        for machine_id, rate in dict(v).items():
            value = coerce_number(rate, 0)
            if value > 0:
                overrides[str(machine_id)] = value
        return overrides
