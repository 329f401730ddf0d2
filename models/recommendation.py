"""
Recommendation schemas for machine placement.

Answers "which machine should knit this order?" by ranking the roster.
Recommendations are computed per request and never stored.
"""

from pydantic import Field
from datetime import date

from models.base import BaseSchema
from models.fabric import SpecPair


class TargetOrder(BaseSchema):
    """What is being placed: a fabric plus its history and spec constraints."""

    fabric: str = Field("", description="Fabric name")
    historical_machine_names: list[str] = Field(
        default_factory=list,
        description="Machines the fabric has been produced on before"
    )
    allowed_specs: list[SpecPair] = Field(
        default_factory=list,
        description="Gauge/diameter pairs the fabric can be knitted on"
    )


class MachineRecommendation(BaseSchema):
    """Ranking of a single machine against a target order."""

    machine_id: str
    machine_name: str
    score: int = Field(..., description="Ranking score; incompatible machines are <= -1000")
    reasons: list[str] = Field(default_factory=list, description="Scoring steps, in order")
    compatible: bool = Field(..., description="Passed the history and spec filters")
    days_until_free: int = Field(..., description="Days until the machine's queue is empty")
    free_date: str = Field(..., description="active_day + days_until_free (YYYY-MM-DD)")


class RecommendationList(BaseSchema):
    """Complete recommendation response."""

    target: TargetOrder
    active_day: date
    recommendations: list[MachineRecommendation]
    compatible_count: int
