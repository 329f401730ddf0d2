"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    coerce_number,
    coerce_text,
)
from models.work_item import (
    WorkItemKind,
    WorkItem,
    WorkItemCreate,
    WorkItemUpdate,
    WorkItemMove,
    ParsedWorkItem,
)
from models.machine import (
    ConstructionClass,
    MachineStatus,
    Machine,
    MachineSummary,
    MachineListResponse,
)
from models.fabric import (
    SpecPair,
    FabricDefinition,
)
from models.recommendation import (
    TargetOrder,
    MachineRecommendation,
    RecommendationList,
)
from models.settings import (
    SettingResponse,
    ActiveDayUpdate,
    ActiveDayResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "coerce_number",
    "coerce_text",

    # Work items
    "WorkItemKind",
    "WorkItem",
    "WorkItemCreate",
    "WorkItemUpdate",
    "WorkItemMove",
    "ParsedWorkItem",

    # Machines
    "ConstructionClass",
    "MachineStatus",
    "Machine",
    "MachineSummary",
    "MachineListResponse",

    # Fabrics
    "SpecPair",
    "FabricDefinition",

    # Recommendations
    "TargetOrder",
    "MachineRecommendation",
    "RecommendationList",

    # Settings
    "SettingResponse",
    "ActiveDayUpdate",
    "ActiveDayResponse",
]
