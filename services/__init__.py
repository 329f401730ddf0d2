"""
Business logic services.

Each service handles one domain area. The schedule engine, changeover
policy and plan mutation helpers are plain functions with no store access.
"""

from services.changeover_policy import changeover_days
from services.schedule_engine import (
    recalculate_schedule,
    total_planned_quantity,
    plan_end_date,
)
from services.machine_service import MachineService, get_machine_service
from services.fabric_service import FabricService, get_fabric_service
from services.settings_service import SettingsService, get_settings_service
from services.recommendation_service import (
    RecommendationService,
    get_recommendation_service,
    recommend_machines,
    build_target_order,
)
from services.planning_service import PlanningService, get_planning_service

__all__ = [
    "changeover_days",
    "recalculate_schedule",
    "total_planned_quantity",
    "plan_end_date",
    "MachineService",
    "get_machine_service",
    "FabricService",
    "get_fabric_service",
    "SettingsService",
    "get_settings_service",
    "RecommendationService",
    "get_recommendation_service",
    "recommend_machines",
    "build_target_order",
    "PlanningService",
    "get_planning_service",
]
