"""
Machines API routes.

Read the roster and re-run a machine's schedule.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.machine import Machine, MachineSummary, MachineListResponse
from services.planning_service import get_planning_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=MachineListResponse)
async def list_machines():
    """
    List all machines with their stored plans.

    Plans are returned as last saved; use the detail endpoint for a plan
    recalculated against the current active day.
    """
    try:
        service = get_planning_service()
        machines = service.list_machines()

        return MachineListResponse(
            data=machines,
            total=len(machines)
        )

    except Exception as e:
        return handle_error(e)


@router.get("/{machine_id}", response_model=MachineSummary)
async def get_machine(machine_id: str):
    """
    Get a machine with its recalculated plan.

    Includes the total planned quantity and the plan's end date.
    """
    try:
        service = get_planning_service()
        return service.get_summary(machine_id)

    except Exception as e:
        return handle_error(e)


@router.post("/{machine_id}/recalculate", response_model=Machine)
async def recalculate_machine(machine_id: str):
    """
    Re-run the schedule and save it.

    Use after the active day moves or the in-progress job changes.
    """
    try:
        service = get_planning_service()
        return service.recalculate(machine_id)

    except Exception as e:
        return handle_error(e)
