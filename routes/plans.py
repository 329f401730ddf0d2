"""
Plan API routes.

Edits to a machine's future plan. Positions are 0-based indexes into the
plan as currently stored; every response is the machine with its
recalculated plan.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.machine import Machine
from models.work_item import (
    WorkItemCreate,
    WorkItemUpdate,
    WorkItemMove,
    ParsedWorkItem,
)
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
# ADD ROUTES
# ===================

@router.post("/{machine_id}/plans", response_model=Machine, status_code=201)
async def add_work_item(machine_id: str, data: WorkItemCreate):
    """
    Append a work item to the end of the plan.

    An empty body appends a blank production row at the machine's
    average rate; `{"kind": "SETTINGS"}` appends a one-day settings row.
    """
    try:
        service = get_planning_service()
        return service.add_item(machine_id, data)

    except Exception as e:
        return handle_error(e)


@router.post("/{machine_id}/plans/parsed", response_model=Machine, status_code=201)
async def add_parsed_work_item(machine_id: str, data: ParsedWorkItem):
    """
    Append the plan-parsing assistant's output.

    A null item means the assistant found no match: the plan is returned
    unchanged.
    """
    try:
        service = get_planning_service()
        return service.add_parsed_item(machine_id, data.item)

    except Exception as e:
        return handle_error(e)


# ===================
# EDIT ROUTES
# ===================

@router.post("/{machine_id}/plans/reorder", response_model=Machine)
async def reorder_work_item(machine_id: str, data: WorkItemMove):
    """Move a work item from one position to another (drag and drop)."""
    try:
        service = get_planning_service()
        return service.reorder_item(machine_id, data.from_index, data.to_index)

    except Exception as e:
        return handle_error(e)


@router.patch("/{machine_id}/plans/{index}", response_model=Machine)
async def update_work_item(machine_id: str, index: int, data: WorkItemUpdate):
    """
    Edit a work item.

    Changing the quantity resets the remaining quantity; setting
    `remaining` explicitly marks the run as partially consumed.
    """
    try:
        service = get_planning_service()
        return service.update_item(machine_id, index, data)

    except Exception as e:
        return handle_error(e)


@router.delete("/{machine_id}/plans/{index}", response_model=Machine)
async def delete_work_item(machine_id: str, index: int):
    """Remove a work item. Later items move up in time."""
    try:
        service = get_planning_service()
        return service.delete_item(machine_id, index)

    except Exception as e:
        return handle_error(e)


@router.post("/{machine_id}/plans/{index}/move-up", response_model=Machine)
async def move_work_item_up(machine_id: str, index: int):
    """Swap a work item with the previous one."""
    try:
        service = get_planning_service()
        return service.move_item_up(machine_id, index)

    except Exception as e:
        return handle_error(e)


@router.post("/{machine_id}/plans/{index}/move-down", response_model=Machine)
async def move_work_item_down(machine_id: str, index: int):
    """Swap a work item with the next one."""
    try:
        service = get_planning_service()
        return service.move_item_down(machine_id, index)

    except Exception as e:
        return handle_error(e)


@router.post("/{machine_id}/plans/{index}/activate", response_model=Machine)
async def activate_work_item(machine_id: str, index: int):
    """
    Start a planned work item on the machine.

    The item becomes the machine's in-progress job and leaves the plan.
    """
    try:
        service = get_planning_service()
        return service.activate_item(machine_id, index)

    except Exception as e:
        return handle_error(e)
