"""
Settings API routes.

The planning clock: read and move the active day.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.settings import ActiveDayUpdate, ActiveDayResponse
from services.settings_service import get_settings_service
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

@router.get("/active-day", response_model=ActiveDayResponse)
async def get_active_day():
    """
    Get the active day.

    Falls back to today when no valid value is stored.
    """
    try:
        service = get_settings_service()
        return service.get_active_day_status()

    except Exception as e:
        return handle_error(e)


@router.put("/active-day", response_model=ActiveDayResponse)
async def set_active_day(data: ActiveDayUpdate):
    """
    Move the active day.

    Saved plans keep their dates until they are recalculated.
    """
    try:
        service = get_settings_service()
        return service.set_active_day(data.active_day)

    except Exception as e:
        return handle_error(e)
