"""
Recommendations API routes.

Ranks the machine roster for an order. Nothing is stored.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
import structlog

from models.recommendation import TargetOrder, RecommendationList
from services.recommendation_service import get_recommendation_service
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

@router.get("", response_model=RecommendationList)
async def get_fabric_recommendations(
    fabric: str = Query(..., min_length=1, description="Fabric name"),
    active_day: Optional[date] = Query(None, description="Override the stored active day"),
):
    """
    Rank machines for a fabric.

    History and allowed specs come from the fabric's master record. An
    unknown fabric is ranked on availability only.
    """
    try:
        service = get_recommendation_service()
        return service.recommend_for_fabric(fabric, active_day=active_day)

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=RecommendationList)
async def get_order_recommendations(
    target: TargetOrder,
    active_day: Optional[date] = Query(None, description="Override the stored active day"),
):
    """
    Rank machines for an explicit target order.

    Returns every machine, best first. Machines that fail the history or
    spec filter are flagged `compatible: false` and always rank last.
    """
    try:
        service = get_recommendation_service()
        return service.recommend(target, active_day=active_day)

    except Exception as e:
        return handle_error(e)
