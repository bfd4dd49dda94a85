from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_current_user_id, get_guide_insights_service
from src.core.errors import AppError, InsightsUnavailableError
from src.schemas.guide_insights import MonthlyInsightsFilters, MonthlyInsightsResponse
from src.services.guide_insights_service import GuideInsightsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guide/insights", tags=["guide-insights"])


def get_monthly_insights_filters(
    month: str | None = Query(default=None, description="Month as YYYY-MM"),
) -> MonthlyInsightsFilters:
    return MonthlyInsightsFilters(month=month)


@router.get(
    "/monthly",
    response_model=MonthlyInsightsResponse,
    response_model_exclude_unset=True,
)
def guide_monthly_insights(
    filters: MonthlyInsightsFilters = Depends(get_monthly_insights_filters),
    guide_id: str = Depends(get_current_user_id),
    service: GuideInsightsService = Depends(get_guide_insights_service),
) -> MonthlyInsightsResponse:
    try:
        return service.get_monthly_insights(guide_id, filters.month)
    except AppError:
        raise
    except Exception as exc:
        logger.exception(
            "Failed to fetch monthly insights guide_id=%s month=%s", guide_id, filters.month
        )
        raise InsightsUnavailableError() from exc
