from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.shared.base import BaseSchema


class MonthlyInsightsFilters(BaseSchema):
    # Keep query parameter names in snake_case for API contract consistency.
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    # Free-form on purpose: unparseable parts fall back to the current month.
    month: Optional[str] = None


class MonthlyInsightsSummary(BaseSchema):
    total_trips: int = Field(ge=0)
    total_guests: int = Field(ge=0)
    total_income: float
    total_penalties: float
    average_rating: float = Field(ge=0, le=5)
    total_ratings: int = Field(ge=0)


class WeeklyBreakdownPoint(BaseSchema):
    week: int = Field(ge=1, le=4)
    week_start: datetime
    week_end: datetime
    trips: int = Field(ge=0)
    guests: int = Field(ge=0)
    income: float
    penalties: float


class PackageBreakdownRow(BaseSchema):
    package_id: Optional[str]
    package_name: str
    city: Optional[str]
    trips: int = Field(ge=0)
    guests: int = Field(ge=0)
    income: float


class MonthlyInsightsResponse(BaseSchema):
    month: str
    summary: MonthlyInsightsSummary
    # Left unset (and omitted from the payload) for the current month.
    previous_month: Optional[MonthlyInsightsSummary] = None
    weekly_breakdown: List[WeeklyBreakdownPoint] = Field(min_length=4, max_length=4)
    package_breakdown: List[PackageBreakdownRow]
