from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from src.analytics.guide_metrics import (
    average_rating,
    group_assignments_by_package,
    rank_by_trips,
    sum_deductions,
    sum_fees,
    sum_ledger,
    sum_pax,
)
from src.models.guide_insights import AssignmentRecord
from src.repositories.guide_insights_repository import GuideInsightsRepository
from src.schemas.guide_insights import (
    MonthlyInsightsResponse,
    MonthlyInsightsSummary,
    PackageBreakdownRow,
    WeeklyBreakdownPoint,
)
from src.shared.time import (
    MonthWindow,
    is_current_month,
    now_in_report_timezone,
    previous_month_window,
    resolve_month_window,
    split_into_weeks,
)

logger = logging.getLogger(__name__)


class GuideInsightsService:
    def __init__(
        self,
        repository: GuideInsightsRepository,
        top_packages: int,
        clock: Callable[[], datetime] = now_in_report_timezone,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.top_packages = top_packages

    def get_monthly_insights(
        self, guide_id: str, month: Optional[str] = None
    ) -> MonthlyInsightsResponse:
        now = self.clock()
        window = resolve_month_window(month, now)
        branch_id = self.repository.get_branch_context(guide_id).filter_branch_id
        wallet_id = self.repository.get_wallet_id(guide_id, branch_id)
        logger.debug(
            "Building monthly insights guide_id=%s month=%s branch_id=%s",
            guide_id,
            window.label,
            branch_id,
        )

        assignments, total_trips = self.repository.list_completed_assignments(
            guide_id, window.start, window.end, branch_id
        )
        fields: Dict[str, Any] = {
            "month": window.label,
            "summary": self._build_summary(
                guide_id, window, branch_id, wallet_id, assignments, total_trips
            ),
            "weekly_breakdown": self._build_weekly_breakdown(
                guide_id, window, branch_id, wallet_id
            ),
            "package_breakdown": self._build_package_breakdown(
                guide_id, window, branch_id, assignments
            ),
        }

        if not is_current_month(window, now):
            previous_window = previous_month_window(window)
            previous_assignments, previous_total_trips = self.repository.list_completed_assignments(
                guide_id, previous_window.start, previous_window.end, branch_id
            )
            fields["previous_month"] = self._build_summary(
                guide_id,
                previous_window,
                branch_id,
                wallet_id,
                previous_assignments,
                previous_total_trips,
            )
        return MonthlyInsightsResponse(**fields)

    def _build_summary(
        self,
        guide_id: str,
        window: MonthWindow,
        branch_id: Optional[str],
        wallet_id: Optional[str],
        assignments: Sequence[AssignmentRecord],
        total_trips: int,
    ) -> MonthlyInsightsSummary:
        booking_ids = self.repository.list_trip_booking_ids(self._trip_ids(assignments), branch_id)
        guests = sum_pax(self.repository.list_bookings(booking_ids))
        rating, rating_count = average_rating(self.repository.list_reviews(booking_ids))
        return MonthlyInsightsSummary(
            total_trips=total_trips,
            total_guests=guests,
            total_income=self._income(wallet_id, window.start, window.end),
            total_penalties=self._penalties(guide_id, window.start, window.end, branch_id),
            average_rating=rating,
            total_ratings=rating_count,
        )

    def _build_weekly_breakdown(
        self,
        guide_id: str,
        window: MonthWindow,
        branch_id: Optional[str],
        wallet_id: Optional[str],
    ) -> List[WeeklyBreakdownPoint]:
        points: List[WeeklyBreakdownPoint] = []
        for week in split_into_weeks(window):
            week_assignments, week_trips = self.repository.list_completed_assignments(
                guide_id, week.start, week.end, branch_id
            )
            points.append(
                WeeklyBreakdownPoint(
                    week=week.week,
                    week_start=week.start,
                    week_end=week.end,
                    trips=week_trips,
                    guests=self._guests(self._trip_ids(week_assignments), branch_id),
                    income=self._income(wallet_id, week.start, week.end),
                    penalties=self._penalties(guide_id, week.start, week.end, branch_id),
                )
            )
        return points

    def _build_package_breakdown(
        self,
        guide_id: str,
        window: MonthWindow,
        branch_id: Optional[str],
        assignments: Sequence[AssignmentRecord],
    ) -> List[PackageBreakdownRow]:
        trip_ids = self._trip_ids(assignments)
        if not trip_ids:
            return []
        trips = self.repository.list_trips_with_package(trip_ids, branch_id)
        rows: List[PackageBreakdownRow] = []
        for group in group_assignments_by_package(assignments, trips):
            fee_rows = self.repository.list_assignment_fees(
                guide_id, group.trip_ids, window.start, window.end, branch_id
            )
            rows.append(
                PackageBreakdownRow(
                    package_id=group.package_id,
                    package_name=group.package_name,
                    city=group.city,
                    trips=group.assignment_count,
                    guests=self._guests(group.trip_ids, branch_id),
                    income=float(sum_fees(fee_rows)),
                )
            )
        return rank_by_trips(rows, self.top_packages)

    def _guests(self, trip_ids: Sequence[str], branch_id: Optional[str]) -> int:
        if not trip_ids:
            return 0
        booking_ids = self.repository.list_trip_booking_ids(trip_ids, branch_id)
        return sum_pax(self.repository.list_bookings(booking_ids))

    def _income(self, wallet_id: Optional[str], start: datetime, end: datetime) -> float:
        if not wallet_id:
            return 0.0
        return float(sum_ledger(self.repository.list_wallet_earnings(wallet_id, start, end)))

    def _penalties(
        self, guide_id: str, start: datetime, end: datetime, branch_id: Optional[str]
    ) -> float:
        return float(sum_deductions(self.repository.list_deductions(guide_id, start, end, branch_id)))

    @staticmethod
    def _trip_ids(assignments: Sequence[AssignmentRecord]) -> List[str]:
        return [assignment.trip_id for assignment in assignments if assignment.trip_id]
