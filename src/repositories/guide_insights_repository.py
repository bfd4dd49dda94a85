from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from src.core.supabase import SupabaseClient
from src.models.guide_insights import (
    EARNING_TRANSACTION_TYPE,
    AssignmentRecord,
    BookingPaxRecord,
    BranchContext,
    DeductionRecord,
    LedgerEntryRecord,
    ReviewRecord,
    TripRecord,
)

MAX_QUERY_ROWS = 5000
IN_FILTER_CHUNK_SIZE = 100
SUPER_ADMIN_ROLE = "super_admin"


class GuideInsightsRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()

    def get_branch_context(self, user_id: str) -> BranchContext:
        rows, _ = self.client.select(
            table="users",
            select="id,role,branch_id",
            filters=[("id", f"eq.{user_id}")],
            limit=1,
        )
        if not rows:
            return BranchContext()
        row = rows[0]
        branch_id = row.get("branch_id")
        return BranchContext(
            branch_id=str(branch_id) if branch_id else None,
            is_super_admin=row.get("role") == SUPER_ADMIN_ROLE,
        )

    def list_completed_assignments(
        self,
        guide_id: str,
        start: datetime,
        end: datetime,
        branch_id: Optional[str] = None,
    ) -> Tuple[List[AssignmentRecord], int]:
        filters = self._build_range_filters("check_in_at", start, end)
        filters.extend(
            [
                ("guide_id", f"eq.{guide_id}"),
                ("check_in_at", "not.is.null"),
                ("check_out_at", "not.is.null"),
            ]
        )
        self._apply_branch_filter(filters, branch_id)
        rows, total = self.client.select(
            table="trip_guides",
            select="id,guide_id,trip_id,branch_id,check_in_at,check_out_at,fee_amount",
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="check_in_at.asc",
            count=True,
        )
        records = [AssignmentRecord.model_validate(row) for row in rows]
        return records, total if total is not None else len(records)

    def list_trips_with_package(
        self, trip_ids: Sequence[str], branch_id: Optional[str] = None
    ) -> List[TripRecord]:
        filters: List[Tuple[str, str]] = []
        self._apply_branch_filter(filters, branch_id)
        rows = self._select_in_chunks(
            table="trips",
            select="id,package_id,package:packages(id,name,city)",
            column="id",
            values=trip_ids,
            filters=filters,
        )
        return [TripRecord.model_validate(row) for row in rows]

    def list_trip_booking_ids(
        self, trip_ids: Sequence[str], branch_id: Optional[str] = None
    ) -> List[str]:
        filters: List[Tuple[str, str]] = []
        self._apply_branch_filter(filters, branch_id)
        rows = self._select_in_chunks(
            table="trip_bookings",
            select="booking_id",
            column="trip_id",
            values=trip_ids,
            filters=filters,
        )
        return [str(row["booking_id"]) for row in rows if row.get("booking_id")]

    def list_bookings(self, booking_ids: Sequence[str]) -> List[BookingPaxRecord]:
        rows = self._select_in_chunks(
            table="bookings",
            select="id,adult_pax,child_pax,infant_pax",
            column="id",
            values=booking_ids,
        )
        return [BookingPaxRecord.model_validate(row) for row in rows]

    def get_wallet_id(self, guide_id: str, branch_id: Optional[str] = None) -> Optional[str]:
        filters: List[Tuple[str, str]] = [("guide_id", f"eq.{guide_id}")]
        self._apply_branch_filter(filters, branch_id)
        rows, _ = self.client.select(
            table="guide_wallets",
            select="id",
            filters=filters,
            limit=1,
        )
        if not rows or not rows[0].get("id"):
            return None
        return str(rows[0]["id"])

    def list_wallet_earnings(
        self, wallet_id: str, start: datetime, end: datetime
    ) -> List[LedgerEntryRecord]:
        filters = self._build_range_filters("created_at", start, end)
        filters.extend(
            [
                ("wallet_id", f"eq.{wallet_id}"),
                ("transaction_type", f"eq.{EARNING_TRANSACTION_TYPE}"),
            ]
        )
        rows, _ = self.client.select(
            table="guide_wallet_transactions",
            select="id,wallet_id,amount,transaction_type,created_at",
            filters=filters,
            limit=MAX_QUERY_ROWS,
        )
        return [LedgerEntryRecord.model_validate(row) for row in rows]

    def list_deductions(
        self,
        guide_id: str,
        start: datetime,
        end: datetime,
        branch_id: Optional[str] = None,
    ) -> List[DeductionRecord]:
        filters = self._build_range_filters("created_at", start, end)
        filters.append(("guide_id", f"eq.{guide_id}"))
        self._apply_branch_filter(filters, branch_id)
        rows, _ = self.client.select(
            table="salary_deductions",
            select="id,guide_id,branch_id,amount,created_at",
            filters=filters,
            limit=MAX_QUERY_ROWS,
        )
        return [DeductionRecord.model_validate(row) for row in rows]

    def list_reviews(self, booking_ids: Sequence[str]) -> List[ReviewRecord]:
        rows = self._select_in_chunks(
            table="reviews",
            select="id,booking_id,guide_rating",
            column="booking_id",
            values=booking_ids,
            filters=[("guide_rating", "not.is.null")],
        )
        return [ReviewRecord.model_validate(row) for row in rows]

    def list_assignment_fees(
        self,
        guide_id: str,
        trip_ids: Sequence[str],
        start: datetime,
        end: datetime,
        branch_id: Optional[str] = None,
    ) -> List[AssignmentRecord]:
        filters = self._build_range_filters("check_in_at", start, end)
        filters.append(("guide_id", f"eq.{guide_id}"))
        self._apply_branch_filter(filters, branch_id)
        rows = self._select_in_chunks(
            table="trip_guides",
            select="id,trip_id,fee_amount",
            column="trip_id",
            values=trip_ids,
            filters=filters,
        )
        return [AssignmentRecord.model_validate(row) for row in rows]

    def _select_in_chunks(
        self,
        table: str,
        select: str,
        column: str,
        values: Sequence[str],
        filters: Optional[List[Tuple[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        normalized_values = list(dict.fromkeys(value for value in values if value))
        if not normalized_values:
            return []
        rows: List[Dict[str, Any]] = []
        for start in range(0, len(normalized_values), IN_FILTER_CHUNK_SIZE):
            chunk = normalized_values[start : start + IN_FILTER_CHUNK_SIZE]
            chunk_filters = list(filters or [])
            chunk_filters.append((column, f"in.({','.join(chunk)})"))
            chunk_rows, _ = self.client.select(
                table=table,
                select=select,
                filters=chunk_filters,
                limit=MAX_QUERY_ROWS,
            )
            rows.extend(chunk_rows)
        return rows

    @staticmethod
    def _build_range_filters(column: str, start: datetime, end: datetime) -> List[Tuple[str, str]]:
        return [
            (column, f"gte.{start.isoformat()}"),
            (column, f"lte.{end.isoformat()}"),
        ]

    @staticmethod
    def _apply_branch_filter(filters: List[Tuple[str, str]], branch_id: Optional[str]) -> None:
        if branch_id:
            filters.append(("branch_id", f"eq.{branch_id}"))
