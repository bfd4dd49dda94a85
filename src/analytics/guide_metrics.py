from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from src.models.guide_insights import (
    EARNING_TRANSACTION_TYPE,
    AssignmentRecord,
    BookingPaxRecord,
    DeductionRecord,
    LedgerEntryRecord,
    ReviewRecord,
    TripRecord,
)

UNKNOWN_PACKAGE_KEY = "unknown"
UNKNOWN_PACKAGE_NAME = "Other packages"

T = TypeVar("T")


@dataclass
class PackageGroup:
    package_id: Optional[str]
    package_name: str
    city: Optional[str]
    trip_ids: List[str] = field(default_factory=list)
    assignment_count: int = 0


def sum_pax(bookings: Iterable[BookingPaxRecord]) -> int:
    return sum(
        (booking.adult_pax or 0) + (booking.child_pax or 0) + (booking.infant_pax or 0)
        for booking in bookings
    )


def sum_ledger(entries: Iterable[LedgerEntryRecord]) -> Decimal:
    total = Decimal("0")
    for entry in entries:
        if entry.transaction_type == EARNING_TRANSACTION_TYPE and entry.amount is not None:
            total += entry.amount
    return total


def sum_deductions(entries: Iterable[DeductionRecord]) -> Decimal:
    return sum((entry.amount or Decimal("0") for entry in entries), Decimal("0"))


def sum_fees(assignments: Iterable[AssignmentRecord]) -> Decimal:
    return sum((assignment.fee_amount or Decimal("0") for assignment in assignments), Decimal("0"))


def average_rating(reviews: Iterable[ReviewRecord]) -> Tuple[float, int]:
    """Mean guide rating over positive ratings, rounded half away from zero to 0.1."""
    ratings = [
        review.guide_rating
        for review in reviews
        if review.guide_rating is not None and review.guide_rating > 0
    ]
    if not ratings:
        return 0.0, 0
    mean = sum(ratings, Decimal("0")) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)), len(ratings)


def group_assignments_by_package(
    assignments: Iterable[AssignmentRecord], trips: Iterable[TripRecord]
) -> List[PackageGroup]:
    """Group assignments by their trip's package, in first-seen order.

    Assignments whose trip is not among ``trips`` are left out.
    """
    trips_by_id: Dict[str, TripRecord] = {trip.id: trip for trip in trips}
    groups: Dict[str, PackageGroup] = {}
    for assignment in assignments:
        trip = trips_by_id.get(assignment.trip_id or "")
        if trip is None:
            continue
        key = trip.package_id or UNKNOWN_PACKAGE_KEY
        group = groups.get(key)
        if group is None:
            package = trip.package
            group = PackageGroup(
                package_id=trip.package_id,
                package_name=(package.name if package and package.name else UNKNOWN_PACKAGE_NAME),
                city=package.city if package else None,
            )
            groups[key] = group
        group.assignment_count += 1
        if trip.id not in group.trip_ids:
            group.trip_ids.append(trip.id)
    return list(groups.values())


def rank_by_trips(rows: Sequence[T], limit: int) -> List[T]:
    # sorted() is stable, so ties keep their input order.
    return sorted(rows, key=lambda row: -row.trips)[:limit]
