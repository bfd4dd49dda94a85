from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

from src.analytics.guide_metrics import (
    UNKNOWN_PACKAGE_NAME,
    average_rating,
    group_assignments_by_package,
    rank_by_trips,
    sum_deductions,
    sum_fees,
    sum_ledger,
    sum_pax,
)
from src.models.guide_insights import (
    AssignmentRecord,
    BookingPaxRecord,
    DeductionRecord,
    LedgerEntryRecord,
    PackageRecord,
    ReviewRecord,
    TripRecord,
)


def test_sum_pax_treats_missing_counts_as_zero() -> None:
    bookings = [
        BookingPaxRecord(adult_pax=2, child_pax=1, infant_pax=None),
        BookingPaxRecord(adult_pax=None, child_pax=None, infant_pax=1),
    ]
    assert sum_pax(bookings) == 4
    assert sum_pax([]) == 0


def test_sum_ledger_counts_only_earnings() -> None:
    entries = [
        LedgerEntryRecord(amount=Decimal("150000"), transaction_type="earning"),
        LedgerEntryRecord(amount=Decimal("50000"), transaction_type="withdrawal"),
        LedgerEntryRecord(amount=None, transaction_type="earning"),
        LedgerEntryRecord(amount=Decimal("25000.50"), transaction_type="earning"),
    ]
    assert sum_ledger(entries) == Decimal("175000.50")


def test_sum_deductions_and_fees() -> None:
    assert sum_deductions(
        [DeductionRecord(amount=Decimal("10000")), DeductionRecord(amount=None)]
    ) == Decimal("10000")
    assert sum_fees(
        [AssignmentRecord(fee_amount=Decimal("500000")), AssignmentRecord(fee_amount=None)]
    ) == Decimal("500000")
    assert sum_deductions([]) == Decimal("0")


def test_average_rating_ignores_null_and_non_positive() -> None:
    reviews = [
        ReviewRecord(guide_rating=Decimal("4")),
        ReviewRecord(guide_rating=Decimal("5")),
        ReviewRecord(guide_rating=None),
        ReviewRecord(guide_rating=Decimal("0")),
    ]
    assert average_rating(reviews) == (4.5, 2)


def test_average_rating_rounds_half_away_from_zero() -> None:
    reviews = [ReviewRecord(guide_rating=Decimal("4")), ReviewRecord(guide_rating=Decimal("4.5"))]
    assert average_rating(reviews) == (4.3, 2)
    thirds = [ReviewRecord(guide_rating=Decimal(value)) for value in ("4", "4", "5")]
    assert average_rating(thirds) == (4.3, 3)


def test_average_rating_empty_is_zero() -> None:
    assert average_rating([]) == (0.0, 0)


def test_group_assignments_by_package_uses_first_seen_order() -> None:
    trips = [
        TripRecord(id="trip-1", package_id="pkg-a", package=PackageRecord(id="pkg-a", name="Komodo", city="Labuan Bajo")),
        TripRecord(id="trip-2", package_id="pkg-b", package=PackageRecord(id="pkg-b", name="Bromo", city="Malang")),
        TripRecord(id="trip-3", package_id="pkg-a", package=PackageRecord(id="pkg-a", name="Komodo", city="Labuan Bajo")),
        TripRecord(id="trip-4", package_id=None, package=None),
    ]
    assignments = [
        AssignmentRecord(id="a-1", trip_id="trip-2"),
        AssignmentRecord(id="a-2", trip_id="trip-1"),
        AssignmentRecord(id="a-3", trip_id="trip-3"),
        AssignmentRecord(id="a-4", trip_id="trip-4"),
        AssignmentRecord(id="a-5", trip_id="trip-missing"),
    ]

    groups = group_assignments_by_package(assignments, trips)

    assert [group.package_id for group in groups] == ["pkg-b", "pkg-a", None]
    assert groups[1].assignment_count == 2
    assert groups[1].trip_ids == ["trip-1", "trip-3"]
    assert groups[1].city == "Labuan Bajo"
    assert groups[2].package_name == UNKNOWN_PACKAGE_NAME
    assert groups[2].city is None


def test_rank_by_trips_is_stable_and_truncated() -> None:
    rows = [SimpleNamespace(name=f"row-{index}", trips=trips) for index, trips in enumerate([1, 3, 1, 3, 2])]
    ranked = rank_by_trips(rows, limit=4)
    assert [row.name for row in ranked] == ["row-1", "row-3", "row-4", "row-0"]
