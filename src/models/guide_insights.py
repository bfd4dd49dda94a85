from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

EARNING_TRANSACTION_TYPE = "earning"


class BranchContext(BaseModel):
    branch_id: Optional[str] = None
    is_super_admin: bool = False

    @property
    def filter_branch_id(self) -> Optional[str]:
        """Branch to scope reads by, or None for global-scope actors."""
        if self.is_super_admin:
            return None
        return self.branch_id


class AssignmentRecord(BaseModel):
    id: Optional[str] = None
    guide_id: Optional[str] = None
    trip_id: Optional[str] = None
    branch_id: Optional[str] = None
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
    fee_amount: Optional[Decimal] = None


class PackageRecord(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None


class TripRecord(BaseModel):
    id: str
    package_id: Optional[str] = None
    package: Optional[PackageRecord] = None


class BookingPaxRecord(BaseModel):
    id: Optional[str] = None
    adult_pax: Optional[int] = None
    child_pax: Optional[int] = None
    infant_pax: Optional[int] = None


class LedgerEntryRecord(BaseModel):
    id: Optional[str] = None
    wallet_id: Optional[str] = None
    amount: Optional[Decimal] = None
    transaction_type: Optional[str] = None
    created_at: Optional[datetime] = None


class DeductionRecord(BaseModel):
    id: Optional[str] = None
    guide_id: Optional[str] = None
    branch_id: Optional[str] = None
    amount: Optional[Decimal] = None
    created_at: Optional[datetime] = None


class ReviewRecord(BaseModel):
    id: Optional[str] = None
    booking_id: Optional[str] = None
    guide_rating: Optional[Decimal] = None
