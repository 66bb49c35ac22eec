"""
Pydantic schemas for Agreement snapshots and API request/response validation.

Snapshots are copied into the agreement when the owner sends it. Each
struct accepts only its listed fields; unknown keys are rejected so the
stored JSON always matches SNAPSHOT_VERSION.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.enums import AgreementStatus

SNAPSHOT_VERSION = 1


class Snapshot(BaseModel):
     model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class PropertySnapshot(Snapshot):
     property_name: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=255)
     city: Optional[str] = Field(None, max_length=100)
     image_url: Optional[str] = Field(None, max_length=500)


class PartySnapshot(Snapshot):
     """Owner contact details as shown on the agreement."""
     name: Optional[str] = Field(None, max_length=200)
     phone: Optional[str] = Field(None, max_length=50)
     email: Optional[str] = Field(None, max_length=255)


class TenantSnapshot(PartySnapshot):
     address: Optional[str] = Field(None, max_length=255)


class BookingSnapshot(Snapshot):
     amount: Optional[Decimal] = Field(None, ge=0)
     paid_at: Optional[datetime] = None
     verified_at: Optional[datetime] = None
     transaction_id: Optional[str] = Field(None, max_length=64)


class RentTerms(Snapshot):
     monthly_rent: Optional[Decimal] = Field(None, ge=0)
     advance_rent: Optional[Decimal] = Field(None, ge=0)
     joining_date: Optional[date] = None
     advance_rent_date: Optional[date] = None
     monthly_payable_day: Optional[int] = Field(None, ge=1, le=31)
     planned_stay_months: Optional[int] = Field(None, ge=1)


class ChargesSnapshot(Snapshot):
     water_bill: Optional[str] = Field(None, max_length=255)
     electricity_per_unit: Optional[Decimal] = Field(None, ge=0)
     extra_notes: Optional[str] = None


class TenantDetails(Snapshot):
     family_members: Optional[str] = None
     vehicle_details: Optional[str] = None


class AgreementSnapshots(BaseModel):
     """All snapshot sections of an agreement; every section is optional."""
     property_snapshot: Optional[PropertySnapshot] = None
     owner_snapshot: Optional[PartySnapshot] = None
     tenant_snapshot: Optional[TenantSnapshot] = None
     booking: Optional[BookingSnapshot] = None
     rent: Optional[RentTerms] = None
     charges: Optional[ChargesSnapshot] = None
     tenant_details: Optional[TenantDetails] = None


class AgreementCreate(AgreementSnapshots):
     """Request body for POST /agreements/create."""
     offer_id: int = Field(..., gt=0, description="Offer the agreement formalizes")
     payment_transaction_id: Optional[int] = Field(
          None, gt=0, description="Booking transaction to copy into the booking section"
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "offer_id": 1,
                    "payment_transaction_id": 1,
                    "property_snapshot": {"property_name": "Lake View 2BHK", "city": "Pune"},
                    "owner_snapshot": {"name": "Asha Rao", "phone": "9800000001"},
                    "tenant_snapshot": {"name": "Vikram Shah", "email": "vikram@example.com"},
                    "rent": {"monthly_rent": 15000, "monthly_payable_day": 10, "planned_stay_months": 11},
                    "charges": {"water_bill": "included", "electricity_per_unit": 8}
               }
          }
     )


class AgreementResponse(AgreementSnapshots):
     """Schema for agreement response."""
     id: int
     offer_id: int
     property_id: int
     tenant_id: int
     owner_id: int
     snapshot_version: int
     status: AgreementStatus
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class AgreementListResponse(BaseModel):
     count: int
     agreements: List[AgreementResponse]
