"""
Pydantic schemas for Offer API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.enums import OfferStatus


class OfferTerms(BaseModel):
     """Terms a tenant proposes. Rent and joining estimate are checked by the offer service."""
     offer_rent: Decimal = Field(..., description="Monthly rent offered (must be positive)")
     joining_date_estimate: str = Field(..., max_length=100, description="Free-text joining estimate, e.g. 'early March'")
     desired_joining_date: Optional[date] = Field(None, description="Exact joining date; its day-of-month becomes the rent due day")
     offer_advance: Optional[Decimal] = Field(None, ge=0, description="Advance the tenant is willing to pay")
     offer_booking_amount: Optional[Decimal] = Field(None, ge=0, description="Booking amount the tenant is willing to pay")
     needs_bike_parking: bool = False
     needs_car_parking: bool = False
     tenant_type: Optional[str] = Field(None, max_length=100)
     accepts_rules: bool = False
     match_percent: Optional[float] = Field(None, description="Listing match score, 0-100")


class OfferCreate(BaseModel):
     """Schema for submitting an offer on a property."""
     property_id: int = Field(..., gt=0, description="Property ID (must exist)")
     offer: OfferTerms

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "offer": {
                         "offer_rent": 15000,
                         "joining_date_estimate": "Early March",
                         "desired_joining_date": "2026-03-10",
                         "offer_booking_amount": 5000,
                         "needs_bike_parking": True,
                         "tenant_type": "family",
                         "accepts_rules": True,
                         "match_percent": 82
                    }
               }
          }
     )


class OfferStatusUpdate(BaseModel):
     """Owner decision on an offer."""
     status: str = Field(..., description="accepted or rejected")

     model_config = ConfigDict(json_schema_extra={"example": {"status": "accepted"}})


class AdvanceRequest(BaseModel):
     """Owner asks the tenant for a booking advance."""
     requested_advance_amount: Decimal = Field(..., description="Booking advance requested")
     requested_advance_validity_days: Optional[float] = Field(None, description="Days the request stays open")
     proposed_meeting_time: Optional[datetime] = None
     desired_joining_date: Optional[date] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "requested_advance_amount": 5000,
                    "requested_advance_validity_days": 3,
                    "desired_joining_date": "2026-03-10"
               }
          }
     )


class OfferResponse(BaseModel):
     """Schema for offer response."""
     id: int
     property_id: int
     owner_id: int
     tenant_id: int
     offer_rent: Decimal
     joining_date_estimate: str
     desired_joining_date: Optional[date] = None
     offer_advance: Optional[Decimal] = None
     offer_booking_amount: Optional[Decimal] = None
     needs_bike_parking: bool
     needs_car_parking: bool
     tenant_type: Optional[str] = None
     accepts_rules: bool
     match_percent: int
     action_type: Optional[str] = None
     requested_advance_amount: Optional[Decimal] = None
     requested_advance_validity_days: Optional[int] = None
     proposed_meeting_time: Optional[datetime] = None
     status: OfferStatus
     booking_verified: bool
     booking_verified_at: Optional[datetime] = None
     tenant_move_in_confirmed: bool
     tenant_move_in_confirmed_at: Optional[datetime] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class OfferListResponse(BaseModel):
     """Schema for offer list response."""
     count: int
     offers: List[OfferResponse]
