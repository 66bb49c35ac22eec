"""
Pydantic schemas for payment transaction API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.enums import PaymentType, TransactionStatus


class BookingTransactionCreate(BaseModel):
     """Request body for POST /payments/create."""
     offer_id: int = Field(..., gt=0, description="Offer to pay the booking for")

     model_config = ConfigDict(json_schema_extra={"example": {"offer_id": 1}})


class RentTransactionCreate(BaseModel):
     """Request body for POST /payments/rent/create."""
     offer_id: int = Field(..., gt=0, description="Accepted offer the rent is for")
     rent_month: str = Field(..., max_length=20, description="Month being paid, YYYY-MM")

     model_config = ConfigDict(json_schema_extra={"example": {"offer_id": 1, "rent_month": "2026-03"}})


class TransactionResponse(BaseModel):
     """Schema for payment transaction response."""
     id: int
     transaction_id: str
     offer_id: int
     property_id: int
     tenant_id: int
     owner_id: int
     payment_type: PaymentType
     rent_month: Optional[str] = None
     amount: Decimal
     currency: str
     status: TransactionStatus
     paid_at: Optional[datetime] = None
     owner_verified: bool
     owner_verified_at: Optional[datetime] = None
     created_at: datetime

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "transaction_id": "TXN_M5X2K1AB_Q7Z0P3LC",
                    "offer_id": 1,
                    "property_id": 1,
                    "tenant_id": 2,
                    "owner_id": 1,
                    "payment_type": "booking",
                    "rent_month": None,
                    "amount": 5000.00,
                    "currency": "INR",
                    "status": "created",
                    "paid_at": None,
                    "owner_verified": False,
                    "owner_verified_at": None,
                    "created_at": "2026-03-01T10:30:00"
               }
          }
     )


class TransactionResult(BaseModel):
     """Response for find-or-create endpoints."""
     success: bool = True
     transaction: TransactionResponse
     reused: bool = Field(False, description="True when an existing transaction was returned")


class TransactionUpdateResponse(BaseModel):
     """Response for state changes on an existing transaction."""
     success: bool = True
     transaction: TransactionResponse


class CascadeOutcomeResponse(BaseModel):
     """Side effects of a verification, reported next to the verified transaction."""
     ran: bool
     skipped_reason: Optional[str] = None
     events: List[str] = []
     warnings: List[str] = []

     model_config = ConfigDict(from_attributes=True)


class VerificationResponse(BaseModel):
     """Response for PATCH /payments/{transaction_id}/verify."""
     success: bool = True
     transaction: TransactionResponse
     cascade: CascadeOutcomeResponse


class TransactionListResponse(BaseModel):
     """Schema for transaction list response."""
     count: int
     payments: List[TransactionResponse]
