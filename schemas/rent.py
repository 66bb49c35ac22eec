"""
Pydantic schemas for rent schedule responses.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from models.enums import RentRecordStatus


class RentMonthRecordResponse(BaseModel):
     id: int
     offer_id: int
     property_id: int
     tenant_id: int
     owner_id: int
     rent_month: str
     due_date: date
     amount: Decimal
     currency: str
     status: RentRecordStatus
     paid_at: Optional[datetime] = None
     payment_transaction_id: Optional[int] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class RentListResponse(BaseModel):
     count: int
     rents: List[RentMonthRecordResponse]
