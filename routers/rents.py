# routers/rents.py
"""
Rent schedule API. Records are created and settled by payment verification;
these routes only read them.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from services.rent_service import RentService
from schemas.rent import RentMonthRecordResponse, RentListResponse

router = APIRouter(prefix="/api/rents", tags=["rents"])


def _rent_list(records) -> RentListResponse:
     return RentListResponse(
          count=len(records),
          rents=[RentMonthRecordResponse.model_validate(record) for record in records]
     )


@router.get(
     "/incoming",
     response_model=RentListResponse,
     summary="Rent owed to me as an owner"
)
def list_incoming_rents(
     status: Optional[str] = Query(None, description="pending or paid"),
     rent_month: Optional[str] = Query(None, description="YYYY-MM"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _rent_list(RentService.list_incoming(db, user_id, status=status, rent_month=rent_month))


@router.get(
     "/my",
     response_model=RentListResponse,
     summary="My rent schedule as a tenant"
)
def list_my_rents(
     status: Optional[str] = Query(None, description="pending or paid"),
     rent_month: Optional[str] = Query(None, description="YYYY-MM"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _rent_list(RentService.list_mine(db, user_id, status=status, rent_month=rent_month))


@router.get(
     "/{offer_id}/{rent_month}",
     response_model=RentMonthRecordResponse,
     summary="One month of an offer's rent schedule"
)
def get_rent_for_month(
     offer_id: int,
     rent_month: str,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Rent record for **rent_month** (YYYY-MM). Visible to the offer's owner
     and tenant.
     """
     return RentMonthRecordResponse.model_validate(RentService.get_for_month(db, offer_id, rent_month, user_id))
