# routers/offers.py
"""
Offer API routes.

Tenants submit offers on properties; the property owner accepts or rejects
them, may ask for a booking advance and later confirms the move-in.
Ownership checks live in OfferService; these handlers only resolve the
caller and commit.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from services.offer_service import OfferService
from schemas.offer import (
     OfferCreate,
     OfferStatusUpdate,
     AdvanceRequest,
     OfferResponse,
     OfferListResponse,
)

router = APIRouter(prefix="/api/offers", tags=["offers"])


def _offer_list(offers) -> OfferListResponse:
     return OfferListResponse(
          count=len(offers),
          offers=[OfferResponse.model_validate(offer) for offer in offers]
     )


@router.post(
     "",
     response_model=OfferResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Submit an offer on a property"
)
def create_offer(
     body: OfferCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Create a pending offer. The caller is the tenant; the owner is taken
     from the property.

     - **property_id**: Property the offer is for
     - **offer.offer_rent**: Monthly rent offered (must be positive)
     - **offer.joining_date_estimate**: Free-text joining estimate
     """
     offer = OfferService.create_offer(
          db,
          tenant_id=user_id,
          property_id=body.property_id,
          terms=body.offer.model_dump()
     )
     db.commit()
     db.refresh(offer)
     return OfferResponse.model_validate(offer)


@router.get(
     "/received",
     response_model=OfferListResponse,
     summary="Offers received on my properties"
)
def list_received_offers(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _offer_list(OfferService.list_received(db, user_id))


@router.get(
     "/sent",
     response_model=OfferListResponse,
     summary="Offers I have made"
)
def list_sent_offers(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _offer_list(OfferService.list_sent(db, user_id))


@router.get(
     "/history/{property_id}/{tenant_id}",
     response_model=OfferListResponse,
     summary="One tenant's offers on one of my properties"
)
def get_offer_history(
     property_id: int,
     tenant_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _offer_list(OfferService.offer_history(db, user_id, property_id, tenant_id))


@router.patch(
     "/{offer_id}/status",
     response_model=OfferResponse,
     summary="Accept or reject an offer"
)
def update_offer_status(
     offer_id: int,
     body: OfferStatusUpdate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Record the owner's decision. Only **accepted** and **rejected** are valid.
     """
     offer = OfferService.accept_or_reject(db, offer_id, user_id, body.status)
     db.commit()
     return OfferResponse.model_validate(offer)


@router.patch(
     "/{offer_id}/request-advance",
     response_model=OfferResponse,
     summary="Ask the tenant for a booking advance"
)
def request_advance(
     offer_id: int,
     body: AdvanceRequest,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     The requested amount becomes the booking payment amount. The desired
     joining date fixes the day of the month rent falls due.
     """
     offer = OfferService.request_advance(
          db,
          offer_id,
          user_id,
          requested_advance_amount=body.requested_advance_amount,
          validity_days=body.requested_advance_validity_days,
          proposed_meeting_time=body.proposed_meeting_time,
          desired_joining_date=body.desired_joining_date
     )
     db.commit()
     return OfferResponse.model_validate(offer)


@router.patch(
     "/{offer_id}/confirm-move-in",
     response_model=OfferResponse,
     summary="Confirm the tenant moved in"
)
def confirm_move_in(
     offer_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     offer = OfferService.confirm_move_in(db, offer_id, user_id)
     db.commit()
     return OfferResponse.model_validate(offer)
