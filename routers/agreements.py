# routers/agreements.py
"""
Agreement API routes. The owner sends an agreement built from snapshots;
the tenant sees it under /incoming.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from services.agreement_service import AgreementService
from schemas.agreement import (
     AgreementCreate,
     AgreementResponse,
     AgreementListResponse,
)

router = APIRouter(prefix="/api/agreements", tags=["agreements"])


def _agreement_list(agreements) -> AgreementListResponse:
     return AgreementListResponse(
          count=len(agreements),
          agreements=[AgreementResponse.model_validate(agreement) for agreement in agreements]
     )


@router.post(
     "/create",
     response_model=AgreementResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Send an agreement for an offer"
)
def create_agreement(
     body: AgreementCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Snapshot sections are stored as sent and never change afterwards.
     When **payment_transaction_id** is given and no booking section is
     supplied, the booking section is copied from that transaction.
     """
     agreement = AgreementService.create_agreement(
          db,
          owner_id=user_id,
          offer_id=body.offer_id,
          snapshots=body,
          payment_transaction_id=body.payment_transaction_id
     )
     db.commit()
     db.refresh(agreement)
     return AgreementResponse.model_validate(agreement)


@router.get(
     "/incoming",
     response_model=AgreementListResponse,
     summary="Agreements sent to me as a tenant"
)
def list_incoming_agreements(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _agreement_list(AgreementService.list_incoming(db, user_id))


@router.get(
     "/sent",
     response_model=AgreementListResponse,
     summary="Agreements I have sent"
)
def list_sent_agreements(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _agreement_list(AgreementService.list_sent(db, user_id))
