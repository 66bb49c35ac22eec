# routers/payments.py
"""
Payment transaction API.

POST /payments/create and /payments/rent/create are find-or-create: a
repeated request answers 200 with the existing transaction and
reused=true, a new transaction answers 201.
PATCH /payments/{transaction_id}/verify also reports what the verification
cascade did to the offer and the rent schedule.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user_id
from services import transaction_service
from schemas.transaction import (
     BookingTransactionCreate,
     RentTransactionCreate,
     TransactionResponse,
     TransactionResult,
     TransactionUpdateResponse,
     CascadeOutcomeResponse,
     VerificationResponse,
     TransactionListResponse,
)

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _creation_result(db: Session, response: Response, tx, reused: bool) -> TransactionResult:
     db.commit()
     if not reused:
          db.refresh(tx)
     response.status_code = status.HTTP_200_OK if reused else status.HTTP_201_CREATED
     return TransactionResult(transaction=TransactionResponse.model_validate(tx), reused=reused)


def _transaction_list(transactions) -> TransactionListResponse:
     return TransactionListResponse(
          count=len(transactions),
          payments=[TransactionResponse.model_validate(tx) for tx in transactions]
     )


@router.post(
     "/create",
     response_model=TransactionResult,
     status_code=status.HTTP_201_CREATED,
     summary="Create the booking payment for an offer"
)
def create_booking_payment(
     body: BookingTransactionCreate,
     response: Response,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Find or create the booking transaction. The caller must be the offer's
     tenant. The amount is the requested advance, else the offered booking
     amount.
     """
     tx, reused = transaction_service.create_booking_transaction(db, user_id, body.offer_id)
     return _creation_result(db, response, tx, reused)


@router.post(
     "/rent/create",
     response_model=TransactionResult,
     status_code=status.HTTP_201_CREATED,
     summary="Create the rent payment for one month"
)
def create_rent_payment(
     body: RentTransactionCreate,
     response: Response,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Find or create the rent transaction for **rent_month** (YYYY-MM) on an
     accepted offer.
     """
     tx, reused = transaction_service.create_rent_transaction(db, user_id, body.offer_id, body.rent_month)
     return _creation_result(db, response, tx, reused)


@router.get(
     "/my",
     response_model=TransactionListResponse,
     summary="My payments as a tenant"
)
def list_my_payments(
     payment_type: Optional[str] = Query(None, description="booking or rent"),
     status: Optional[str] = Query(None, description="created, paid, failed or refunded"),
     owner_verified: Optional[bool] = Query(None, description="Filter by owner verification"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     transactions = transaction_service.list_outgoing(
          db, user_id, payment_type=payment_type, status=status, owner_verified=owner_verified
     )
     return _transaction_list(transactions)


@router.get(
     "/incoming",
     response_model=TransactionListResponse,
     summary="Payments owed to me as an owner"
)
def list_incoming_payments(
     payment_type: Optional[str] = Query(None, description="booking or rent"),
     status: Optional[str] = Query(None, description="created, paid, failed or refunded"),
     owner_verified: Optional[bool] = Query(None, description="Filter by owner verification"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     transactions = transaction_service.list_incoming(
          db, user_id, payment_type=payment_type, status=status, owner_verified=owner_verified
     )
     return _transaction_list(transactions)


@router.patch(
     "/{transaction_id}/mark-paid",
     response_model=TransactionUpdateResponse,
     summary="Tenant marks a payment as made"
)
def mark_payment_paid(
     transaction_id: str,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     tx = transaction_service.mark_paid(db, transaction_id, user_id)
     db.commit()
     return TransactionUpdateResponse(transaction=TransactionResponse.model_validate(tx))


@router.patch(
     "/{transaction_id}/verify",
     response_model=VerificationResponse,
     summary="Owner verifies a payment was received"
)
def verify_payment(
     transaction_id: str,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Mark the transaction owner-verified, then run the cascade: a verified
     booking schedules the current month's rent, a verified rent payment
     settles its month. Cascade problems come back as warnings and never
     fail the request.
     """
     result = transaction_service.verify(db, transaction_id, user_id)
     db.commit()
     return VerificationResponse(
          transaction=TransactionResponse.model_validate(result.transaction),
          cascade=CascadeOutcomeResponse.model_validate(result.cascade)
     )
