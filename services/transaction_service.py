"""
Transaction Ledger Service - booking and rent payment transactions.

Each offer has at most one booking transaction and at most one rent
transaction per month. Creation is find-or-create: a repeated request
returns the existing transaction with reused=True instead of a new one.
The (offer_id, payment_type, period_key) unique constraint covers the race
where two identical requests both miss the lookup; the loser re-reads and
returns the winner.

Lifecycle driven here:
     created --mark_paid (tenant)--> paid --verify (owner)--> owner_verified
verify() then runs the verification cascade (see verification_service).
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Offer, PaymentTransaction
from models.enums import PaymentType, TransactionStatus
from models.payment_transaction import DEFAULT_CURRENCY
from utils.time_utils import is_rent_month, utcnow
from .errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from .identifiers import default_transaction_id_generator
from .validators import require_positive_amount
from .verification_service import VerificationResult, run_verification_cascade

logger = logging.getLogger(__name__)

# Uniqueness lookups before giving up and letting the unique index decide
MAX_ID_ATTEMPTS = 3


def _load_offer_for_tenant(db: Session, offer_id: int, tenant_id: int) -> Offer:
     offer = db.query(Offer).filter(Offer.id == offer_id).first()
     if not offer:
          raise NotFoundError("Offer not found")
     if offer.tenant_id != tenant_id:
          raise ForbiddenError("Forbidden")
     return offer


def _latest_for_offer(db: Session, offer_id: int) -> Optional[PaymentTransaction]:
     """Most recent transaction of any type for the offer."""
     return (
          db.query(PaymentTransaction)
          .filter(PaymentTransaction.offer_id == offer_id)
          .order_by(PaymentTransaction.created_at.desc(), PaymentTransaction.id.desc())
          .first()
     )


def _find_by_natural_key(
     db: Session,
     offer_id: int,
     payment_type: PaymentType,
     rent_month: Optional[str] = None
) -> Optional[PaymentTransaction]:
     return (
          db.query(PaymentTransaction)
          .filter(
               PaymentTransaction.offer_id == offer_id,
               PaymentTransaction.payment_type == payment_type,
               PaymentTransaction.period_key == PaymentTransaction.period_key_for(payment_type, rent_month)
          )
          .order_by(PaymentTransaction.created_at.desc(), PaymentTransaction.id.desc())
          .first()
     )


def generate_transaction_id(db: Session, id_generator: Optional[Callable[[], str]] = None) -> str:
     """
     Draw a transaction id not yet present in the ledger.

     Up to MAX_ID_ATTEMPTS candidates are checked. If all of them collide
     the last one is returned anyway and the unique index on transaction_id
     rejects the insert.
     """
     id_generator = id_generator or default_transaction_id_generator
     candidate = None
     for attempt in range(1, MAX_ID_ATTEMPTS + 1):
          candidate = id_generator()
          taken = (
               db.query(PaymentTransaction.id)
               .filter(PaymentTransaction.transaction_id == candidate)
               .first()
          )
          if not taken:
               return candidate
          logger.warning("Transaction id %s already taken (attempt %s/%s)", candidate, attempt, MAX_ID_ATTEMPTS)
     return candidate


def _insert_or_reuse(
     db: Session,
     tx: PaymentTransaction,
     rent_month: Optional[str] = None
) -> Tuple[PaymentTransaction, bool]:
     """Insert `tx` in a savepoint; on a natural-key conflict return the stored transaction instead."""
     try:
          with db.begin_nested():
               db.add(tx)
     except IntegrityError:
          existing = _find_by_natural_key(db, tx.offer_id, tx.payment_type, rent_month)
          if existing is not None:
               logger.info("Concurrent create for offer %s resolved to %s", tx.offer_id, existing.transaction_id)
               return existing, True
          logger.error("Could not store transaction %s for offer %s", tx.transaction_id, tx.offer_id)
          raise ConflictError("Transaction id collision, please retry")
     return tx, False


def _new_transaction(
     db: Session,
     offer: Offer,
     payment_type: PaymentType,
     amount,
     rent_month: Optional[str],
     id_generator: Optional[Callable[[], str]]
) -> PaymentTransaction:
     return PaymentTransaction(
          transaction_id=generate_transaction_id(db, id_generator),
          offer_id=offer.id,
          property_id=offer.property_id,
          tenant_id=offer.tenant_id,
          owner_id=offer.owner_id,
          payment_type=payment_type,
          rent_month=rent_month,
          period_key=PaymentTransaction.period_key_for(payment_type, rent_month),
          amount=amount,
          currency=DEFAULT_CURRENCY,
          status=TransactionStatus.CREATED,
     )


def create_booking_transaction(
     db: Session,
     tenant_id: int,
     offer_id: int,
     id_generator: Optional[Callable[[], str]] = None
) -> Tuple[PaymentTransaction, bool]:
     """
     Find or create the booking transaction for an offer.

     The amount is the advance the owner requested, or the tenant's offered
     booking amount when no advance was requested. If the offer already has
     any transaction, the most recent one is returned unchanged.

     Returns:
          (transaction, reused) - reused is True when nothing was created

     Raises:
          NotFoundError: If the offer doesn't exist
          ForbiddenError: If the caller is not the offer's tenant
          ValidationError: If the offer has no positive booking amount
          ConflictError: If no free transaction id could be stored
     """
     offer = _load_offer_for_tenant(db, offer_id, tenant_id)

     amount = require_positive_amount(
          offer.booking_amount, "Offer does not have a valid requestedAdvanceAmount"
     )

     existing = _latest_for_offer(db, offer.id)
     if existing is not None:
          logger.info("Reusing transaction %s for offer %s", existing.transaction_id, offer.id)
          return existing, True

     tx = _new_transaction(db, offer, PaymentType.BOOKING, amount, None, id_generator)
     tx, reused = _insert_or_reuse(db, tx)
     if not reused:
          logger.info("Booking transaction %s created for offer %s (%s)", tx.transaction_id, offer.id, amount)
     return tx, reused


def create_rent_transaction(
     db: Session,
     tenant_id: int,
     offer_id: int,
     rent_month: str,
     id_generator: Optional[Callable[[], str]] = None
) -> Tuple[PaymentTransaction, bool]:
     """
     Find or create the rent transaction for one month of an accepted offer.

     Args:
          rent_month: Month being paid, YYYY-MM

     Returns:
          (transaction, reused)

     Raises:
          ValidationError: If rent_month is missing or not YYYY-MM, the offer
               is not accepted, or the offer rent is not positive
          NotFoundError: If the offer doesn't exist
          ForbiddenError: If the caller is not the offer's tenant
     """
     month = str(rent_month or "").strip()
     if not month:
          raise ValidationError("rentMonth is required")

     offer = _load_offer_for_tenant(db, offer_id, tenant_id)
     if not offer.is_accepted:
          raise ValidationError("Offer is not accepted")
     if not is_rent_month(month):
          raise ValidationError("rentMonth must be in YYYY-MM format")

     amount = require_positive_amount(offer.offer_rent, "Offer does not have a valid offerRent")

     existing = _find_by_natural_key(db, offer.id, PaymentType.RENT, month)
     if existing is not None:
          logger.info("Reusing rent transaction %s for offer %s month %s", existing.transaction_id, offer.id, month)
          return existing, True

     tx = _new_transaction(db, offer, PaymentType.RENT, amount, month, id_generator)
     tx, reused = _insert_or_reuse(db, tx, month)
     if not reused:
          logger.info("Rent transaction %s created for offer %s month %s", tx.transaction_id, offer.id, month)
     return tx, reused


def get_transaction(db: Session, transaction_id: str) -> PaymentTransaction:
     """Load a transaction by its public transaction id or raise NotFoundError."""
     tx = (
          db.query(PaymentTransaction)
          .filter(PaymentTransaction.transaction_id == transaction_id)
          .first()
     )
     if not tx:
          raise NotFoundError("Transaction not found")
     return tx


def mark_paid(
     db: Session,
     transaction_id: str,
     caller_id: int,
     now: Optional[datetime] = None
) -> PaymentTransaction:
     """
     Tenant confirms the payment was made.

     Idempotent: an already-paid transaction is returned as is, keeping
     its original paid_at.
     """
     tx = get_transaction(db, transaction_id)
     if tx.tenant_id != caller_id:
          raise ForbiddenError("Forbidden")

     if not tx.is_paid:
          tx.mark_as_paid(now or utcnow())
          db.flush()
          logger.info("Transaction %s marked paid by tenant %s", tx.transaction_id, caller_id)
     return tx


def verify(
     db: Session,
     transaction_id: str,
     owner_id: int,
     now: Optional[datetime] = None
) -> VerificationResult:
     """
     Owner confirms the funds were received.

     The verification flag and timestamp are written on every call; the
     cascade then runs best-effort and its outcome is returned alongside
     the transaction. A failing cascade never fails this call.

     Raises:
          NotFoundError: If the transaction doesn't exist
          ForbiddenError: If the caller is not the transaction's owner
     """
     tx = get_transaction(db, transaction_id)
     if tx.owner_id != owner_id:
          raise ForbiddenError("Forbidden")

     verified_at = now or utcnow()
     tx.mark_owner_verified(verified_at)
     db.flush()
     logger.info("Transaction %s verified by owner %s", tx.transaction_id, owner_id)

     cascade = run_verification_cascade(db, tx, verified_at)
     if cascade.warnings:
          logger.warning("Verification of %s finished with warnings: %s", tx.transaction_id, cascade.warnings)
     return VerificationResult(transaction=tx, cascade=cascade)


def _coerce_filter(enum_cls, value, field: str):
     if value is None or value == "":
          return None
     if isinstance(value, enum_cls):
          return value
     try:
          return enum_cls(str(value).strip().lower())
     except ValueError:
          raise ValidationError(f"Invalid {field}")


def _list(
     db: Session,
     party_column,
     party_id: int,
     payment_type=None,
     status=None,
     owner_verified: Optional[bool] = None
) -> List[PaymentTransaction]:
     query = db.query(PaymentTransaction).filter(party_column == party_id)

     payment_type = _coerce_filter(PaymentType, payment_type, "paymentType")
     if payment_type is not None:
          query = query.filter(PaymentTransaction.payment_type == payment_type)

     status = _coerce_filter(TransactionStatus, status, "status")
     if status is not None:
          query = query.filter(PaymentTransaction.status == status)

     if owner_verified is not None:
          query = query.filter(PaymentTransaction.owner_verified == owner_verified)

     return query.order_by(PaymentTransaction.created_at.desc(), PaymentTransaction.id.desc()).all()


def list_incoming(
     db: Session,
     owner_id: int,
     payment_type=None,
     status=None,
     owner_verified: Optional[bool] = None
) -> List[PaymentTransaction]:
     """Transactions payable to the owner, newest first."""
     return _list(db, PaymentTransaction.owner_id, owner_id, payment_type, status, owner_verified)


def list_outgoing(
     db: Session,
     tenant_id: int,
     payment_type=None,
     status=None,
     owner_verified: Optional[bool] = None
) -> List[PaymentTransaction]:
     """Transactions the tenant has requested, newest first."""
     return _list(db, PaymentTransaction.tenant_id, tenant_id, payment_type, status, owner_verified)
