"""
Verification Cascade - derived bookkeeping after an owner verifies a paid
transaction.

1. The offer must exist and be accepted.
2. The rent due day is the day-of-month of the offer's desired joining date;
   no joining date means no schedule, so nothing happens.
3. Booking payment: flag the offer's booking as verified and insert the
   current month's RentMonthRecord (pending) if it is not there yet.
4. Rent payment: mark the RentMonthRecord for the transaction's month paid.

The owner's verification flag is already flushed when the cascade starts.
The cascade runs inside its own savepoint and never raises: failures are
logged and returned as warnings on the CascadeOutcome, next to the events
that did happen.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models import Offer, PaymentTransaction, RentMonthRecord
from models.enums import PaymentType, RentRecordStatus
from models.payment_transaction import DEFAULT_CURRENCY
from utils.time_utils import due_date_in_month, format_rent_month, parse_date
from .validators import is_positive_amount

logger = logging.getLogger(__name__)

# Event names
BOOKING_VERIFIED = "booking_verified"
RENT_RECORD_CREATED = "rent_record_created"
RENT_RECORD_EXISTS = "rent_record_exists"
RENT_RECORD_PAID = "rent_record_paid"

# Warning names
BOOKING_FLAG_NOT_SAVED = "booking_flag_not_saved"
OFFER_RENT_INVALID = "offer_rent_invalid"
RENT_MONTH_MISSING = "rent_month_missing"
RENT_RECORD_MISSING = "rent_record_missing"
CASCADE_FAILED = "cascade_failed"

# Skip reasons
SKIP_NOT_PAID = "transaction_not_paid"
SKIP_OFFER_MISSING = "offer_missing"
SKIP_OFFER_NOT_ACCEPTED = "offer_not_accepted"
SKIP_NO_DUE_DAY = "no_due_day"

UPSERT_DIALECTS = {
     "sqlite": sqlite.insert,
     "postgresql": postgresql.insert,
}


@dataclass
class CascadeOutcome:
     """What the cascade did for one verification."""
     ran: bool = False
     skipped_reason: Optional[str] = None
     events: List[str] = field(default_factory=list)
     warnings: List[str] = field(default_factory=list)

     def skip(self, reason: str) -> "CascadeOutcome":
          self.skipped_reason = reason
          return self


@dataclass
class VerificationResult:
     """Primary result (the verified transaction) plus the cascade outcome."""
     transaction: PaymentTransaction
     cascade: CascadeOutcome


def resolve_due_day(offer: Offer) -> Optional[int]:
     """Day-of-month rent falls due, from the desired joining date. None if absent or unparseable."""
     joining = parse_date(offer.desired_joining_date)
     return joining.day if joining else None


def insert_rent_record_if_absent(db: Session, values: dict) -> bool:
     """
     Insert a RentMonthRecord unless one already exists for (offer_id, rent_month).

     Existing records are left untouched, so a month already advanced to
     paid is never reset. Returns True when a row was inserted.
     """
     dialect = db.get_bind().dialect.name
     insert = UPSERT_DIALECTS.get(dialect)
     if insert is not None:
          stmt = (
               insert(RentMonthRecord.__table__)
               .values(**values)
               .on_conflict_do_nothing(index_elements=["offer_id", "rent_month"])
          )
          result = db.execute(stmt)
          return result.rowcount == 1

     existing = (
          db.query(RentMonthRecord.id)
          .filter(
               RentMonthRecord.offer_id == values["offer_id"],
               RentMonthRecord.rent_month == values["rent_month"]
          )
          .first()
     )
     if existing:
          return False
     try:
          with db.begin_nested():
               db.add(RentMonthRecord(**values))
     except IntegrityError:
          # Lost the race to a concurrent verification
          return False
     return True


def _mark_booking_verified(db: Session, offer: Offer, verified_at: datetime, outcome: CascadeOutcome) -> None:
     if offer.booking_verified:
          return
     try:
          with db.begin_nested():
               offer.mark_booking_verified(verified_at)
     except SQLAlchemyError:
          logger.exception("Could not flag booking verified on offer %s", offer.id)
          outcome.warnings.append(BOOKING_FLAG_NOT_SAVED)
     else:
          outcome.events.append(BOOKING_VERIFIED)


def _cascade_booking(
     db: Session,
     offer: Offer,
     due_day: int,
     verified_at: datetime,
     outcome: CascadeOutcome
) -> None:
     _mark_booking_verified(db, offer, verified_at, outcome)

     if not is_positive_amount(offer.offer_rent):
          logger.warning("Offer %s has no valid rent; no rent record scheduled", offer.id)
          outcome.warnings.append(OFFER_RENT_INVALID)
          return

     rent_month = format_rent_month(verified_at)
     created = insert_rent_record_if_absent(db, {
          "offer_id": offer.id,
          "property_id": offer.property_id,
          "tenant_id": offer.tenant_id,
          "owner_id": offer.owner_id,
          "rent_month": rent_month,
          "due_date": due_date_in_month(verified_at.year, verified_at.month, due_day),
          "amount": offer.offer_rent,
          "currency": DEFAULT_CURRENCY,
          "status": RentRecordStatus.PENDING,
     })
     if created:
          logger.info("Rent record %s scheduled for offer %s", rent_month, offer.id)
     outcome.events.append(RENT_RECORD_CREATED if created else RENT_RECORD_EXISTS)


def _cascade_rent(
     db: Session,
     offer: Offer,
     tx: PaymentTransaction,
     verified_at: datetime,
     outcome: CascadeOutcome
) -> None:
     rent_month = (tx.rent_month or "").strip()
     if not rent_month:
          outcome.warnings.append(RENT_MONTH_MISSING)
          return

     updated = (
          db.query(RentMonthRecord)
          .filter(
               RentMonthRecord.offer_id == offer.id,
               RentMonthRecord.rent_month == rent_month
          )
          .update(
               {
                    RentMonthRecord.status: RentRecordStatus.PAID,
                    RentMonthRecord.paid_at: verified_at,
                    RentMonthRecord.payment_transaction_id: tx.id,
               },
               synchronize_session="fetch",
          )
     )
     if updated:
          logger.info("Rent record %s paid for offer %s by %s", rent_month, offer.id, tx.transaction_id)
          outcome.events.append(RENT_RECORD_PAID)
     else:
          # A rent payment never creates its own month; the schedule comes from booking verification
          logger.warning(
               "No rent record %s for offer %s; transaction %s verified without schedule update",
               rent_month, offer.id, tx.transaction_id
          )
          outcome.warnings.append(RENT_RECORD_MISSING)


def _apply_cascade(db: Session, tx: PaymentTransaction, verified_at: datetime, outcome: CascadeOutcome) -> None:
     offer = db.query(Offer).filter(Offer.id == tx.offer_id).first()
     if offer is None:
          outcome.skip(SKIP_OFFER_MISSING)
          return
     if not offer.is_accepted:
          outcome.skip(SKIP_OFFER_NOT_ACCEPTED)
          return

     due_day = resolve_due_day(offer)
     if due_day is None:
          outcome.skip(SKIP_NO_DUE_DAY)
          return

     outcome.ran = True
     if tx.payment_type == PaymentType.BOOKING:
          _cascade_booking(db, offer, due_day, verified_at, outcome)
     elif tx.payment_type == PaymentType.RENT:
          _cascade_rent(db, offer, tx, verified_at, outcome)


def run_verification_cascade(db: Session, tx: PaymentTransaction, verified_at: datetime) -> CascadeOutcome:
     """
     Apply the side effects of verifying `tx`. Never raises.

     Args:
          db: SQLAlchemy database session (owner verification already flushed)
          tx: The transaction just verified
          verified_at: Verification time; also picks the current rent month

     Returns:
          CascadeOutcome describing events, warnings or why it was skipped
     """
     outcome = CascadeOutcome()
     if not tx.is_paid:
          return outcome.skip(SKIP_NOT_PAID)

     try:
          with db.begin_nested():
               _apply_cascade(db, tx, verified_at, outcome)
     except Exception:
          logger.exception("Verification cascade failed for transaction %s", tx.transaction_id)
          outcome.ran = False
          outcome.events.clear()
          outcome.warnings.append(CASCADE_FAILED)

     return outcome
