"""
Agreement Service - compose immutable agreement snapshots from an offer.

The agreement is informational: it copies offer parties and the supplied
snapshots at creation time and is never updated by the payment workflow.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from models import Agreement, PaymentTransaction
from models.enums import AgreementStatus
from schemas.agreement import SNAPSHOT_VERSION, AgreementSnapshots, BookingSnapshot
from .errors import ForbiddenError, NotFoundError
from .offer_service import OfferService

logger = logging.getLogger(__name__)


def _dump(section) -> Optional[dict]:
     if section is None:
          return None
     return section.model_dump(mode="json", exclude_none=True)


def _booking_from_transaction(tx: PaymentTransaction) -> BookingSnapshot:
     return BookingSnapshot(
          amount=tx.amount,
          paid_at=tx.paid_at,
          verified_at=tx.owner_verified_at,
          transaction_id=tx.transaction_id,
     )


class AgreementService:
     """Service class for agreement composition and retrieval."""

     @staticmethod
     def create_agreement(
          db: Session,
          owner_id: int,
          offer_id: int,
          snapshots: AgreementSnapshots,
          payment_transaction_id: Optional[int] = None
     ) -> Agreement:
          """
          Create and send an agreement for an offer.

          Args:
               db: SQLAlchemy database session
               owner_id: Calling owner
               offer_id: Offer being formalized
               snapshots: Snapshot sections supplied by the owner
               payment_transaction_id: Optional booking transaction (internal id);
                    fills the booking section when none was supplied

          Returns:
               Created Agreement (status=sent)

          Raises:
               NotFoundError: If the offer or the payment transaction doesn't exist
               ForbiddenError: If the caller doesn't own the offer or the transaction
          """
          offer = OfferService.get_owned_offer(db, offer_id, owner_id)

          booking = snapshots.booking
          if payment_transaction_id is not None:
               tx = db.query(PaymentTransaction).filter(PaymentTransaction.id == payment_transaction_id).first()
               if not tx:
                    raise NotFoundError("Payment transaction not found")
               if tx.owner_id != owner_id:
                    raise ForbiddenError("Forbidden")
               if booking is None:
                    booking = _booking_from_transaction(tx)

          agreement = Agreement(
               offer_id=offer.id,
               property_id=offer.property_id,
               tenant_id=offer.tenant_id,
               owner_id=offer.owner_id,
               snapshot_version=SNAPSHOT_VERSION,
               property_snapshot=_dump(snapshots.property_snapshot),
               owner_snapshot=_dump(snapshots.owner_snapshot),
               tenant_snapshot=_dump(snapshots.tenant_snapshot),
               booking=_dump(booking),
               rent=_dump(snapshots.rent),
               charges=_dump(snapshots.charges),
               tenant_details=_dump(snapshots.tenant_details),
               status=AgreementStatus.SENT,
          )

          db.add(agreement)
          db.flush()

          logger.info("Agreement %s sent for offer %s", agreement.id, offer.id)
          return agreement

     @staticmethod
     def list_incoming(db: Session, tenant_id: int) -> List[Agreement]:
          """Agreements sent to the tenant, newest first."""
          return (
               db.query(Agreement)
               .filter(Agreement.tenant_id == tenant_id)
               .order_by(Agreement.created_at.desc(), Agreement.id.desc())
               .all()
          )

     @staticmethod
     def list_sent(db: Session, owner_id: int) -> List[Agreement]:
          """Agreements the owner has sent, newest first."""
          return (
               db.query(Agreement)
               .filter(Agreement.owner_id == owner_id)
               .order_by(Agreement.created_at.desc(), Agreement.id.desc())
               .all()
          )
