"""
Rent Schedule Service - read access to RentMonthRecords.

Records are written only by the verification cascade; owners and tenants
list them here, latest due date first.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from models import Offer, RentMonthRecord
from models.enums import RentRecordStatus
from utils.time_utils import is_rent_month
from .errors import ForbiddenError, NotFoundError, ValidationError


class RentService:
     """Service class for rent schedule queries."""

     @staticmethod
     def _list(
          db: Session,
          party_column,
          party_id: int,
          status=None,
          rent_month: Optional[str] = None
     ) -> List[RentMonthRecord]:
          query = db.query(RentMonthRecord).filter(party_column == party_id)

          if status not in (None, ""):
               try:
                    status = status if isinstance(status, RentRecordStatus) else RentRecordStatus(str(status).strip().lower())
               except ValueError:
                    raise ValidationError("Invalid status")
               query = query.filter(RentMonthRecord.status == status)

          if rent_month not in (None, ""):
               month = str(rent_month).strip()
               if not is_rent_month(month):
                    raise ValidationError("rentMonth must be in YYYY-MM format")
               query = query.filter(RentMonthRecord.rent_month == month)

          return query.order_by(
               RentMonthRecord.due_date.desc(),
               RentMonthRecord.created_at.desc(),
               RentMonthRecord.id.desc()
          ).all()

     @staticmethod
     def list_incoming(db: Session, owner_id: int, status=None, rent_month: Optional[str] = None) -> List[RentMonthRecord]:
          """Rent owed to the owner across all their offers."""
          return RentService._list(db, RentMonthRecord.owner_id, owner_id, status, rent_month)

     @staticmethod
     def list_mine(db: Session, tenant_id: int, status=None, rent_month: Optional[str] = None) -> List[RentMonthRecord]:
          """Rent the tenant owes or has paid."""
          return RentService._list(db, RentMonthRecord.tenant_id, tenant_id, status, rent_month)

     @staticmethod
     def get_for_month(db: Session, offer_id: int, rent_month: str, user_id: int) -> RentMonthRecord:
          """
          One month of an offer's schedule, for either party of the offer.

          Raises:
               ValidationError: If rent_month is not YYYY-MM
               NotFoundError: If the offer or the month's record doesn't exist
               ForbiddenError: If the caller is neither the owner nor the tenant
          """
          month = str(rent_month or "").strip()
          if not is_rent_month(month):
               raise ValidationError("rentMonth must be in YYYY-MM format")

          offer = db.query(Offer).filter(Offer.id == offer_id).first()
          if not offer:
               raise NotFoundError("Offer not found")
          if user_id not in (offer.owner_id, offer.tenant_id):
               raise ForbiddenError("Forbidden")

          record = (
               db.query(RentMonthRecord)
               .filter(RentMonthRecord.offer_id == offer.id, RentMonthRecord.rent_month == month)
               .first()
          )
          if not record:
               raise NotFoundError("Rent record not found")
          return record
