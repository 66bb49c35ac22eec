"""
Offer Service - tenant offers and the owner's decisions on them.

Offers never expire: they stay pending until the owner accepts or rejects.
The owner can also ask for a booking advance and, once the booking payment
is verified, confirm that the tenant moved in.
"""
import logging
import math
from datetime import datetime
from typing import Any, List, Mapping, Optional

from sqlalchemy.orm import Session

from models import Offer, Property
from models.enums import OfferStatus
from utils.time_utils import parse_date, utcnow
from .errors import ForbiddenError, NotFoundError, ValidationError
from .validators import optional_amount, require_positive_amount

logger = logging.getLogger(__name__)

OWNER_DECISIONS = (OfferStatus.ACCEPTED, OfferStatus.REJECTED)
ACTION_ADVANCE_REQUESTED = "advance_requested"


def _parse_match_percent(value) -> int:
     if value is None or value == "" or isinstance(value, bool):
          return 0
     try:
          percent = float(value)
     except (TypeError, ValueError):
          return 0
     if not math.isfinite(percent):
          return 0
     if percent < 0 or percent > 100:
          raise ValidationError("matchPercent must be between 0 and 100")
     return int(round(percent))


def _optional_text(value) -> Optional[str]:
     if value is None:
          return None
     text = str(value).strip()
     return text or None


class OfferService:
     """Service class for offer-related business logic."""

     @staticmethod
     def get_offer(db: Session, offer_id: int) -> Offer:
          """Load an offer or raise NotFoundError."""
          offer = db.query(Offer).filter(Offer.id == offer_id).first()
          if not offer:
               raise NotFoundError("Offer not found")
          return offer

     @staticmethod
     def get_owned_offer(db: Session, offer_id: int, owner_id: int) -> Offer:
          """Load an offer the caller owns; NotFoundError / ForbiddenError otherwise."""
          offer = OfferService.get_offer(db, offer_id)
          if offer.owner_id != owner_id:
               raise ForbiddenError("Forbidden")
          return offer

     @staticmethod
     def create_offer(
          db: Session,
          tenant_id: int,
          property_id: int,
          terms: Mapping[str, Any]
     ) -> Offer:
          """
          Create a pending offer from a tenant for a property.

          Args:
               db: SQLAlchemy database session
               tenant_id: Calling tenant (already authenticated)
               property_id: Property the offer is for
               terms: Offer terms; offer_rent and joining_date_estimate are required

          Returns:
               Created Offer object (status=pending)

          Raises:
               ValidationError: If offer_rent is not a positive number, the
                    joining date estimate is empty, or an optional term is malformed
               NotFoundError: If the property doesn't exist
          """
          offer_rent = require_positive_amount(terms.get("offer_rent"), "offerRent must be a valid number")

          joining_date_estimate = _optional_text(terms.get("joining_date_estimate"))
          if not joining_date_estimate:
               raise ValidationError("joiningDateEstimate is required")

          desired_joining_date = None
          raw_joining_date = terms.get("desired_joining_date")
          if raw_joining_date not in (None, ""):
               desired_joining_date = parse_date(raw_joining_date)
               if desired_joining_date is None:
                    raise ValidationError("desiredJoiningDate must be a valid date")

          property_obj = db.query(Property).filter(Property.id == property_id).first()
          if not property_obj:
               raise NotFoundError("Property not found")

          offer = Offer(
               property_id=property_obj.id,
               owner_id=property_obj.owner_id,
               tenant_id=tenant_id,
               offer_rent=offer_rent,
               joining_date_estimate=joining_date_estimate,
               desired_joining_date=desired_joining_date,
               offer_advance=optional_amount(terms.get("offer_advance"), "offerAdvance"),
               offer_booking_amount=optional_amount(terms.get("offer_booking_amount"), "offerBookingAmount"),
               needs_bike_parking=bool(terms.get("needs_bike_parking")),
               needs_car_parking=bool(terms.get("needs_car_parking")),
               tenant_type=_optional_text(terms.get("tenant_type")),
               accepts_rules=bool(terms.get("accepts_rules")),
               match_percent=_parse_match_percent(terms.get("match_percent")),
               status=OfferStatus.PENDING,
          )

          db.add(offer)
          db.flush()  # Flush to get the ID without committing

          logger.info("Offer %s created by tenant %s for property %s", offer.id, tenant_id, property_id)
          return offer

     @staticmethod
     def accept_or_reject(db: Session, offer_id: int, owner_id: int, decision) -> Offer:
          """
          Record the owner's decision on an offer.

          Raises:
               NotFoundError: If the offer doesn't exist
               ForbiddenError: If the caller is not the offer's owner
               ValidationError: If the decision is not accepted/rejected
          """
          offer = OfferService.get_owned_offer(db, offer_id, owner_id)

          value = decision.value if isinstance(decision, OfferStatus) else str(decision or "").strip().lower()
          if value not in [d.value for d in OWNER_DECISIONS]:
               raise ValidationError("Invalid status")

          offer.status = OfferStatus(value)
          db.flush()

          logger.info("Offer %s %s by owner %s", offer.id, value, owner_id)
          return offer

     @staticmethod
     def request_advance(
          db: Session,
          offer_id: int,
          owner_id: int,
          requested_advance_amount,
          validity_days=None,
          proposed_meeting_time: Optional[datetime] = None,
          desired_joining_date=None
     ) -> Offer:
          """
          Owner asks the tenant for a booking advance.

          The requested amount becomes the booking transaction amount, and the
          desired joining date fixes the monthly rent due day.
          """
          offer = OfferService.get_owned_offer(db, offer_id, owner_id)

          amount = require_positive_amount(
               requested_advance_amount, "requestedAdvanceAmount must be a valid number"
          )

          days = None
          if validity_days not in (None, ""):
               try:
                    days = float(validity_days)
               except (TypeError, ValueError):
                    days = float("nan")
               if not math.isfinite(days) or days <= 0:
                    raise ValidationError("requestedAdvanceValidityDays must be a valid number")
               days = int(math.floor(days))

          joining = None
          if desired_joining_date not in (None, ""):
               joining = parse_date(desired_joining_date)
               if joining is None:
                    raise ValidationError("desiredJoiningDate must be a valid date")

          offer.requested_advance_amount = amount
          offer.requested_advance_validity_days = days
          offer.proposed_meeting_time = proposed_meeting_time
          offer.desired_joining_date = joining
          offer.action_type = ACTION_ADVANCE_REQUESTED
          db.flush()

          logger.info("Advance of %s requested on offer %s", amount, offer.id)
          return offer

     @staticmethod
     def confirm_move_in(db: Session, offer_id: int, owner_id: int, now: Optional[datetime] = None) -> Offer:
          """Owner confirms the tenant moved in. Requires an accepted offer with a verified booking."""
          offer = OfferService.get_owned_offer(db, offer_id, owner_id)

          if not offer.is_accepted:
               raise ValidationError("Offer is not accepted")
          if not offer.booking_verified:
               raise ValidationError("Booking payment is not verified yet")

          offer.tenant_move_in_confirmed = True
          offer.tenant_move_in_confirmed_at = now or utcnow()
          db.flush()
          return offer

     @staticmethod
     def list_received(db: Session, owner_id: int) -> List[Offer]:
          """Offers made on the owner's properties, newest first."""
          return (
               db.query(Offer)
               .filter(Offer.owner_id == owner_id)
               .order_by(Offer.created_at.desc(), Offer.id.desc())
               .all()
          )

     @staticmethod
     def list_sent(db: Session, tenant_id: int) -> List[Offer]:
          """Offers the tenant has made, newest first."""
          return (
               db.query(Offer)
               .filter(Offer.tenant_id == tenant_id)
               .order_by(Offer.created_at.desc(), Offer.id.desc())
               .all()
          )

     @staticmethod
     def offer_history(db: Session, owner_id: int, property_id: int, tenant_id: int) -> List[Offer]:
          """All of one tenant's offers on one of the owner's properties, newest first."""
          return (
               db.query(Offer)
               .filter(
                    Offer.owner_id == owner_id,
                    Offer.property_id == property_id,
                    Offer.tenant_id == tenant_id
               )
               .order_by(Offer.created_at.desc(), Offer.id.desc())
               .all()
          )
