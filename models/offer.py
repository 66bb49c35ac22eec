from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import OfferStatus, enum_column_type


class Offer(Base):
     """
     Offer model - a tenant's proposed rental terms for a property.

     The offer is the root of the rental workflow: payment transactions,
     rent month records and agreements all reference it. Parties
     (property, owner, tenant) are fixed at creation.
     """
     __table_args__ = (
          Index("ix_offers_owner_property_created", "owner_id", "property_id", "created_at"),
          Index("ix_offers_tenant_property_created", "tenant_id", "property_id", "created_at"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Parties
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     # Tenant's terms
     offer_rent = Column(Numeric(12, 2), nullable=False)
     joining_date_estimate = Column(String(100), nullable=False)
     offer_advance = Column(Numeric(12, 2), nullable=True)
     offer_booking_amount = Column(Numeric(12, 2), nullable=True)
     needs_bike_parking = Column(Boolean, default=False, nullable=False)
     needs_car_parking = Column(Boolean, default=False, nullable=False)
     tenant_type = Column(String(100), nullable=True)
     accepts_rules = Column(Boolean, default=False, nullable=False)
     match_percent = Column(Integer, default=0, nullable=False)

     # Owner's advance request
     action_type = Column(String(50), nullable=True)  # advance_requested
     requested_advance_amount = Column(Numeric(12, 2), nullable=True)
     requested_advance_validity_days = Column(Integer, nullable=True)
     proposed_meeting_time = Column(DateTime, nullable=True)
     desired_joining_date = Column(Date, nullable=True)

     # Lifecycle
     status = Column(
          enum_column_type(OfferStatus, "offer_status"),
          default=OfferStatus.PENDING,
          nullable=False,
          index=True
     )
     booking_verified = Column(Boolean, default=False, nullable=False)
     booking_verified_at = Column(DateTime, nullable=True)
     tenant_move_in_confirmed = Column(Boolean, default=False, nullable=False)
     tenant_move_in_confirmed_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     listing = relationship("Property")
     owner = relationship("User", foreign_keys=[owner_id])
     tenant = relationship("User", foreign_keys=[tenant_id])
     transactions = relationship("PaymentTransaction", back_populates="offer")
     rent_records = relationship("RentMonthRecord", back_populates="offer")

     def __repr__(self):
          return f"<Offer(id={self.id}, property_id={self.property_id}, status='{self.status.value}')>"

     @property
     def is_accepted(self) -> bool:
          return self.status == OfferStatus.ACCEPTED

     @property
     def booking_amount(self) -> Optional[Decimal]:
          """Amount the tenant pays to book: the owner's requested advance, else the tenant's offered booking amount."""
          if self.requested_advance_amount is not None:
               return self.requested_advance_amount
          return self.offer_booking_amount

     def mark_booking_verified(self, verified_at) -> None:
          """Record that the owner verified the booking payment. Never reversed."""
          self.booking_verified = True
          self.booking_verified_at = verified_at
