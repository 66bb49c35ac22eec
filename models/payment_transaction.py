"""
PaymentTransaction model - a single booking or rent payment for an offer.

Records are never deleted. The natural key (offer_id, payment_type,
period_key) is unique so concurrent find-or-create calls cannot produce two
transactions for the same booking or rent month.
"""
import os

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import PaymentType, TransactionStatus, enum_column_type

BOOKING_PERIOD_KEY = "booking"
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "INR")


class PaymentTransaction(Base):
     """
     Payment request/record moved through created -> paid by the tenant,
     then verified by the owner.
     """
     __table_args__ = (
          UniqueConstraint(
               "offer_id", "payment_type", "period_key",
               name="uq_payment_transactions_offer_type_period"
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     transaction_id = Column(String(64), nullable=False, unique=True, index=True)  # TXN_<ts>_<rnd>

     # References
     offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     # Classification
     payment_type = Column(
          enum_column_type(PaymentType, "payment_type"),
          default=PaymentType.BOOKING,
          nullable=False,
          index=True
     )
     rent_month = Column(String(7), nullable=True)  # YYYY-MM, rent only
     period_key = Column(String(16), nullable=False)  # "booking" or rent_month

     # Financials
     amount = Column(Numeric(12, 2), nullable=False)
     currency = Column(String(8), default=DEFAULT_CURRENCY, nullable=False)

     # State
     status = Column(
          enum_column_type(TransactionStatus, "transaction_status"),
          default=TransactionStatus.CREATED,
          nullable=False,
          index=True
     )
     paid_at = Column(DateTime, nullable=True)
     owner_verified = Column(Boolean, default=False, nullable=False)
     owner_verified_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     offer = relationship("Offer", back_populates="transactions")

     def __repr__(self):
          return (
               f"<PaymentTransaction(id={self.id}, transaction_id='{self.transaction_id}', "
               f"type='{self.payment_type.value}', status='{self.status.value}')>"
          )

     @staticmethod
     def period_key_for(payment_type: PaymentType, rent_month=None) -> str:
          if payment_type == PaymentType.RENT:
               return rent_month
          return BOOKING_PERIOD_KEY

     @property
     def is_paid(self) -> bool:
          return self.status == TransactionStatus.PAID

     def mark_as_paid(self, paid_at) -> None:
          """Mark the transaction as paid. Already-paid transactions keep their original paid_at."""
          if self.is_paid:
               return
          self.status = TransactionStatus.PAID
          self.paid_at = paid_at

     def mark_owner_verified(self, verified_at) -> None:
          self.owner_verified = True
          self.owner_verified_at = verified_at
