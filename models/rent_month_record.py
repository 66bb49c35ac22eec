"""
RentMonthRecord model - the scheduled rent obligation for one calendar month
of an accepted offer. Derived by the verification cascade, one row per
(offer_id, rent_month).
"""
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import RentRecordStatus, enum_column_type
from .payment_transaction import DEFAULT_CURRENCY


class RentMonthRecord(Base):
     __table_args__ = (
          UniqueConstraint("offer_id", "rent_month", name="uq_rent_month_records_offer_month"),
          Index("ix_rent_month_records_owner_month_status", "owner_id", "rent_month", "status"),
          Index("ix_rent_month_records_tenant_month_status", "tenant_id", "rent_month", "status"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)

     offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     rent_month = Column(String(7), nullable=False)  # YYYY-MM
     due_date = Column(Date, nullable=False)
     amount = Column(Numeric(12, 2), nullable=False)
     currency = Column(String(8), default=DEFAULT_CURRENCY, nullable=False)

     status = Column(
          enum_column_type(RentRecordStatus, "rent_record_status"),
          default=RentRecordStatus.PENDING,
          nullable=False
     )
     paid_at = Column(DateTime, nullable=True)
     payment_transaction_id = Column(Integer, ForeignKey("payment_transactions.id"), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     offer = relationship("Offer", back_populates="rent_records")
     payment_transaction = relationship("PaymentTransaction")

     def __repr__(self):
          return f"<RentMonthRecord(id={self.id}, offer_id={self.offer_id}, month='{self.rent_month}', status='{self.status.value}')>"
