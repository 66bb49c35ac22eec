"""
Agreement model - an immutable rental contract snapshot sent by the owner.

Property, party, booking and rent details are copied in at creation time as
versioned JSON snapshots; later changes to the offer or the transactions do
not touch them.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON, Index, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import AgreementStatus, enum_column_type


class Agreement(Base):
     __table_args__ = (
          Index("ix_agreements_offer_created", "offer_id", "created_at"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)

     offer_id = Column(Integer, ForeignKey("offers.id"), nullable=False, index=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     # Snapshots
     snapshot_version = Column(Integer, default=1, nullable=False)
     property_snapshot = Column(JSON, nullable=True)
     owner_snapshot = Column(JSON, nullable=True)
     tenant_snapshot = Column(JSON, nullable=True)
     booking = Column(JSON, nullable=True)
     rent = Column(JSON, nullable=True)
     charges = Column(JSON, nullable=True)
     tenant_details = Column(JSON, nullable=True)

     status = Column(
          enum_column_type(AgreementStatus, "agreement_status"),
          default=AgreementStatus.SENT,
          nullable=False,
          index=True
     )

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     offer = relationship("Offer")

     def __repr__(self):
          return f"<Agreement(id={self.id}, offer_id={self.offer_id}, status='{self.status.value}')>"
