"""Lifecycle enumerations for the rental workflow tables."""
import enum

from sqlalchemy import Enum


class OfferStatus(str, enum.Enum):
     """Owner's decision on a tenant offer."""
     PENDING = "pending"
     ACCEPTED = "accepted"
     REJECTED = "rejected"


class PaymentType(str, enum.Enum):
     BOOKING = "booking"
     RENT = "rent"


class TransactionStatus(str, enum.Enum):
     """Payment transaction status. Only created -> paid is driven by this service."""
     CREATED = "created"
     PAID = "paid"
     FAILED = "failed"
     REFUNDED = "refunded"


class RentRecordStatus(str, enum.Enum):
     PENDING = "pending"
     PAID = "paid"


class AgreementStatus(str, enum.Enum):
     DRAFT = "draft"
     SENT = "sent"
     ACCEPTED = "accepted"
     REJECTED = "rejected"


def enum_column_type(enum_cls, name: str) -> Enum:
     """Column type storing enum values ("pending") rather than member names."""
     return Enum(
          enum_cls,
          name=name,
          create_constraint=True,
          values_callable=lambda members: [member.value for member in members],
     )
