from .base import Base
from .enums import OfferStatus, PaymentType, TransactionStatus, RentRecordStatus, AgreementStatus
from .user import User
from .property import Property
from .offer import Offer
from .payment_transaction import PaymentTransaction, DEFAULT_CURRENCY
from .rent_month_record import RentMonthRecord
from .agreement import Agreement

__all__ = [
     "Base",
     "OfferStatus",
     "PaymentType",
     "TransactionStatus",
     "RentRecordStatus",
     "AgreementStatus",
     "User",
     "Property",
     "Offer",
     "PaymentTransaction",
     "DEFAULT_CURRENCY",
     "RentMonthRecord",
     "Agreement",
]
