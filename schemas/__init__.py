from .offer import (
     OfferTerms,
     OfferCreate,
     OfferStatusUpdate,
     AdvanceRequest,
     OfferResponse,
     OfferListResponse,
)
from .transaction import (
     BookingTransactionCreate,
     RentTransactionCreate,
     TransactionResponse,
     TransactionResult,
     TransactionUpdateResponse,
     CascadeOutcomeResponse,
     VerificationResponse,
     TransactionListResponse,
)
from .rent import RentMonthRecordResponse, RentListResponse
from .agreement import (
     AgreementSnapshots,
     AgreementCreate,
     AgreementResponse,
     AgreementListResponse,
)

__all__ = [
     "OfferTerms",
     "OfferCreate",
     "OfferStatusUpdate",
     "AdvanceRequest",
     "OfferResponse",
     "OfferListResponse",
     "BookingTransactionCreate",
     "RentTransactionCreate",
     "TransactionResponse",
     "TransactionResult",
     "TransactionUpdateResponse",
     "CascadeOutcomeResponse",
     "VerificationResponse",
     "TransactionListResponse",
     "RentMonthRecordResponse",
     "RentListResponse",
     "AgreementSnapshots",
     "AgreementCreate",
     "AgreementResponse",
     "AgreementListResponse",
]
