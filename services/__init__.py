from .errors import (
     WorkflowError,
     ValidationError,
     NotFoundError,
     ForbiddenError,
     ConflictError,
     InternalError,
)
from .offer_service import OfferService
from .rent_service import RentService
from .agreement_service import AgreementService
from .identifiers import TransactionIdGenerator
from .verification_service import CascadeOutcome, VerificationResult, run_verification_cascade
from . import transaction_service

__all__ = [
     "WorkflowError",
     "ValidationError",
     "NotFoundError",
     "ForbiddenError",
     "ConflictError",
     "InternalError",
     "OfferService",
     "RentService",
     "AgreementService",
     "TransactionIdGenerator",
     "CascadeOutcome",
     "VerificationResult",
     "run_verification_cascade",
     "transaction_service",
]
