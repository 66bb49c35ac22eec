"""Input coercion shared by the workflow services."""
from decimal import Decimal, InvalidOperation
from typing import Optional

from .errors import ValidationError


def to_decimal(value) -> Optional[Decimal]:
     """Decimal for numbers and numeric strings, None for anything else."""
     if value is None or isinstance(value, bool):
          return None
     try:
          return Decimal(str(value).strip())
     except (InvalidOperation, ValueError):
          return None


def is_positive_amount(value) -> bool:
     amount = to_decimal(value)
     return amount is not None and amount.is_finite() and amount > 0


def require_positive_amount(value, message: str) -> Decimal:
     """
     Positive finite amount or ValidationError.

     Accepts Decimal, int, float and numeric strings; NaN, infinities, zero,
     negatives and non-numeric input are rejected with `message`.
     """
     if not is_positive_amount(value):
          raise ValidationError(message)
     return to_decimal(value)


def optional_amount(value, field: str) -> Optional[Decimal]:
     """None stays None; anything else must be a finite, non-negative number."""
     if value is None or value == "":
          return None
     amount = to_decimal(value)
     if amount is None or not amount.is_finite() or amount < 0:
          raise ValidationError(f"{field} must be a valid number")
     return amount
