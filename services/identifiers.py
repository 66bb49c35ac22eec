"""
Human-readable payment transaction identifiers.

Format: TXN_<epoch millis in base36>_<8 random base36 chars>, upper case,
e.g. TXN_M5X2K1AB_Q7Z0P3LC. Randomness comes from `secrets`; tests inject a
seeded or scripted source instead.
"""
import secrets
import string
import time
from typing import Callable, Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase
RANDOM_PART_LENGTH = 8


def to_base36(value: int) -> str:
     if value < 0:
          raise ValueError("base36 encoding needs a non-negative integer")
     if value == 0:
          return "0"
     digits = []
     while value:
          value, remainder = divmod(value, 36)
          digits.append(BASE36_ALPHABET[remainder])
     return "".join(reversed(digits))


class TransactionIdGenerator:
     """
     Callable producing transaction ids.

     Args:
          clock: returns epoch milliseconds (default: wall clock)
          choice: picks one character from a sequence (default: secrets.choice)
     """

     def __init__(
          self,
          clock: Optional[Callable[[], int]] = None,
          choice: Optional[Callable[[str], str]] = None,
     ):
          self._clock = clock or (lambda: int(time.time() * 1000))
          self._choice = choice or secrets.choice

     def __call__(self) -> str:
          timestamp = to_base36(self._clock())
          random_part = "".join(self._choice(BASE36_ALPHABET) for _ in range(RANDOM_PART_LENGTH))
          return f"TXN_{timestamp}_{random_part}"


default_transaction_id_generator = TransactionIdGenerator()
