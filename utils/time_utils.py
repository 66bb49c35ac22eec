"""Clock and calendar helpers shared by the workflow services."""
import re
from calendar import monthrange
from datetime import date, datetime, timezone
from typing import Optional, Union

RENT_MONTH_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}$")


def utcnow() -> datetime:
     """Server-side 'now' in UTC (naive, canonical)."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


def format_rent_month(moment: Union[date, datetime]) -> str:
     """Calendar month of `moment` as YYYY-MM."""
     return f"{moment.year:04d}-{moment.month:02d}"


def is_rent_month(value: Optional[str]) -> bool:
     return bool(value) and RENT_MONTH_PATTERN.match(value) is not None


def due_date_in_month(year: int, month: int, due_day: int) -> date:
     """
     Due date for `due_day` inside the given month.

     Days past the end of the month fall on its last day (a 31st joining
     date is due on 28/29 Feb, 30 Apr, ...).
     """
     last_day = monthrange(year, month)[1]
     return date(year, month, min(due_day, last_day))


def parse_date(value) -> Optional[date]:
     """
     Coerce a date-like value to a date.

     - None / "" -> None
     - date / datetime -> its date
     - ISO-8601 string ("2025-01-10" or "2025-01-10T00:00:00Z") -> date
     - anything unparseable -> None
     """
     if value is None:
          return None
     if isinstance(value, datetime):
          return value.date()
     if isinstance(value, date):
          return value
     s = str(value).strip()
     if not s:
          return None
     if s.endswith("Z"):
          s = s[:-1] + "+00:00"
     try:
          return datetime.fromisoformat(s).date()
     except ValueError:
          return None
