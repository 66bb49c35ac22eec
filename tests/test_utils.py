import re
from datetime import date, datetime

import pytest

from services.identifiers import BASE36_ALPHABET, TransactionIdGenerator, to_base36
from utils.time_utils import due_date_in_month, format_rent_month, is_rent_month, parse_date


class TestTransactionIds:
    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"
        assert to_base36(1767225600000) == to_base36(1767225600000).upper()

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            to_base36(-1)

    def test_format(self):
        generator = TransactionIdGenerator(clock=lambda: 36 ** 3, choice=lambda alphabet: alphabet[-1])
        assert generator() == "TXN_1000_ZZZZZZZZ"

    def test_default_source(self):
        value = TransactionIdGenerator()()
        assert re.match(r"^TXN_[0-9A-Z]+_[0-9A-Z]{8}$", value)
        assert set(value.split("_")[2]) <= set(BASE36_ALPHABET)


class TestRentMonths:
    @pytest.mark.parametrize("value", ["2025-01", "2026-12"])
    def test_valid(self, value):
        assert is_rent_month(value)

    @pytest.mark.parametrize("value", ["2025-1", "abc", "", None, "2025-01-01", " 2025-01", "２０２５-０１", "٢٠٢٥-٠١"])
    def test_invalid(self, value):
        assert not is_rent_month(value)

    def test_format_rent_month(self):
        assert format_rent_month(datetime(2026, 3, 5, 23, 59)) == "2026-03"

    @pytest.mark.parametrize("year,month,day,expected", [
        (2026, 1, 10, date(2026, 1, 10)),
        (2026, 2, 31, date(2026, 2, 28)),
        (2028, 2, 30, date(2028, 2, 29)),
        (2026, 4, 31, date(2026, 4, 30)),
    ])
    def test_due_date_clamped(self, year, month, day, expected):
        assert due_date_in_month(year, month, day) == expected


class TestParseDate:
    @pytest.mark.parametrize("value,expected", [
        ("2025-01-10", date(2025, 1, 10)),
        ("2025-01-10T00:00:00Z", date(2025, 1, 10)),
        (datetime(2025, 1, 10, 8, 0), date(2025, 1, 10)),
        (date(2025, 1, 10), date(2025, 1, 10)),
    ])
    def test_parses(self, value, expected):
        assert parse_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "tomorrow", "2025-13-01"])
    def test_unparseable(self, value):
        assert parse_date(value) is None
