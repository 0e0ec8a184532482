"""Tests for date, currency and config helpers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from models.errors import ValidationError
from utils import app_config
from utils.currency import format_currency, format_signed, to_decimal
from utils.date_helpers import (
    add_months,
    clamp_day_to_month,
    is_within_range,
    same_day,
    same_month,
    to_local_datetime,
    week_range,
)


class TestDateHelpers:
    def test_to_local_datetime_accepts_dates_and_strings(self):
        assert to_local_datetime(date(2026, 3, 1)) == datetime(2026, 3, 1)
        assert to_local_datetime("2026-03-01T08:15:00") == datetime(2026, 3, 1, 8, 15)

    def test_utc_strings_become_local(self):
        expected = datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert to_local_datetime("2024-03-10T15:00:00.000Z") == expected

    def test_to_local_datetime_rejects_other_types(self):
        with pytest.raises(TypeError):
            to_local_datetime(12)

    def test_same_day_and_month(self):
        assert same_day(datetime(2026, 3, 1, 0, 0), datetime(2026, 3, 1, 23, 59))
        assert not same_day(date(2026, 3, 1), date(2026, 3, 2))
        assert same_month("2026-03-01", date(2026, 3, 31))
        assert not same_month(date(2026, 3, 1), date(2025, 3, 1))

    def test_is_within_range_is_inclusive(self):
        assert is_within_range(datetime(2026, 3, 31, 23, 59, 59), date(2026, 3, 1), date(2026, 3, 31))
        assert not is_within_range(datetime(2026, 4, 1), date(2026, 3, 1), date(2026, 3, 31))

    def test_month_arithmetic(self):
        assert clamp_day_to_month(2026, 2, 31) == 28
        assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
        assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)
        assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 15)

    def test_week_range(self):
        assert week_range(date(2026, 3, 15)) == (date(2026, 3, 15), date(2026, 3, 21))
        assert week_range(date(2026, 3, 21)) == (date(2026, 3, 15), date(2026, 3, 21))


class TestCurrency:
    @pytest.mark.parametrize("value, expected", [
        ("10", Decimal("10.00")),
        ("1.234,56", Decimal("1234.56")),
        ("12,5", Decimal("12.50")),
        (0.1, Decimal("0.10")),
        (3, Decimal("3.00")),
        (Decimal("1.005"), Decimal("1.01")),
    ])
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", [None, True, "abc", "NaN", float("inf"), [1], "1e30", 1e30])
    def test_to_decimal_rejects(self, value):
        with pytest.raises(ValidationError):
            to_decimal(value)

    def test_format(self):
        assert format_currency(Decimal("1234.5")) == "R$ 1.234,50"
        assert format_signed(Decimal("-3")) == "-R$ 3,00"


class TestAppConfig:
    def test_missing_or_corrupt_config(self, tmp_path):
        assert app_config.load_config(tmp_path / "none.json") == {}
        bad = tmp_path / "bad.json"
        bad.write_text("{oops", encoding="utf-8")
        assert app_config.load_config(bad) == {}

    def test_data_folder_round_trip(self, tmp_path):
        config = tmp_path / "cfg" / "config.json"
        assert app_config.get_data_folder(config) is None
        app_config.set_data_folder("/data/ledger", config)
        assert app_config.get_data_folder(config) == "/data/ledger"
        app_config.set_data_folder(None, config)
        assert app_config.get_data_folder(config) is None

    def test_log_level(self, tmp_path):
        config = tmp_path / "config.json"
        assert app_config.get_log_level(config) == "WARNING"
        app_config.save_config({"log_level": "debug"}, config)
        assert app_config.get_log_level(config) == "DEBUG"
        app_config.save_config({"log_level": "chatty"}, config)
        assert app_config.get_log_level(config) == "WARNING"
