"""
Tests for money formatting, dates and the Result type
"""
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from budgethub.config import get_settings
from budgethub.domain.result import Ok, Err, ErrorKind
from budgethub.utils.dates import local_today
from budgethub.utils.money import format_money


def test_format_money_thousands():
    assert format_money(1500, "CHF") == "CHF 1'500.00"


def test_format_money_from_string():
    assert format_money("99.5", "EUR") == "EUR 99.50"


def test_format_money_decimal_negative():
    assert format_money(Decimal("-20"), "CHF") == "CHF -20.00"


def test_ok_and_err_flags():
    assert Ok([1, 2], "loaded").ok is True
    err = Err(ErrorKind.INFRASTRUCTURE, "db down")
    assert err.ok is False
    assert err.kind.value == "infrastructure"


def test_local_today_uses_configured_timezone(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "Pacific/Kiritimati")
    get_settings.cache_clear()
    try:
        assert local_today() == datetime.now(tz=ZoneInfo("Pacific/Kiritimati")).date()
    finally:
        monkeypatch.delenv("TIMEZONE")
        get_settings.cache_clear()
