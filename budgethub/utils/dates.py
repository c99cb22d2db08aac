"""
Calendar date in the application timezone (Settings.TIMEZONE).
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from budgethub.config import get_settings


def local_today() -> date:
    return datetime.now(tz=ZoneInfo(get_settings().TIMEZONE)).date()
