from datetime import datetime
from typing import Optional, Tuple

import pytz
from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from config import SUMMARY_TIMEZONE

_HTTP_URL = TypeAdapter(HttpUrl)


def get_formatted_date(tz_name: str = SUMMARY_TIMEZONE, now: Optional[datetime] = None) -> Tuple[str, str]:
    """Returns tuple: (short_label, full_date_string)"""
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc

    if now is None:
        now = datetime.now(tz)
    else:
        now = now.astimezone(tz)

    # For the Slack header: "Monday [10/27/25]"
    day_of_week = now.strftime("%A")
    short_date = now.strftime("%m/%d/%y")

    # For Claude prompt: "October 27, 2025"
    full_date = now.strftime("%B %d, %Y")

    return f"{day_of_week} [{short_date}]", full_date


def is_http_url(value: Optional[str]) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not value or not value.strip():
        return False
    try:
        _HTTP_URL.validate_python(value.strip())
    except PydanticValidationError:
        return False
    return True
