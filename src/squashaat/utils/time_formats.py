"""Parsing of the date and time formats shown by the booking site.

Start times are shown like ``10:15 AM`` and dates in the date dropdown
like ``Wed, 23 Dec, 2015``; dropdown option values are ``2015-12-23.html``.
"""

import re
from datetime import date, datetime, time
from typing import Optional, Union

TIME_FORMAT = "%I:%M %p"
DROPDOWN_DATE_FORMAT = "%a, %d %b, %Y"
DATE_PAGE_SUFFIX = ".html"

_DATE_IN_URL = re.compile(r"(\d{4}-\d{2}-\d{2})")


def parse_start_time(value: Union[str, time]) -> time:
    """Parse an ``h:mm AM/PM`` start time.

    Examples:
        >>> parse_start_time("9:45 PM")
        datetime.time(21, 45)
    """
    if isinstance(value, time):
        return value
    try:
        return datetime.strptime(value.strip().upper(), TIME_FORMAT).time()
    except ValueError as e:
        raise ValueError(f"Invalid start time '{value}', expected e.g. '10:15 AM'") from e


def format_start_time(value: time) -> str:
    """Format a start time the way the site shows it (no leading zero)."""
    return value.strftime(TIME_FORMAT).lstrip("0")


def parse_dropdown_date(text: str) -> date:
    """Parse the visible text of a date dropdown option."""
    return datetime.strptime(text.strip(), DROPDOWN_DATE_FORMAT).date()


def parse_date_page(value: str) -> date:
    """Parse a date dropdown option value such as ``2015-12-23.html``."""
    if value.endswith(DATE_PAGE_SUFFIX):
        value = value[: -len(DATE_PAGE_SUFFIX)]
    return date.fromisoformat(value)


def date_page(value: date) -> str:
    """Return the date dropdown option value for ``value``."""
    return f"{value.isoformat()}{DATE_PAGE_SUFFIX}"


def date_from_url(url: str) -> Optional[str]:
    """Return the ``yyyy-mm-dd`` date in a booking page URL, if there is one.

    Booking pages are served as e.g. ``.../2015-10-22.html`` or
    ``.../2015-10-22<guid>.html``.
    """
    match = _DATE_IN_URL.search(url.rsplit("/", 1)[-1])
    return match.group(1) if match else None


def parse_date_argument(value: Union[str, date]) -> date:
    """Parse a keyword date argument (``yyyy-mm-dd`` or ``today``)."""
    if isinstance(value, date):
        return value
    text = value.strip().lower()
    if text == "today":
        return date.today()
    return date.fromisoformat(text)
