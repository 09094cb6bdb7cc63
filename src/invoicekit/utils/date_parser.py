"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones used for due dates:
    - "today", "yesterday", "tomorrow"
    - "in 30 days", "in 2 weeks", "in 1 month"
    - "next week", "next month"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("in "):
        parts = date_str[3:].split()
        if len(parts) == 2 and parts[0].isdigit():
            count = int(parts[0])
            unit = parts[1].rstrip("s")
            if unit == "day":
                return today + timedelta(days=count)
            elif unit == "week":
                return today + timedelta(weeks=count)
            elif unit == "month":
                return today + relativedelta(months=count)
        raise ValueError(f"Could not parse date '{date_str}': expected 'in N days|weeks|months'")

    if date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            return today + timedelta(days=(7 - today.weekday()))
        elif period == "month":
            return (today + relativedelta(months=1)).replace(day=1)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: One of this-month, this-year, this-week, last-month, last-year, last-week
        today: Reference date (defaults to date.today())

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
