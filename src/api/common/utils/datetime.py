from datetime import date, datetime, timezone, timedelta
from typing import List


def get_current_datetime() -> datetime:
    """Return current UTC datetime with timezone info."""
    dt = datetime.now(timezone.utc)
    # Microseconds are stripped so stored timestamps compare cleanly
    return dt.replace(microsecond=0)


def get_current_date() -> date:
    """Return today's date in UTC."""
    return get_current_datetime().date()


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def get_month_key(target: date) -> str:
    """Return the 'YYYY-MM' key used by the monthly currency series."""
    return f"{target.year:04d}-{target.month:02d}"


def get_months_back(target: date, months: int) -> date:
    """
    Move a date back by a number of calendar months, clamping the day.

    Args:
        target: Reference date
        months: Number of months to go back

    Returns:
        The same day `months` months earlier (or the last day of that month)
    """
    year = target.year
    month = target.month - months
    while month < 1:
        month += 12
        year -= 1
    month_start = date(year, month, 1)
    if month == 12:
        month_end = date(year + 1, 1, 1) - timedelta(days=1)
    else:
        month_end = date(year, month + 1, 1) - timedelta(days=1)
    return month_start.replace(day=min(target.day, month_end.day))


def get_trailing_month_keys(target: date, months: int = 6) -> List[str]:
    """Month keys for the `months` months ending with the target's month, oldest first."""
    return [get_month_key(get_months_back(target, offset)) for offset in range(months - 1, -1, -1)]
