from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value):
    """
    Coerce a calendar date from a ``YYYY-MM-DD`` string, a date or a datetime.

    Time of day is dropped; all comparisons in the engine are whole days.

    Raises:
        ValueError: If the value cannot be read as a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.strptime(value.strip()[:10], DATE_FORMAT).date()
    raise ValueError(f"Cannot interpret {value!r} as a calendar date")


def format_date(value):
    """Render a date as ``YYYY-MM-DD``."""
    return parse_date(value).strftime(DATE_FORMAT)


def days_between(start, end):
    """Number of whole days from start to end (negative if end is earlier)."""
    return (parse_date(end) - parse_date(start)).days


def add_days(value, days):
    return parse_date(value) + timedelta(days=days)


def date_range(start, end):
    """Yield every calendar day from start to end, both inclusive."""
    current = parse_date(start)
    end = parse_date(end)
    while current <= end:
        yield current
        current += timedelta(days=1)
