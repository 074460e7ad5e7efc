"""Month arithmetic on ``datetime.date`` clamped to the years 1..9999."""

import datetime

MIN_DATE = datetime.date.min
MAX_DATE = datetime.date.max
# last month that can be stepped into without leaving the date range
MAX_SNAPSHOT_DATE = datetime.date(9999, 12, 1)


def first_of_month(date):
    return date.replace(day=1)


def add_months(date, months):
    """Shift a first-of-month date by a number of months.

    Args:
        date (datetime.date): Date to shift. The day is kept, so callers pass
            first-of-month dates.
        months (int): Number of months, may be negative.

    Returns:
        datetime.date: The shifted date.

    Raises:
        OverflowError: If the result falls outside years 1..9999.
    """
    index = date.year * 12 + (date.month - 1) + months
    year, month = divmod(index, 12)
    if year < MIN_DATE.year or year > MAX_DATE.year:
        raise OverflowError(f"date {date} shifted by {months} months is out of range")
    return date.replace(year=year, month=month + 1)


def months_between(start, end):
    """Number of whole months from ``start`` to ``end`` ignoring the day."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def month_range(start, end):
    """Yield first-of-month dates from ``start`` to ``end`` inclusive.

    Both bounds must be first-of-month dates. Nothing is yielded when
    ``start`` is after ``end``.
    """
    for offset in range(months_between(start, end) + 1):
        yield add_months(start, offset)


def to_days(date):
    return date.toordinal()


def from_days(days):
    return datetime.date.fromordinal(int(days))


def year_start_days(year):
    """Day ordinal of January 1 of ``year``, clamped to the representable range."""
    if year < MIN_DATE.year:
        return MIN_DATE.toordinal()
    if year > MAX_DATE.year:
        return MAX_DATE.toordinal()
    return datetime.date(year, 1, 1).toordinal()
