"""Nice axis ranges for the history chart.

Both axes pick an increment that is a power of ten derived from half the data
span, then widen the span outward to whole increments so gridlines fall on
round numbers. Labels, gridlines and plotted points must all be normalized
with the same range object to stay aligned.
"""

import math
from typing import NamedTuple

from .utils.dates import to_days, year_start_days

# above this many gridlines the year increment is doubled
MAX_YEAR_GRIDLINES = 15
# a minimum below this share of the maximum is dropped to zero
ZERO_BASELINE_RATIO = 0.3


def nice_increment(span):
    """Return ``ceil(10 ** floor(log10(span / 2)))``, at least 1."""
    if span <= 0:
        return 1
    increment = math.ceil(10 ** math.floor(math.log10(0.5 * span)))
    return max(increment, 1)


class YearRange(NamedTuple):
    start_year: int
    end_year: int
    increment: int
    start_days: int
    end_days: int

    @property
    def days(self):
        return self.end_days - self.start_days

    def years(self):
        """Gridline years from ``start_year`` to ``end_year`` inclusive."""
        return range(self.start_year, self.end_year + 1, self.increment)

    def normalize_days(self, days):
        return (days - self.start_days) / self.days

    def normalize(self, date):
        """Position of ``date`` along the horizontal axis, 0 to 1."""
        return self.normalize_days(to_days(date))


class ValueRange(NamedTuple):
    start: float
    end: float
    increment: float

    def steps(self):
        """Gridline values from ``start`` to ``end`` inclusive."""
        count = int(round((self.end - self.start) / self.increment))
        return [self.start + i * self.increment for i in range(count + 1)]

    def normalize(self, value):
        """Position of ``value`` along the vertical axis, 0 to 1."""
        return (value - self.start) / (self.end - self.start)


def year_range(min_date, max_date):
    """Calculate the horizontal axis range for a date span.

    The end year is exclusive of partial years: any ``max_date`` other than
    January 1 rounds up to the next year. The span is always at least one
    year and holds at most ``MAX_YEAR_GRIDLINES`` gridlines.

    Args:
        min_date (datetime.date): Earliest date shown.
        max_date (datetime.date): Latest date shown.

    Returns:
        YearRange: Start/end years, year increment and the day ordinals of
        January 1 of the start and end years, clamped to the date range.
    """
    min_year = min_date.year
    max_year = max_date.year + (0 if (max_date.month == 1 and max_date.day == 1) else 1)
    if max_year <= min_year:
        max_year = min_year + 1

    increment = nice_increment(max_year - min_year)
    start_year = increment * (min_year // increment)
    end_year = increment * -(-max_year // increment)

    if (end_year - start_year) / increment > MAX_YEAR_GRIDLINES:
        increment *= 2
        start_year = increment * (min_year // increment)
        end_year = increment * -(-max_year // increment)

    return YearRange(
        start_year=start_year,
        end_year=end_year,
        increment=increment,
        start_days=year_start_days(start_year),
        end_days=year_start_days(end_year),
    )


def value_range(min_value, max_value):
    """Calculate the vertical axis range for a value span.

    Args:
        min_value (float): Smallest valid value shown.
        max_value (float): Largest valid value shown.

    Returns:
        ValueRange: Start and end of the axis and the gridline increment.
    """
    if min_value < ZERO_BASELINE_RATIO * max_value:
        min_value = 0.0
    if max_value - min_value < 1:
        max_value = min_value + 1.0

    increment = nice_increment(max_value - min_value)
    start = increment * math.floor(min_value / increment)
    end = increment * math.ceil(max_value / increment)
    return ValueRange(start=float(start), end=float(end), increment=float(increment))
