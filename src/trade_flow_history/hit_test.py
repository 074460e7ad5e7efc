import math
from typing import NamedTuple

# cursor distance, as a fraction of the plot size, to pick a data point
MIN_TOOLTIP_DISTANCE = 0.02


class Hit(NamedTuple):
    date_index: int
    curve_index: int


def is_missing(value):
    """``True`` for the no-data markers: ``None``, ``nan`` or a negative value."""
    return value is None or math.isnan(value) or value < 0


def locate(cursor, dates, curves, year_range, value_range, tolerance=MIN_TOOLTIP_DISTANCE):
    """Find the data point under the cursor.

    The closest date on the horizontal axis is picked first, then the curve
    whose value at that date is closest on the vertical axis. Each distance
    must be below ``tolerance``.

    Args:
        cursor (tuple[float, float]): Cursor position normalized to the plot
            rectangle, ``(0, 0)`` at the bottom left.
        dates (Sequence[datetime.date]): Plotted dates.
        curves (Sequence[Sequence[float]]): One value sequence per curve,
            aligned with ``dates``.
        year_range (YearRange): Horizontal range used to plot the dates.
        value_range (ValueRange): Vertical range used to plot the values.
        tolerance (float): Maximum normalized distance.

    Returns:
        Hit | None: The date and curve indexes, or ``None`` when nothing is
        close enough or the closest value has no data.
    """
    x, y = cursor
    if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
        return None

    date_index = -1
    min_distance = tolerance
    for i, date in enumerate(dates):
        distance = abs(year_range.normalize(date) - x)
        if distance < min_distance:
            date_index = i
            min_distance = distance
    if date_index < 0:
        return None

    curve_index = -1
    min_distance = tolerance
    for i, curve in enumerate(curves):
        value = curve[date_index]
        if is_missing(value):
            # plotted below the axis like the -1 sentinel, can still shadow a real point
            value = -1.0
        distance = abs(value_range.normalize(value) - y)
        if distance < min_distance:
            curve_index = i
            min_distance = distance
    if curve_index < 0:
        return None

    if is_missing(curves[curve_index][date_index]):
        return None
    return Hit(date_index=date_index, curve_index=curve_index)
