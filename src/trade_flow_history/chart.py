"""Line chart model for the resource history.

The chart holds the plotted dates and curves and computes, in coordinates
normalized to the plot rectangle, everything an external renderer draws:
gridlines with their labels, curve line segments and tooltip text. It does
not know about pixels or fonts.
"""

import datetime

import numpy as np

from .hit_test import MIN_TOOLTIP_DISTANCE, locate
from .scale import value_range, year_range
from .utils.dates import year_start_days

# plot rectangle inside the widget as (x_min, y_min, width, height)
GRAPH_RECT = (0.1, 0.1, 0.8, 0.8)
DEFAULT_CURVE_WIDTH = 0.5


def format_value(value):
    return f"{value:,.0f}"


class Curve:
    """Settings and data of one curve.

    Args:
        name (str): Curve name.
        tooltip (str): Prefix of the tooltip text.
        data (Sequence[float]): Values aligned with the chart dates. ``nan``,
            ``None`` and negative values mean no data.
        width (float): Line width.
        color (str | None): Line color understood by the renderer.

    Raises:
        ValueError: If a setting is empty or the width is not positive.
    """

    def __init__(self, name, tooltip, data, width=DEFAULT_CURVE_WIDTH, color=None):
        if not name:
            raise ValueError("Curve name must not be empty")
        if not tooltip:
            raise ValueError("Curve tooltip must not be empty")
        if data is None:
            raise ValueError("Curve data must not be None")
        if width <= 0:
            raise ValueError(f"Curve width must be positive, got {width}")
        self.name = name
        self.tooltip = tooltip
        self.width = width
        self.color = color

        data = np.array([np.nan if v is None else v for v in data], dtype=float)
        data[data < 0] = np.nan
        self.data = data

        # the axis always includes zero
        valid = data[~np.isnan(data)]
        self.min_value = float(min(0.0, valid.min())) if valid.size else 0.0
        self.max_value = float(max(0.0, valid.max())) if valid.size else 0.0

    def is_valid(self, i):
        return not np.isnan(self.data[i])


class Chart:
    def __init__(self, tooltip_distance=MIN_TOOLTIP_DISTANCE):
        self.tooltip_distance = tooltip_distance
        self.curves = []
        self.dates = None
        self.start_date = None
        self.end_date = None
        self.min_value = 0.0
        self.max_value = 0.0

    def set_dates(self, dates, today=None):
        """Set the dates of the horizontal axis.

        Args:
            dates (Sequence[datetime.date]): Strictly ascending dates.
            today (datetime.date | None): Axis date used when ``dates`` is
                empty. Defaults to the current date.

        Raises:
            ValueError: If the dates are not ascending or contain duplicates.
        """
        dates = list(dates)
        for previous, current in zip(dates, dates[1:]):
            if current <= previous:
                raise ValueError("Dates must be in ascending order with no duplicates.")
        self.dates = dates
        if dates:
            self.start_date, self.end_date = dates[0], dates[-1]
        else:
            self.start_date = self.end_date = today or datetime.date.today()
        self.min_value = 0.0
        self.max_value = 0.0

    def add_curve(self, name, tooltip, data, width=DEFAULT_CURVE_WIDTH, color=None):
        """Add a curve whose data is aligned with the dates.

        Raises:
            ValueError: If the dates are not set or the lengths differ.
        """
        if self.dates is None:
            raise ValueError("Dates must be set before adding a curve.")
        if len(data) != len(self.dates):
            raise ValueError("Curve data must have the same number of entries as the dates.")
        curve = Curve(name, tooltip, data, width=width, color=color)
        self.curves.append(curve)
        self.min_value = min(self.min_value, curve.min_value)
        self.max_value = max(self.max_value, curve.max_value)
        return curve

    def clear(self):
        self.dates = None
        self.curves = []
        self.min_value = 0.0
        self.max_value = 0.0

    def year_range(self):
        return year_range(self.start_date, self.end_date)

    def value_range(self):
        return value_range(self.min_value, self.max_value)

    def value_gridlines(self):
        """Horizontal gridlines as ``(position, label)`` pairs, bottom first."""
        if not self.curves:
            return []
        values = self.value_range()
        return [(values.normalize(v), format_value(v)) for v in values.steps()]

    def year_gridlines(self):
        """Vertical gridlines as ``(position, label)`` pairs, left first."""
        if not self.curves:
            return []
        years = self.year_range()
        return [(years.normalize_days(year_start_days(y)), str(y)) for y in years.years()]

    def points(self, curve):
        """Normalized ``(x, y)`` of every point, ``None`` where there is no data."""
        years, values = self.year_range(), self.value_range()
        return [
            (years.normalize(date), values.normalize(v)) if not np.isnan(v) else None
            for date, v in zip(self.dates, curve.data.tolist())
        ]

    def segments(self, curve):
        """Line segments between consecutive points that both have data."""
        points = self.points(curve)
        return [(a, b) for a, b in zip(points, points[1:]) if a is not None and b is not None]

    def plot_position(self, position, rect=GRAPH_RECT):
        """Convert a widget position (0..1, origin top left) to plot coordinates."""
        x_min, y_min, width, height = rect
        x, y = position
        return (x - x_min) / width, (1.0 - y - y_min) / height

    def locate(self, cursor):
        if not self.curves or not self.dates:
            return None
        return locate(
            cursor,
            self.dates,
            [curve.data for curve in self.curves],
            self.year_range(),
            self.value_range(),
            tolerance=self.tooltip_distance,
        )

    def tooltip(self, cursor):
        """Tooltip text for the data point under ``cursor`` or ``None``."""
        hit = self.locate(cursor)
        if hit is None:
            return None
        curve = self.curves[hit.curve_index]
        date = self.dates[hit.date_index]
        value = curve.data[hit.date_index]
        return f"{curve.tooltip} ({date:%d/%m/%Y}  :  {format_value(value)})"

    def to_dict(self):
        """Chart payload for the renderer."""
        if not self.curves:
            return {"dates": [], "x_gridlines": [], "y_gridlines": [], "curves": []}
        years, values = self.year_range(), self.value_range()
        return {
            "dates": [date.isoformat() for date in self.dates],
            "year_range": years._asdict(),
            "value_range": values._asdict(),
            "x_gridlines": [{"position": p, "label": label} for p, label in self.year_gridlines()],
            "y_gridlines": [{"position": p, "label": label} for p, label in self.value_gridlines()],
            "curves": [
                {
                    "name": curve.name,
                    "tooltip": curve.tooltip,
                    "color": curve.color,
                    "width": curve.width,
                    "points": self.points(curve),
                    "segments": self.segments(curve),
                }
                for curve in self.curves
            ],
        }
