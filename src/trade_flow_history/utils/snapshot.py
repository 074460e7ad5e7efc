import datetime
from functools import total_ordering

from ..categories import N_CATEGORIES

# value stored in the persisted blob for "no data"
INVALID = -1


def _as_int(v):
    number = int(v)
    if number != v:
        raise ValueError(f"Resource values must be integers, got {v}")
    return number


def _check_values(values):
    values = tuple(None if v is None else _as_int(v) for v in values)
    if len(values) != N_CATEGORIES:
        raise ValueError(f"Expected {N_CATEGORIES} values, got {len(values)}")
    for v in values:
        if v is not None and v < 0:
            raise ValueError(f"Resource values must be >= 0 or None, got {v}")
    return values


@total_ordering
class Snapshot:
    """One dated record of per-category resource totals.

    Values are ``None`` where no measurement exists for the period. Snapshots
    order and compare by date only.
    """

    __slots__ = ("date", "values")

    def __init__(self, date, values):
        if isinstance(date, datetime.datetime):
            date = date.date()
        self.date = date
        self.values = _check_values(values)

    @classmethod
    def invalid(cls, date):
        """Build a gap filler: a snapshot with no data for any category."""
        return cls(date, (None,) * N_CATEGORIES)

    @classmethod
    def from_raw(cls, date, raw_values):
        """Build a snapshot from sentinel-encoded integers (``-1`` is no data).

        Raises:
            ValueError: If a value is below ``-1`` or the count is wrong.
        """
        return cls(date, [None if int(v) == INVALID else v for v in raw_values])

    def to_raw(self):
        return tuple(INVALID if v is None else v for v in self.values)

    def update(self, values):
        """Overwrite the values in place, keeping the object identity."""
        self.values = _check_values(values)

    @property
    def is_valid(self):
        return any(v is not None for v in self.values)

    def __eq__(self, other):
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.date == other.date

    def __lt__(self, other):
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.date < other.date

    def __hash__(self):
        return hash(self.date)

    def __repr__(self):
        return f"Snapshot({self.date.isoformat()}, {list(self.values)})"
