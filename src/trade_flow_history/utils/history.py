import bisect
import threading
from contextlib import contextmanager

import numpy as np
import pandas as pd
from loguru import logger

from ..categories import CATEGORY_NAMES, category_index
from .dates import (
    MAX_SNAPSHOT_DATE,
    MIN_DATE,
    add_months,
    first_of_month,
    month_range,
)
from .snapshot import Snapshot


class SnapshotStore:
    """Store the monthly resource snapshots of one game session.

    Snapshots are kept sorted ascending by date with no duplicate dates. A
    single reentrant lock serializes the simulation thread, which records
    samples, and the UI thread, which saves, loads and reads the history to
    build charts. Readers that traverse the store must hold the lock for the
    whole traversal through ``locked()``.

    Access supports multiple forms via `__getitem__`: by index, by slice, by
    category name, a tuple of (category, index), or a list of categories.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._snapshots = []
        self._listeners = []
        self.loaded = False
        self._previous_sample = MIN_DATE

    @contextmanager
    def locked(self):
        """Hold the store lock for the duration of the ``with`` block."""
        with self._lock:
            yield self

    def initialize(self):
        """Reset all session state. Must be called before loading a session."""
        with self.locked():
            self._snapshots.clear()
            self.loaded = False
            self._previous_sample = MIN_DATE

    def deinitialize(self):
        with self.locked():
            self._snapshots.clear()

    def add_listener(self, callback):
        """Register a ``callback(store)`` invoked after every history change."""
        with self.locked():
            self._listeners.append(callback)

    def remove_listener(self, callback):
        with self.locked():
            self._listeners.remove(callback)

    def add(self, snapshot):
        """Append a snapshot that must be later than every stored one.

        Used when restoring a session, where records arrive already sorted.

        Raises:
            AssertionError: If the snapshot would break the date ordering.
        """
        with self.locked():
            assert not self._snapshots or self._snapshots[-1].date < snapshot.date, (
                f"Snapshot dates must be ascending with no duplicates : "
                f"{self._snapshots[-1].date} then {snapshot.date}"
            )
            self._snapshots.append(snapshot)

    def find(self, date):
        """Return the index of the snapshot at ``date`` or -1."""
        with self.locked():
            index = bisect.bisect_left(self._snapshots, Snapshot.invalid(date))
            if index < len(self._snapshots) and self._snapshots[index].date == date:
                return index
            return -1

    def record_sample(self, current_date, raw_values):
        """Process one simulation day.

        Fills any month gap between the stored history and ``current_date``
        with invalid snapshots, then records a real sample when
        ``current_date`` is the first day of a month not processed yet.

        Args:
            current_date (datetime.date): Current simulation date.
            raw_values (Sequence[int | None] | Callable[[], Sequence]): Values
                per category, or a callable returning them. The callable is
                only invoked when a real sample is recorded.

        Returns:
            bool: ``True`` if the history changed.
        """
        try:
            with self.locked():
                # checked under the lock, a concurrent load may reinitialize the store
                if not self.loaded:
                    return False
                changed = self._fill_gaps(current_date)

                if current_date.day == 1 and current_date != self._previous_sample:
                    values = raw_values() if callable(raw_values) else raw_values
                    self._store_sample(Snapshot(current_date, values))
                    self._previous_sample = current_date
                    changed = True

                if changed:
                    self._notify()
                return changed
        except Exception:
            logger.exception(f"Failed to record resource snapshot for {current_date}")
            return False

    def _fill_gaps(self, current_date):
        if not self._snapshots:
            return False
        changed = False

        # the clock went back before the history: fill up to the first snapshot,
        # the real samples will overwrite these later
        first_date = self._snapshots[0].date
        if current_date < first_date:
            start = first_of_month(current_date)
            if current_date.day != 1:
                start = add_months(start, 1)
            end = add_months(first_date, -1)
            fillers = [Snapshot.invalid(date) for date in month_range(start, end)]
            if fillers:
                self._snapshots[0:0] = fillers
                changed = True

        # the clock jumped forward: fill through the current month
        last_date = self._snapshots[-1].date
        if current_date > last_date and last_date < MAX_SNAPSHOT_DATE:
            start = add_months(last_date, 1)
            end = first_of_month(current_date)
            fillers = [Snapshot.invalid(date) for date in month_range(start, end)]
            if fillers:
                self._snapshots.extend(fillers)
                changed = True
        return changed

    def _store_sample(self, snapshot):
        index = bisect.bisect_left(self._snapshots, snapshot)
        if index < len(self._snapshots) and self._snapshots[index].date == snapshot.date:
            self._snapshots[index].update(snapshot.values)
        else:
            # only reached with an empty history
            self._snapshots.insert(index, snapshot)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    def dates(self):
        with self.locked():
            return [snapshot.date for snapshot in self._snapshots]

    def to_dataframe(self):
        """Export the history as a DataFrame indexed by date.

        Returns:
            pandas.DataFrame: One nullable ``Int64`` column per category.
        """
        with self.locked():
            data = {
                name: pd.array([s.values[i] for s in self._snapshots], dtype="Int64")
                for i, name in enumerate(CATEGORY_NAMES)
            }
            index = pd.Index([s.date for s in self._snapshots], name="date", dtype="object")
            return pd.DataFrame(data, index=index)

    def _column(self, column_index):
        return np.array(
            [np.nan if s.values[column_index] is None else s.values[column_index] for s in self._snapshots],
            dtype=float,
        )

    def __len__(self):
        with self.locked():
            return len(self._snapshots)

    def __iter__(self):
        # iterates over a copy, hold locked() to keep it consistent with other reads
        with self.locked():
            return iter(list(self._snapshots))

    def __getitem__(self, arg):
        """Retrieve snapshots or category columns.

        Supports the following forms:
        - (category: str, t: int) -> int | None; value at index t.
        - t: int -> Snapshot; the snapshot at index t.
        - s: slice -> list[Snapshot].
        - category: str -> numpy.ndarray; float values with ``nan`` for no data.
        - categories: list[str] -> numpy.ndarray; one column per category.

        Raises:
            ValueError: If a requested category is not found.
        """
        with self.locked():
            if isinstance(arg, tuple):
                column, t = arg
                return self._snapshots[t].values[category_index(column)]
            if isinstance(arg, (int, slice)):
                return self._snapshots[arg]
            if isinstance(arg, str):
                return self._column(category_index(arg))
            if isinstance(arg, list):
                column_indexes = [category_index(column) for column in arg]
                return np.column_stack(
                    [self._column(i) for i in column_indexes]
                ).reshape(len(self._snapshots), len(column_indexes))
            raise TypeError(f"Unsupported index type {type(arg).__name__}")
