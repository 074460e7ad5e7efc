import math
from typing import NamedTuple

import numpy as np

from .categories import N_CATEGORIES
from .utils.dates import from_days, to_days

# more points than this are too close together to read on the chart
MAX_POINTS = 300


class Downsampled(NamedTuple):
    """Block-averaged history ready to plot.

    ``values`` has one row per output date and one column per requested
    channel; ``nan`` marks a block where the channel had no valid sample.
    """

    dates: list
    values: np.ndarray

    def __len__(self):
        return len(self.dates)

    def channel(self, i):
        return self.values[:, i]


def combine_factor(count, max_points=MAX_POINTS):
    """Return ``(points_to_combine, output_size)`` for ``count`` inputs.

    Raises:
        ValueError: If ``max_points`` is below 1.
    """
    if max_points < 1:
        raise ValueError(f"max_points must be at least 1, got {max_points}")
    if count == 0:
        return 1, 0
    points_to_combine = math.ceil(count / max_points)
    return points_to_combine, math.ceil(count / points_to_combine)


def reduce(snapshots, channels=None, max_points=MAX_POINTS):
    """Reduce a date-ordered run of snapshots to at most ``max_points`` rows.

    Consecutive blocks of ``points_to_combine`` snapshots are averaged; the
    last block may be shorter. No-data values are left out of the channel
    means, and a block where a channel has no data at all yields ``nan``.
    The block date is the truncated mean of the day ordinals.

    Args:
        snapshots (Sequence[Snapshot]): Snapshots sorted ascending by date.
        channels (list[int] | None): Channel indexes to keep, in output
            column order. All channels when ``None``.
        max_points (int): Maximum number of output rows.

    Returns:
        Downsampled: The output dates and per-channel values.
    """
    if channels is None:
        channels = list(range(N_CATEGORIES))
    points_to_combine, output_size = combine_factor(len(snapshots), max_points)
    if output_size == 0:
        return Downsampled(dates=[], values=np.empty((0, len(channels)), dtype=float))

    days = np.array([to_days(s.date) for s in snapshots], dtype=np.int64)
    raw = np.array(
        [[np.nan if s.values[c] is None else s.values[c] for c in channels] for s in snapshots],
        dtype=float,
    ).reshape(len(snapshots), len(channels))
    valid = ~np.isnan(raw)

    starts = np.arange(0, len(snapshots), points_to_combine)
    block_sizes = np.diff(np.append(starts, len(snapshots)))
    day_totals = np.add.reduceat(days, starts)
    totals = np.add.reduceat(np.where(valid, raw, 0.0), starts, axis=0)
    counts = np.add.reduceat(valid.astype(np.int64), starts, axis=0)

    with np.errstate(invalid="ignore", divide="ignore"):
        means = np.where(counts > 0, totals / counts, np.nan)
    dates = [from_days(total // size) for total, size in zip(day_totals.tolist(), block_sizes.tolist())]
    assert len(dates) == output_size
    return Downsampled(dates=dates, values=means)


def downsample_store(store, first_index=0, channels=None, max_points=MAX_POINTS):
    """Downsample ``store[first_index:]`` while holding the store lock."""
    with store.locked():
        return reduce(store[max(first_index, 0):], channels=channels, max_points=max_points)
