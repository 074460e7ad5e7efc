import datetime

import numpy as np
import pytest

from trade_flow_history.categories import N_CATEGORIES
from trade_flow_history.downsample import combine_factor, downsample_store, reduce
from trade_flow_history.utils.dates import add_months
from trade_flow_history.utils.snapshot import Snapshot

D = datetime.date


def _snapshots(count, start=D(1900, 1, 1), value=lambda i: [i] * N_CATEGORIES):
    return [Snapshot(add_months(start, i), value(i)) for i in range(count)]


def test_combine_factor():
    assert combine_factor(1000, 300) == (4, 250)
    assert combine_factor(300, 300) == (1, 300)
    assert combine_factor(301, 300) == (2, 151)
    assert combine_factor(0, 300) == (1, 0)
    with pytest.raises(ValueError):
        combine_factor(10, 0)


def test_thousand_points_reduce_to_two_hundred_fifty():
    def value(i):
        # channel 0 has no data in the first block
        return [None if (c == 0 and i < 4) else i for c in range(N_CATEGORIES)]

    reduced = reduce(_snapshots(1000, value=value), max_points=300)
    assert len(reduced) == 250
    assert reduced.values.shape == (250, N_CATEGORIES)
    assert np.isnan(reduced.values[0, 0])
    assert reduced.values[0, 1] == pytest.approx(1.5)
    assert reduced.values[1, 0] == pytest.approx(5.5)
    assert all(a < b for a, b in zip(reduced.dates, reduced.dates[1:]))


def test_short_run_is_unchanged():
    snapshots = _snapshots(12)
    reduced = reduce(snapshots)
    assert reduced.dates == [s.date for s in snapshots]
    np.testing.assert_array_equal(reduced.channel(3), np.arange(12, dtype=float))


def test_last_block_may_be_shorter():
    reduced = reduce(_snapshots(7), max_points=3)
    # 3 per block: [0, 1, 2], [3, 4, 5], [6]
    np.testing.assert_allclose(reduced.channel(0), [1.0, 4.0, 6.0])
    assert reduced.dates[-1] == D(1900, 7, 1)


def test_block_date_is_truncated_mean():
    reduced = reduce(_snapshots(2), max_points=1)
    jan, feb = D(1900, 1, 1).toordinal(), D(1900, 2, 1).toordinal()
    assert reduced.dates == [D.fromordinal((jan + feb) // 2)]


def test_mean_ignores_missing_values():
    snapshots = [
        Snapshot(D(2000, 1, 1), [10] * N_CATEGORIES),
        Snapshot.invalid(D(2000, 2, 1)),
        Snapshot(D(2000, 3, 1), [20] * N_CATEGORIES),
    ]
    reduced = reduce(snapshots, max_points=1)
    assert reduced.values[0, 0] == pytest.approx(15.0)


def test_fully_invalid_channel_stays_invalid():
    snapshots = [Snapshot.invalid(add_months(D(2000, 1, 1), i)) for i in range(40)]
    reduced = reduce(snapshots, max_points=10)
    assert len(reduced) == 10
    assert np.isnan(reduced.values).all()


def test_selected_channels():
    reduced = reduce(_snapshots(5, value=lambda i: list(range(N_CATEGORIES))), channels=[12, 0])
    np.testing.assert_array_equal(reduced.channel(0), [12.0] * 5)
    np.testing.assert_array_equal(reduced.channel(1), [0.0] * 5)


def test_empty_input():
    reduced = reduce([])
    assert reduced.dates == []
    assert reduced.values.shape == (0, N_CATEGORIES)


def test_downsample_store_from_index(monthly_store):
    store = monthly_store(24)
    reduced = downsample_store(store, first_index=12, max_points=6)
    assert len(reduced) == 6
    assert reduced.values[0, 0] == pytest.approx(12.5)
