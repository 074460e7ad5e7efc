"""Simulated session recording a resource history.

This example runs a simulation thread that advances the game date one day
per tick and records a snapshot on day one of every month. The attached view
rebuilds its chart on the simulation thread, inside the store lock, each time
the history changes. The clock jumps forward once to show gap filling. At
the end, the history is saved for later rendering.

Args:
    None: This module is intended to be executed directly.

Returns:
    None: Prints chart summaries and saves the history to disk.
"""

import sys

sys.path.append("./src")

import datetime
import threading

import numpy as np

from trade_flow_history import HistoryView, SerializableData, SnapshotRecorder, SnapshotStore
from trade_flow_history.categories import N_CATEGORIES
from trade_flow_history.persistence import save_to_file

rng = np.random.default_rng(42)
game_date = [datetime.date(2000, 1, 1)]


def clock():
    return game_date[0]


# Running totals of the current month per category
def data_source():
    return [int(v) for v in rng.integers(0, 5000, size=N_CATEGORIES)]


store = SnapshotStore()
storage = {}
SerializableData(store, storage).on_load_data()

view = HistoryView(store).attach()
recorder = SnapshotRecorder(store, clock, data_source)
recorder.on_update()


def simulation():
    for day in range(365 * 30):
        if day == 365 * 10:
            # a date changer moves the clock three years ahead
            game_date[0] += datetime.timedelta(days=365 * 3)
        recorder.on_after_simulation_tick()
        game_date[0] += datetime.timedelta(days=1)


thread = threading.Thread(target=simulation, name="simulation")
thread.start()
thread.join()

chart = view.update("export", "last_25")
print(f"{len(store)} snapshots, {len(chart.dates)} plotted points, options {view.options}")
print("Value gridlines :", [label for _, label in chart.value_gridlines()])
print("Year gridlines  :", [label for _, label in chart.year_gridlines()])

SerializableData(store, storage).on_save_data()
save_to_file(store, "render_logs/example.snapshots")
