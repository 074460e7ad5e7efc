"""Monthly import/export resource history and its chart engine.

The snapshot store records one sample per simulated month, fills month gaps
with no-data snapshots, and persists itself as a versioned binary blob. The
chart side turns the history into nice axis ranges, downsampled curves and
tooltip lookups for an external renderer.
"""

from .categories import CATEGORIES, Direction, ResourceType
from .chart import Chart
from .downsample import downsample_store, reduce
from .hit_test import locate
from .history_view import HistoryView
from .persistence import SerializableData, SnapshotDataError, dumps, loads
from .recorder import SnapshotRecorder
from .scale import value_range, year_range
from .utils.history import SnapshotStore
from .utils.snapshot import Snapshot

__all__ = [
    "CATEGORIES",
    "Chart",
    "Direction",
    "HistoryView",
    "ResourceType",
    "SerializableData",
    "Snapshot",
    "SnapshotDataError",
    "SnapshotRecorder",
    "SnapshotStore",
    "downsample_store",
    "dumps",
    "loads",
    "locate",
    "reduce",
    "value_range",
    "year_range",
]
