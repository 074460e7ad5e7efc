from loguru import logger

from .categories import Direction
from .chart import Chart
from .config import ViewConfig
from .downsample import reduce

MONTHS_PER_YEAR = 12
# oil is very dark in the game palette, so it is lightened here
RESOURCE_COLORS = {
    "goods": "#d0a040",
    "forestry": "#3c8c3c",
    "farming": "#a0c850",
    "ore": "#8c6e5a",
    "oil": "#5a5a78",
    "mail": "#c8c8c8",
    "fish": "#3c8cc8",
}
# window name -> years of history kept, None for everything
HISTORY_WINDOWS = {
    "all": None,
    "last_10": 10,
    "last_25": 25,
    "last_50": 50,
}


def history_options(count):
    """Return the history windows worth offering for ``count`` snapshots.

    Nothing is offered below ten years of history; each longer window
    appears once the history covers it.
    """
    if count < MONTHS_PER_YEAR * 10:
        return []
    return [
        name
        for name, years in HISTORY_WINDOWS.items()
        if years is None or count >= MONTHS_PER_YEAR * years
    ]


def first_index(count, window):
    """Index of the first snapshot shown for a history window."""
    try:
        years = HISTORY_WINDOWS[window]
    except KeyError as err:
        raise ValueError(
            f"History window {window} does not exist ... Check the available windows : "
            f"{list(HISTORY_WINDOWS)}"
        ) from err
    if years is None:
        return 0
    return max(count - MONTHS_PER_YEAR * years, 0)


class HistoryView:
    """Build the history chart of one direction from the snapshot store.

    Registered as a store listener, the view rebuilds its chart whenever the
    history changes, for the direction and window last requested.

    Args:
        store (SnapshotStore): The session history.
        config (ViewConfig | None): Enabled categories and chart tunables.
        texts (dict[str, str] | None): Tooltip prefix per resource name,
            defaults to the capitalized resource name.
    """

    def __init__(self, store, config=None, texts=None):
        self.store = store
        self.config = config or ViewConfig()
        self.texts = texts or {}
        self.chart = Chart(tooltip_distance=self.config.tooltip_distance)
        self.direction = Direction.IMPORT
        self.window = "all"
        self.options = []

    def attach(self):
        self.store.add_listener(self.on_history_changed)
        return self

    def detach(self):
        self.store.remove_listener(self.on_history_changed)

    def on_history_changed(self, store):
        self.update(self.direction, self.window)

    def update(self, direction=None, window=None):
        """Rebuild the chart.

        Args:
            direction (Direction | str | None): Direction shown, unchanged if
                ``None``.
            window (str | None): Key of ``HISTORY_WINDOWS``, unchanged if
                ``None``.

        Returns:
            Chart: The rebuilt chart, empty when there is no history or the
            rebuild failed.
        """
        with self.store.locked():
            # the listener rebuilds from the simulation thread, so the chart is
            # only touched while holding the store lock
            if direction is not None:
                self.direction = Direction(direction)
            if window is not None:
                self.window = window
            try:
                self.chart.clear()
                count = len(self.store)
                self.options = history_options(count)
                if count == 0:
                    return self.chart

                enabled = self.config.enabled(self.direction)
                reduced = reduce(
                    self.store[first_index(count, self.window):],
                    channels=[i for i, _ in enabled],
                    max_points=self.config.max_points,
                )
                self.chart.set_dates(reduced.dates)
                for column, (_, category) in enumerate(enabled):
                    self.chart.add_curve(
                        category.label,
                        self.texts.get(category.resource.value, category.label),
                        reduced.channel(column),
                        width=self.config.curve_width,
                        color=RESOURCE_COLORS[category.resource.value],
                    )
            except Exception:
                logger.exception(f"Failed to update the {self.direction.value} history chart")
                self.chart.clear()
            return self.chart
