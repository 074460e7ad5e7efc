import datetime


class SnapshotRecorder:
    """Drive the snapshot store from the simulation threading hooks.

    The simulation calls ``on_after_simulation_tick`` many times per game
    day, even when paused, so at least one call happens on day one of every
    month. The game date is only meaningful after the first ``on_update``.

    Args:
        store (SnapshotStore): The session history.
        clock (Callable[[], datetime.date | datetime.datetime]): Returns the
            current simulation date.
        data_source (Callable[[], Sequence[int | None]]): Returns the
            current month totals per category. Only called when a sample is
            recorded.
    """

    def __init__(self, store, clock, data_source):
        self.store = store
        self.clock = clock
        self.data_source = data_source
        self.game_date_initialized = False

    def on_created(self):
        self.game_date_initialized = False

    def on_update(self):
        self.game_date_initialized = True

    def on_after_simulation_tick(self):
        """Record the current date if the game date is available.

        Returns:
            bool: ``True`` if the history changed.
        """
        if not self.game_date_initialized:
            return False
        current = self.clock()
        if isinstance(current, datetime.datetime):
            current = current.date()
        return self.store.record_sample(current, self.data_source)
