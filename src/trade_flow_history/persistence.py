"""Versioned binary persistence of the snapshot history.

The blob starts with an int32 version followed by fixed-size records, one
per snapshot: ``year, month, day`` then one value per category in
``CATEGORIES`` order, ``-1`` meaning no data. Every field is a little-endian
int32.

Example:
    ```python
    from trade_flow_history.persistence import SerializableData

    storage = {}  # the host's save-game key/value store
    data = SerializableData(store, storage)
    data.on_load_data()
    ...
    data.on_save_data()
    ```
"""

import datetime
from pathlib import Path

import numpy as np
from loguru import logger

from .categories import N_CATEGORIES
from .utils.history import SnapshotStore
from .utils.snapshot import Snapshot

SERIALIZATION_DATA_ID = "EOCVResourceSnapshots"
CURRENT_VERSION = 1

_INT32 = np.dtype("<i4")
VERSION_BYTES = _INT32.itemsize
FIELDS_PER_SNAPSHOT = 3 + N_CATEGORIES
BYTES_PER_SNAPSHOT = FIELDS_PER_SNAPSHOT * _INT32.itemsize


class SnapshotDataError(ValueError):
    """The persisted snapshot data is missing, corrupt or of an unknown version."""


def dumps(store):
    """Serialize the store into a version 1 blob.

    Args:
        store (SnapshotStore): The history to save. Its lock is held while
            reading.

    Returns:
        bytes: The encoded blob.
    """
    with store.locked():
        rows = [
            (s.date.year, s.date.month, s.date.day) + s.to_raw() for s in store
        ]
    body = np.array(rows, dtype=_INT32).reshape(len(rows), FIELDS_PER_SNAPSHOT)
    return np.array([CURRENT_VERSION], dtype=_INT32).tobytes() + body.tobytes()


def loads(data, store=None):
    """Restore a store from a blob.

    ``None`` means nothing was saved before; the result is an empty store
    marked loaded. On failure the store stays not loaded and may already hold
    some of the records, so callers must not use its content.

    Args:
        data (bytes | None): The blob produced by ``dumps``.
        store (SnapshotStore | None): Store to fill. A new one is created if
            ``None``. It is expected to be freshly initialized.

    Returns:
        SnapshotStore: The loaded store.

    Raises:
        SnapshotDataError: If the blob is too short, of an unknown version,
            has a body that does not divide evenly into records, or holds an
            invalid date or value.
    """
    if store is None:
        store = SnapshotStore()
    with store.locked():
        store.loaded = False
        if data is None:
            store.loaded = True
            return store

        if len(data) < VERSION_BYTES:
            raise SnapshotDataError("Version is missing from the snapshot data.")

        version = int(np.frombuffer(data, dtype=_INT32, count=1)[0])
        if version != CURRENT_VERSION:
            raise SnapshotDataError(f"Snapshot data version [{version}] is unexpected.")

        data_bytes = len(data) - VERSION_BYTES
        if data_bytes % BYTES_PER_SNAPSHOT != 0:
            raise SnapshotDataError(
                f"The number of snapshot data bytes [{data_bytes}] does not divide evenly "
                f"by the bytes per snapshot [{BYTES_PER_SNAPSHOT}]."
            )

        records = []
        if data_bytes:
            records = np.frombuffer(data, dtype=_INT32, offset=VERSION_BYTES)
            records = records.reshape(-1, FIELDS_PER_SNAPSHOT).tolist()
        for i, record in enumerate(records):
            year, month, day = record[:3]
            try:
                snapshot = Snapshot.from_raw(datetime.date(year, month, day), record[3:])
            except ValueError as err:
                raise SnapshotDataError(f"Snapshot record [{i}] is invalid: {err}") from err
            try:
                store.add(snapshot)
            except AssertionError as err:
                raise SnapshotDataError(f"Snapshot record [{i}] is out of order: {err}") from err

        store.loaded = True
    return store


def save_to_file(store, path):
    """Write the store blob to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps(store))


def load_from_file(path, store=None):
    """Read a store from ``path``. A missing file is treated as no prior data."""
    path = Path(path)
    data = path.read_bytes() if path.exists() else None
    return loads(data, store)


class SerializableData:
    """Save-game hooks binding a store to the host key/value storage.

    Both hooks run on the UI thread while the simulation may be recording
    samples, so they hold the store lock for their whole duration. Failures
    are logged and leave the history inert; nothing is raised to the host.

    Args:
        store (SnapshotStore): The session history.
        storage (MutableMapping[str, bytes]): The host save-game storage.
    """

    def __init__(self, store, storage):
        self.store = store
        self.storage = storage

    def on_load_data(self):
        """Called when a game is loaded.

        Returns:
            bool: ``True`` if the history is loaded and accepts new samples.
        """
        with self.store.locked():
            self.store.initialize()
            try:
                loads(self.storage.get(SERIALIZATION_DATA_ID), self.store)
            except SnapshotDataError as err:
                logger.error(str(err))
            except Exception:
                logger.exception("Unexpected error while loading resource snapshots")
            if not self.store.loaded:
                logger.warning(
                    "Resource history is disabled for this session, "
                    f"{len(self.store)} partially read snapshots are ignored."
                )
                self.store.deinitialize()
            return self.store.loaded

    def on_save_data(self):
        """Called when a game is saved, including autosaves.

        Returns:
            bool: ``True`` if the blob was written.
        """
        try:
            with self.store.locked():
                if not self.store.loaded:
                    # keep whatever blob the save already has
                    logger.warning("Resource history was not loaded, snapshots are not saved.")
                    return False
                self.storage[SERIALIZATION_DATA_ID] = dumps(self.store)
            return True
        except Exception:
            logger.exception("Unexpected error while saving resource snapshots")
            return False
