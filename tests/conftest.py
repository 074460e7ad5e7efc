import datetime

import pytest
from loguru import logger

from trade_flow_history.categories import N_CATEGORIES
from trade_flow_history.persistence import loads
from trade_flow_history.utils.dates import add_months
from trade_flow_history.utils.history import SnapshotStore


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


def make_values(value):
    return [value] * N_CATEGORIES


@pytest.fixture
def values():
    return make_values


@pytest.fixture
def store():
    """An empty store ready to record samples."""
    return loads(None, SnapshotStore())


@pytest.fixture
def monthly_store(store):
    """Build a loaded store with ``months`` real samples from ``start``."""

    def build(months, start=datetime.date(2000, 1, 1), value=lambda i: i):
        for i in range(months):
            store.record_sample(add_months(start, i), make_values(value(i)))
        return store

    return build
