"""Keep the web app's module-level SQLite file out of the working tree.

``ledger.main`` opens its store at import time using ``LEDGER_DATA_DIR``, so
the variable is set before any test module is collected. Autosave is
disabled so no background task is started.
"""

import os
import tempfile

import pytest

from ledger.storage import MemorySnapshotStorage
from ledger.store import TransactionStore


def pytest_configure(config):
    os.environ.setdefault("LEDGER_DATA_DIR", tempfile.mkdtemp(prefix="ledger-tests-"))
    os.environ.setdefault("LEDGER_AUTOSAVE_SECONDS", "0")


@pytest.fixture
def storage():
    return MemorySnapshotStorage()


@pytest.fixture
def store(storage):
    return TransactionStore(storage)
