"""Snapshot persistence for the transaction collection.

A snapshot is one JSON document stored under a single key::

    {"transactions": [...], "lastUpdated": "<ISO timestamp>", "version": "1.0"}

Backends only move that document around; ``encode_snapshot`` and
``decode_snapshot`` own the format. Loading never raises on bad content: a
malformed snapshot is logged and read as an empty collection.
"""

from __future__ import annotations

import json
import logging
from typing import Iterable, Protocol

from .db import read_snapshot, write_snapshot
from .errors import FormatError
from .models import Transaction, iso_timestamp

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


class SnapshotStorage(Protocol):
    def load(self) -> list[Transaction]: ...

    def save(self, transactions: Iterable[Transaction]) -> None: ...


def encode_snapshot(transactions: Iterable[Transaction], *, now: str | None = None) -> str:
    return json.dumps(
        {
            "transactions": [txn.to_dict() for txn in transactions],
            "lastUpdated": now or iso_timestamp(),
            "version": SNAPSHOT_VERSION,
        },
        ensure_ascii=False,
    )


def decode_snapshot(raw: str | None) -> list[Transaction]:
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        logger.exception("snapshot is not valid JSON; starting with an empty ledger")
        return []
    if not isinstance(data, dict):
        logger.warning("snapshot top level is %s, expected object", type(data).__name__)
        return []
    records = data.get("transactions") or []
    if not isinstance(records, list):
        logger.warning("snapshot transactions field is not a list")
        return []
    try:
        return [Transaction.from_dict(record) for record in records]
    except FormatError as exc:
        logger.warning("snapshot contains an invalid transaction: %s", exc)
        return []


class SqliteSnapshotStorage:
    def __init__(self, db_path, key: str = "financeTransactions") -> None:
        self.db_path = db_path
        self.key = key

    def load(self) -> list[Transaction]:
        transactions = decode_snapshot(read_snapshot(self.db_path, self.key))
        logger.debug("loaded %d transactions from %s", len(transactions), self.db_path)
        return transactions

    def save(self, transactions: Iterable[Transaction]) -> None:
        write_snapshot(self.db_path, self.key, encode_snapshot(transactions))


class MemorySnapshotStorage:
    """Dictionary-backed storage, used by tests and embedded callers."""

    def __init__(self, key: str = "financeTransactions", data: dict[str, str] | None = None) -> None:
        self.key = key
        self.data = data if data is not None else {}
        self.saves = 0

    def load(self) -> list[Transaction]:
        return decode_snapshot(self.data.get(self.key))

    def save(self, transactions: Iterable[Transaction]) -> None:
        self.data[self.key] = encode_snapshot(transactions)
        self.saves += 1
