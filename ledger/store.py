"""In-memory transaction collection kept in sync with a snapshot storage."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from .errors import FormatError
from .logic import parse_amount, parse_date, validate_category, validate_description, validate_type
from .models import Transaction, iso_timestamp
from .storage import SnapshotStorage

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TransactionStore:
    """Owns the ordered list of transactions.

    Every successful mutation writes a full snapshot through ``storage``.
    Rejected operations raise before touching the list, so the collection
    always stays in its last valid state.
    """

    def __init__(
        self,
        storage: SnapshotStorage,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.storage = storage
        self.clock = clock
        self._transactions: list[Transaction] = []

    def __len__(self) -> int:
        return len(self._transactions)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def get(self, txn_id: int) -> Transaction | None:
        for txn in self._transactions:
            if txn.id == txn_id:
                return txn
        return None

    def load(self) -> None:
        self._transactions = list(self.storage.load())
        logger.info("ledger loaded with %d transactions", len(self._transactions))

    def _persist(self) -> None:
        self.storage.save(self._transactions)

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        highest = max((txn.id for txn in self._transactions), default=0)
        return candidate if candidate > highest else highest + 1

    def add(
        self,
        *,
        txn_type: str,
        amount,
        category: str | None,
        description: str | None,
        date,
    ) -> Transaction:
        valid_type = validate_type(txn_type)
        valid_amount = parse_amount(amount)
        valid_category = validate_category(valid_type, category)
        valid_description = validate_description(description)
        valid_date = parse_date(date)

        now = self.clock()
        txn = Transaction(
            id=self._next_id(now),
            type=valid_type,
            amount=valid_amount,
            category=valid_category,
            description=valid_description,
            date=valid_date,
            created_at=iso_timestamp(now),
        )
        self._transactions.append(txn)
        self._persist()
        logger.info("added %s %s (%s) id=%d", txn.type, txn.amount, txn.category, txn.id)
        return txn

    def delete_by_id(self, txn_id: int) -> bool:
        remaining = [txn for txn in self._transactions if txn.id != txn_id]
        if len(remaining) == len(self._transactions):
            logger.debug("delete ignored, no transaction with id=%d", txn_id)
            return False
        self._transactions = remaining
        self._persist()
        logger.info("deleted transaction id=%d", txn_id)
        return True

    def replace_all(self, records: Sequence) -> None:
        """Replace the whole collection with imported records.

        ``records`` may hold ``Transaction`` instances or their JSON dicts.
        Duplicate ids are rejected rather than merged.
        """

        if isinstance(records, (str, bytes, dict)) or not isinstance(records, Sequence):
            raise FormatError("transactions must be a list")
        parsed = [
            record if isinstance(record, Transaction) else Transaction.from_dict(record)
            for record in records
        ]
        _reject_duplicate_ids(parsed)
        self._transactions = parsed
        self._persist()
        logger.info("replaced ledger with %d imported transactions", len(parsed))

    def clear(self) -> None:
        self._transactions = []
        self._persist()
        logger.info("cleared all transactions")

    def autosave(self) -> bool:
        if not self._transactions:
            return False
        self._persist()
        logger.debug("autosaved %d transactions", len(self._transactions))
        return True


def _reject_duplicate_ids(transactions: Iterable[Transaction]) -> None:
    seen: set[int] = set()
    for txn in transactions:
        if txn.id in seen:
            raise FormatError(f"duplicate transaction id {txn.id}")
        seen.add(txn.id)
