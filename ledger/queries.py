from __future__ import annotations

from typing import Iterable

from .models import Transaction

ALL = "all"


def sort_for_display(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest date first; same-day records keep their relative order."""

    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


def _is_open(value: str | None) -> bool:
    return value is None or value == "" or value == ALL


def filter_transactions(
    transactions: Iterable[Transaction],
    *,
    txn_type: str | None = None,
    category: str | None = None,
    month_prefix: str | None = None,
) -> list[Transaction]:
    selected = list(transactions)
    if not _is_open(txn_type):
        selected = [txn for txn in selected if txn.type == txn_type]
    if not _is_open(category):
        selected = [txn for txn in selected if txn.category == category]
    if not _is_open(month_prefix):
        selected = [txn for txn in selected if txn.date.isoformat().startswith(month_prefix)]
    return sort_for_display(selected)


def search_transactions(transactions: Iterable[Transaction], term: str | None) -> list[Transaction]:
    needle = (term or "").lower()
    if not needle:
        return sort_for_display(transactions)
    return sort_for_display(
        txn
        for txn in transactions
        if needle in txn.description.lower() or needle in txn.category.lower()
    )


def filter_categories(transactions: Iterable[Transaction]) -> list[str]:
    return sorted({txn.category for txn in transactions})


def count_label(shown: int, total: int) -> str:
    if shown == total:
        return f"{total} transacciones"
    return f"{shown} de {total} transacciones"
