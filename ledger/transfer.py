"""Export documents and import parsing."""

from __future__ import annotations

import csv
import json
from datetime import date
from io import StringIO
from typing import Iterable, List

from .aggregate import summary
from .errors import FormatError
from .models import Transaction, amount_to_json, iso_timestamp
from .queries import sort_for_display


def export_filename(today: date | None = None) -> str:
    current = today or date.today()
    return f"finanzas_{current.isoformat()}.json"


def build_export(transactions: Iterable[Transaction], *, now: str | None = None) -> dict:
    records = list(transactions)
    totals = summary(records)
    return {
        "transactions": [txn.to_dict() for txn in records],
        "summary": {
            "totalTransactions": len(records),
            "totalIncome": amount_to_json(totals.total_income),
            "totalExpenses": amount_to_json(totals.total_expenses),
            "exportDate": now or iso_timestamp(),
        },
    }


def export_json(transactions: Iterable[Transaction], *, now: str | None = None) -> str:
    return json.dumps(build_export(transactions, now=now), indent=2, ensure_ascii=False)


def parse_import(text: str | bytes) -> List[dict]:
    """Return the raw ``transactions`` array of an exported file.

    Anything that is not a JSON object with a ``transactions`` list raises
    ``FormatError``; records themselves are validated by the store.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FormatError("file is not UTF-8 text") from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise FormatError(f"file is not valid JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("transactions"), list):
        raise FormatError("file does not contain a transactions list")
    return data["transactions"]


def export_csv(transactions: Iterable[Transaction]) -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["id", "date", "type", "amount", "category", "description"])
    for txn in sort_for_display(transactions):
        writer.writerow(
            [
                txn.id,
                txn.date.isoformat(),
                txn.type,
                f"{txn.amount:.2f}",
                txn.category,
                txn.description,
            ]
        )
    return "\ufeff" + output.getvalue()
