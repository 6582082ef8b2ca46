"""Totals and chart series computed from the transaction collection."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .formatting import format_month
from .models import Transaction, amount_to_json

TOP_CATEGORIES = 8


@dataclass(frozen=True)
class Summary:
    total_income: Decimal
    total_expenses: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0


@dataclass(frozen=True)
class MonthlyTotals:
    month: str
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal


def summary(transactions: Iterable[Transaction]) -> Summary:
    income = Decimal(0)
    expenses = Decimal(0)
    for txn in transactions:
        if txn.is_income:
            income += txn.amount
        elif txn.is_expense:
            expenses += txn.amount
    return Summary(total_income=income, total_expenses=expenses)


def monthly_series(transactions: Iterable[Transaction]) -> list[MonthlyTotals]:
    buckets: dict[str, dict[str, Decimal]] = {}
    for txn in transactions:
        bucket = buckets.setdefault(
            txn.month_key, {"income": Decimal(0), "expenses": Decimal(0)}
        )
        if txn.is_income:
            bucket["income"] += txn.amount
        else:
            bucket["expenses"] += txn.amount
    return [
        MonthlyTotals(month=month, income=values["income"], expenses=values["expenses"])
        for month, values in sorted(buckets.items())
    ]


def category_breakdown(
    transactions: Iterable[Transaction], limit: int = TOP_CATEGORIES
) -> list[CategoryTotal]:
    """Expense totals per category, largest first, capped at ``limit`` rows.

    Categories with equal totals keep the order in which they were first
    seen.
    """

    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if not txn.is_expense:
            continue
        totals[txn.category] = totals.get(txn.category, Decimal(0)) + txn.amount
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=name, total=total) for name, total in ranked[:limit]]


def monthly_chart_data(transactions: Iterable[Transaction]) -> dict:
    series = monthly_series(transactions)
    return {
        "months": [row.month for row in series],
        "labels": [format_month(row.month) for row in series],
        "income": [amount_to_json(row.income) for row in series],
        "expenses": [amount_to_json(row.expenses) for row in series],
    }


def category_chart_data(transactions: Iterable[Transaction]) -> dict:
    rows = category_breakdown(transactions)
    return {
        "labels": [row.category for row in rows],
        "data": [amount_to_json(row.total) for row in rows],
    }
