from datetime import date
from decimal import Decimal

from ledger.aggregate import (
    category_breakdown,
    category_chart_data,
    monthly_chart_data,
    monthly_series,
    summary,
)
from ledger.models import Transaction

_next_id = iter(range(1, 10_000))


def make_transaction(**kwargs):
    base = dict(
        id=next(_next_id),
        type="expense",
        amount=Decimal("1"),
        category="Otros Gastos",
        description="x",
        date=date(2024, 1, 15),
        created_at="2024-01-15T00:00:00.000Z",
    )
    base.update(kwargs)
    if not isinstance(base["amount"], Decimal):
        base["amount"] = Decimal(str(base["amount"]))
    return Transaction(**base)


def test_summary_and_monthly_series_example():
    transactions = [
        make_transaction(type="income", amount=1000, category="Salario", date=date(2024, 1, 1)),
        make_transaction(amount=200, category="Alimentación", date=date(2024, 1, 15)),
    ]

    totals = summary(transactions)
    assert totals.total_income == 1000
    assert totals.total_expenses == 200
    assert totals.balance == 800
    assert totals.is_positive

    series = monthly_series(transactions)
    assert [(row.month, row.income, row.expenses) for row in series] == [
        ("2024-01", 1000, 200)
    ]


def test_summary_of_empty_collection():
    totals = summary([])
    assert totals.total_income == 0
    assert totals.total_expenses == 0
    assert totals.balance == 0
    assert totals.is_positive


def test_negative_balance():
    totals = summary([make_transaction(amount="10.10")])
    assert totals.balance == Decimal("-10.10")
    assert not totals.is_positive


def test_monthly_series_sorts_months_and_zero_fills():
    transactions = [
        make_transaction(amount=30, date=date(2024, 3, 2)),
        make_transaction(type="income", amount=500, category="Bonos", date=date(2023, 12, 31)),
        make_transaction(amount="0.10", date=date(2024, 3, 20)),
        make_transaction(amount="0.20", date=date(2024, 3, 21)),
    ]

    series = monthly_series(transactions)

    assert [row.month for row in series] == ["2023-12", "2024-03"]
    assert series[0].income == 500
    assert series[0].expenses == 0
    assert series[1].income == 0
    assert series[1].expenses == Decimal("30.30")


def test_category_breakdown_orders_by_total_with_stable_ties():
    transactions = [
        make_transaction(amount=50, category="Transporte"),
        make_transaction(amount=80, category="Vivienda"),
        make_transaction(amount=50, category="Salud"),
        make_transaction(amount=30, category="Transporte"),
        make_transaction(type="income", amount=999, category="Salario"),
    ]

    rows = category_breakdown(transactions)

    assert [(row.category, row.total) for row in rows] == [
        ("Transporte", 80),
        ("Vivienda", 80),
        ("Salud", 50),
    ]


def test_category_breakdown_keeps_top_eight():
    categories = [
        "Alimentación",
        "Transporte",
        "Vivienda",
        "Entretenimiento",
        "Salud",
        "Educación",
        "Compras",
        "Servicios",
        "Ropa",
        "Otros Gastos",
    ]
    transactions = [
        make_transaction(amount=index + 1, category=name)
        for index, name in enumerate(categories)
    ]

    rows = category_breakdown(transactions)

    assert len(rows) == 8
    assert [row.category for row in rows][:2] == ["Otros Gastos", "Ropa"]
    assert "Alimentación" not in [row.category for row in rows]
    totals = [row.total for row in rows]
    assert totals == sorted(totals, reverse=True)
    assert sum(totals) <= summary(transactions).total_expenses


def test_chart_payloads():
    transactions = [
        make_transaction(type="income", amount=1000, category="Salario", date=date(2024, 1, 1)),
        make_transaction(amount="200.5", category="Alimentación", date=date(2024, 9, 15)),
    ]

    assert monthly_chart_data(transactions) == {
        "months": ["2024-01", "2024-09"],
        "labels": ["ene 2024", "sept 2024"],
        "income": [1000, 0],
        "expenses": [0, 200.5],
    }
    assert category_chart_data(transactions) == {
        "labels": ["Alimentación"],
        "data": [200.5],
    }
    assert category_chart_data([]) == {"labels": [], "data": []}
