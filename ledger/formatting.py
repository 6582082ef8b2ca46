"""Display helpers shared by templates and chart payloads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

MONTH_ABBREVIATIONS = (
    "ene",
    "feb",
    "mar",
    "abr",
    "may",
    "jun",
    "jul",
    "ago",
    "sept",
    "oct",
    "nov",
    "dic",
)

TYPE_LABELS = {"income": "Ingreso", "expense": "Gasto"}


def format_currency(amount: Decimal | int | float) -> str:
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_signed_amount(txn_type: str, amount: Decimal) -> str:
    prefix = "-" if txn_type == "expense" else "+"
    return prefix + format_currency(amount)


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_month(month_key: str) -> str:
    """Render a ``YYYY-MM`` key as a short Spanish label, e.g. ``ene 2024``."""

    year, month = month_key.split("-")
    return f"{MONTH_ABBREVIATIONS[int(month) - 1]} {year}"


def type_label(txn_type: str) -> str:
    return TYPE_LABELS.get(txn_type, txn_type)
