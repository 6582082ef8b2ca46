from datetime import date as dt_date
from decimal import Decimal, InvalidOperation

from .errors import ValidationError
from .models import TRANSACTION_TYPES

INCOME_CATEGORIES = (
    "Salario",
    "Freelance",
    "Inversiones",
    "Bonos",
    "Ventas",
    "Otros Ingresos",
)

EXPENSE_CATEGORIES = (
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
)


def validate_type(s: str) -> str:
    if s not in TRANSACTION_TYPES:
        raise ValidationError("type must be income or expense")
    return s


def categories_for(txn_type: str) -> tuple[str, ...]:
    if validate_type(txn_type) == "income":
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


def validate_category(txn_type: str, category: str | None) -> str:
    value = (category or "").strip()
    if not value:
        raise ValidationError("category required")
    if value not in categories_for(txn_type):
        raise ValidationError(f"category {value!r} is not valid for {txn_type}")
    return value


def validate_description(s: str | None) -> str:
    value = (s or "").strip()
    if not value:
        raise ValidationError("description required")
    return value


def parse_amount(s) -> Decimal:
    if isinstance(s, Decimal):
        d = s
    else:
        if s is None or isinstance(s, bool):
            raise ValidationError("amount required")
        if isinstance(s, str) and not s.strip():
            raise ValidationError("amount required")
        try:
            d = Decimal(str(s).strip())
        except InvalidOperation as e:
            raise ValidationError("amount invalid") from e
    if not d.is_finite():
        raise ValidationError("amount invalid")
    if d <= 0:
        raise ValidationError("amount must be greater than 0")
    return d


def parse_date(s) -> dt_date:
    if isinstance(s, dt_date):
        return s
    if not isinstance(s, str) or not s.strip():
        raise ValidationError("date required")
    try:
        return dt_date.fromisoformat(s.strip())
    except ValueError as e:
        raise ValidationError("date invalid") from e


class TypeSelector:
    """Entry-form toggle deciding which category set is offered."""

    def __init__(self, initial: str = "income") -> None:
        self.current = validate_type(initial)

    def select(self, txn_type: str) -> tuple[str, ...]:
        self.current = validate_type(txn_type)
        return self.categories

    @property
    def categories(self) -> tuple[str, ...]:
        return categories_for(self.current)
