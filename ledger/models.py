from dataclasses import dataclass
from datetime import date as dt_date, datetime, timezone
from decimal import Decimal, InvalidOperation

from .errors import FormatError

TRANSACTION_TYPES = ("income", "expense")


def amount_to_json(amount: Decimal) -> int | float:
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


@dataclass(frozen=True)
class Transaction:
    id: int
    type: str
    amount: Decimal
    category: str
    description: str
    date: dt_date
    created_at: str

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @property
    def month_key(self) -> str:
        return self.date.isoformat()[:7]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "amount": amount_to_json(self.amount),
            "category": self.category,
            "description": self.description,
            "date": self.date.isoformat(),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw) -> "Transaction":
        """Build a transaction from its JSON shape.

        Raises ``FormatError`` when a field is missing or cannot be parsed;
        the error message names the offending field.
        """

        if not isinstance(raw, dict):
            raise FormatError("transaction must be an object")
        return cls(
            id=_parse_id(raw.get("id")),
            type=_parse_type(raw.get("type")),
            amount=_parse_amount(raw.get("amount")),
            category=_parse_text(raw.get("category"), "category"),
            description=_parse_text(raw.get("description"), "description"),
            date=_parse_date(raw.get("date")),
            created_at=str(raw.get("createdAt") or ""),
        )


def _parse_id(value) -> int:
    if isinstance(value, bool):
        raise FormatError("transaction id invalid")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise FormatError("transaction id invalid")


def _parse_type(value) -> str:
    if value not in TRANSACTION_TYPES:
        raise FormatError("transaction type must be income or expense")
    return value


def _parse_amount(value) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise FormatError("transaction amount invalid")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise FormatError("transaction amount invalid") from exc
    if not amount.is_finite() or amount <= 0:
        raise FormatError("transaction amount must be greater than 0")
    return amount


def _parse_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise FormatError(f"transaction {field} required")
    return value


def _parse_date(value) -> dt_date:
    if not isinstance(value, str):
        raise FormatError("transaction date required")
    try:
        return dt_date.fromisoformat(value)
    except ValueError as exc:
        raise FormatError("transaction date invalid") from exc


def iso_timestamp(moment: datetime | None = None) -> str:
    current = moment or datetime.now(timezone.utc)
    return current.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
