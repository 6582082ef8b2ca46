from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ledger.errors import FormatError
from ledger.models import Transaction, amount_to_json, iso_timestamp


def raw(**overrides):
    record = {
        "id": 1704067200000,
        "type": "income",
        "amount": 1000,
        "category": "Salario",
        "description": "Sueldo enero",
        "date": "2024-01-01",
        "createdAt": "2024-01-01T00:00:00.000Z",
    }
    record.update(overrides)
    return record


def test_from_dict_parses_browser_records():
    txn = Transaction.from_dict(raw(amount=12.5, id="42"))

    assert txn.id == 42
    assert txn.amount == Decimal("12.5")
    assert txn.date == date(2024, 1, 1)
    assert txn.is_income and not txn.is_expense
    assert txn.month_key == "2024-01"


def test_to_dict_round_trip():
    record = raw()
    assert Transaction.from_dict(record).to_dict() == record


def test_missing_created_at_defaults_to_empty():
    record = raw()
    del record["createdAt"]
    assert Transaction.from_dict(record).created_at == ""


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"id": None}, "id invalid"),
        ({"id": True}, "id invalid"),
        ({"type": "transfer"}, "income or expense"),
        ({"amount": "abc"}, "amount invalid"),
        ({"amount": 0}, "greater than 0"),
        ({"amount": None}, "amount invalid"),
        ({"category": ""}, "category required"),
        ({"description": None}, "description required"),
        ({"date": "2024-13-01"}, "date invalid"),
        ({"date": None}, "date required"),
    ],
)
def test_from_dict_rejects_malformed_records(overrides, message):
    with pytest.raises(FormatError, match=message):
        Transaction.from_dict(raw(**overrides))


def test_from_dict_requires_object():
    with pytest.raises(FormatError, match="must be an object"):
        Transaction.from_dict(["not", "a", "record"])


def test_amount_to_json():
    assert amount_to_json(Decimal("1000.00")) == 1000
    assert isinstance(amount_to_json(Decimal("1000.00")), int)
    assert amount_to_json(Decimal("0.5")) == 0.5


def test_iso_timestamp_uses_utc_and_milliseconds():
    moment = datetime(2024, 1, 15, 14, 30, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert iso_timestamp(moment) == "2024-01-15T12:30:05.123Z"
