from datetime import date

import pytest

from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.finance.service import FinanceService


def test_cash_in_and_out_with_default_categories(runner):
    service = FinanceService(runner)

    entry = service.record_cash_in("1.500,00", day="2025-03-01")
    out = service.record_cash_out("200", reference="Diesel", day="2025-03-02")

    assert entry.category == "Faturamento"
    assert entry.value == 1500
    assert out.category == "Geral"
    assert out.reference == "Diesel"
    assert service.balance() == 1300


@pytest.mark.parametrize("raw", ["0", "-10", "abc", None])
def test_value_must_be_positive(runner, raw):
    with pytest.raises(ValidationError):
        FinanceService(runner).record_cash_in(raw)


def test_bad_date_is_a_validation_error(runner):
    with pytest.raises(ValidationError):
        FinanceService(runner).record_cash_out("10", day="31/03/2025")


def test_balance_in_range(runner):
    service = FinanceService(runner)
    service.record_cash_in("100", day="2025-01-15")
    service.record_cash_in("50", day="2025-02-15")
    service.record_cash_out("30", day="2025-02-20")

    assert service.balance(date(2025, 2, 1), date(2025, 2, 28)) == 20
    assert service.balance(None, date(2025, 1, 31)) == 100


def test_delete_entry(runner):
    service = FinanceService(runner)
    entry = service.record_cash_out("30", day="2025-02-20")

    service.delete_entry("out", entry.id)

    assert runner.snapshot.cash_out == ()
    with pytest.raises(ValidationError):
        service.delete_entry("out", entry.id)
    with pytest.raises(ValidationError):
        service.delete_entry("ledger", "x")
