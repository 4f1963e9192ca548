import pytest

from fera_backoffice.core.enums import EmployeeStatus, PaymentModality
from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.employees.service import EmployeeService


def test_list_is_sorted_and_can_hide_inactive(runner):
    service = EmployeeService(runner)

    names = [e.name for e in service.list_employees()]
    active = [e.name for e in service.list_employees(include_inactive=False)]

    assert names == ["Ana Souza", "Bruno Lima", "Carlos Reis"]
    assert "Carlos Reis" not in active


def test_create_employee_defaults(runner):
    service = EmployeeService(runner)

    created = service.save_employee({"name": " Dora ", "role": "Varredora", "defaultValue": "95,50"})

    assert created.id
    assert created.name == "Dora"
    assert created.company_id == "fera"
    assert created.payment_modality == PaymentModality.DIARIA
    assert created.default_value == 95.5
    assert created.status == EmployeeStatus.ACTIVE


def test_update_keeps_value_when_input_is_garbage(runner):
    service = EmployeeService(runner)

    updated = service.save_employee({"id": "e-clt", "name": "Bruno Lima", "role": "Motorista", "paymentModality": "clt", "defaultValue": "abc"})

    assert updated.default_value == 3000
    assert updated.payment_modality == PaymentModality.CLT


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "role": "Varredora"},
        {"name": "Eva", "role": " "},
        {"name": "Eva", "role": "Varredora", "paymentModality": "MENSAL"},
        {"name": "Eva", "role": "Varredora", "shiftStart": "7h"},
        {"id": "fantasma", "name": "Eva", "role": "Varredora"},
    ],
)
def test_invalid_forms_are_rejected(runner, payload):
    with pytest.raises(ValidationError):
        EmployeeService(runner).save_employee(payload)


def test_toggle_status_is_a_partial_update(runner, store):
    service = EmployeeService(runner)

    inactive = service.toggle_employee_status("e-diaria")
    assert inactive.status == EmployeeStatus.INACTIVE
    assert inactive.default_value == 100

    active = service.toggle_employee_status("e-diaria")
    assert active.is_active
