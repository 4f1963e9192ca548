from fera_backoffice.attendance.factory import PaymentStrategyFactory
from fera_backoffice.attendance.strategies.clt_strategy import CltStrategy
from fera_backoffice.attendance.strategies.diaria_strategy import DiariaStrategy
from fera_backoffice.core.enums import PaymentModality, VirtualStatus
from fera_backoffice.employees.model import Employee


def _employee(modality: PaymentModality, value: float) -> Employee:
    return Employee(id="e1", company_id="fera", name="A", role="Roçador", payment_modality=modality, default_value=value)


def test_factory_picks_diaria_for_daily_workers():
    strategy = PaymentStrategyFactory().for_employee(_employee(PaymentModality.DIARIA, 120))

    assert isinstance(strategy, DiariaStrategy)
    assert strategy.supports_simple_toggle
    assert strategy.toggle_value(_employee(PaymentModality.DIARIA, 120), VirtualStatus.PARTIAL) == 60


def test_factory_picks_clt_for_salaried_workers():
    strategy = PaymentStrategyFactory().for_employee(_employee(PaymentModality.CLT, 3000))

    assert isinstance(strategy, CltStrategy)
    assert not strategy.supports_simple_toggle
    assert not strategy.settles_per_day


def test_point_value_is_full_reference_on_paid_days_only():
    emp = _employee(PaymentModality.CLT, 3000)
    strategy = PaymentStrategyFactory().for_employee(emp)

    assert strategy.point_value(emp, VirtualStatus.VACATION) == 3000
    assert strategy.point_value(emp, VirtualStatus.PARTIAL) == 3000
    assert strategy.point_value(emp, VirtualStatus.ABSENT) == 0
