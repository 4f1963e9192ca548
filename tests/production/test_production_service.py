from datetime import date

import pytest

from fera_backoffice.company.model import CompanyConfig
from fera_backoffice.company.service import CompanyService
from fera_backoffice.core.enums import AreaStatus, ServiceType
from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.core.result import Err, Ok
from fera_backoffice.production.model import Area
from fera_backoffice.production.service import ProductionService, build_service, finish


def _area(**kw):
    return Area(id="a1", company_id="fera", name="Centro", start_date="2025-01-02", start_reference="Praça", **kw)


def test_finish_is_one_way():
    done = finish(_area(), "Rua 7", date(2025, 2, 1))

    assert isinstance(done, Ok)
    assert done.value.status == AreaStatus.FINISHED
    assert done.value.end_date == "2025-02-01"
    assert done.value.end_reference == "Rua 7"
    assert isinstance(finish(done.value, "", date(2025, 2, 2)), Err)


def test_build_service_snapshots_the_rate():
    config = CompanyConfig(company_id="fera")

    result = build_service(_area(), ServiceType.BOCA_DE_LOBO, "3", "2025-01-10", config)

    assert result.value.unit_value == 45.0
    assert result.value.total_value == 135.0


@pytest.mark.parametrize("qty", ["0", "-2", "abc", None])
def test_build_service_rejects_bad_quantity(qty):
    assert isinstance(build_service(_area(), ServiceType.BOCA_DE_LOBO, qty, "2025-01-10", CompanyConfig("fera")), Err)


def test_build_service_refuses_finished_area():
    closed = _area(status=AreaStatus.FINISHED, end_date="2025-01-31")

    assert isinstance(build_service(closed, ServiceType.BOCA_DE_LOBO, "1", "2025-02-01", CompanyConfig("fera")), Err)


def test_create_area_requires_start_reference(runner):
    service = ProductionService(runner)

    with pytest.raises(ValidationError):
        service.create_area({"name": "Bairro Novo", "startReference": ""})

    created = service.create_area({"name": "Bairro Novo", "startReference": "Escola", "startDate": "2025-03-01"})
    assert created.id
    assert created.status == AreaStatus.EXECUTING
    assert runner.snapshot.area(created.id).name == "Bairro Novo"


def test_rate_change_does_not_touch_existing_services(runner):
    production = ProductionService(runner)
    first = production.add_service("a-centro", ServiceType.CAPINA_MANUAL_M2.value, "100", "2025-01-05")

    CompanyService(runner).update_service_rates({ServiceType.CAPINA_MANUAL_M2.value: "3,00"})
    second = production.add_service("a-centro", ServiceType.CAPINA_MANUAL_M2.value, "100", "2025-01-06")

    area = runner.snapshot.area("a-centro")
    values = sorted(s.unit_value for s in area.services)
    assert first.unit_value == 2.5
    assert second.unit_value == 3.0
    assert values == [2.5, 3.0]


def test_add_service_rejects_unknown_type_and_bad_date(runner):
    production = ProductionService(runner)

    with pytest.raises(ValidationError):
        production.add_service("a-centro", "Pintura de muro", "1", "2025-01-05")
    with pytest.raises(ValidationError):
        production.add_service("a-centro", ServiceType.BOCA_DE_LOBO.value, "1", "05/01/2025")
    with pytest.raises(ValidationError):
        production.add_service("nao-existe", ServiceType.BOCA_DE_LOBO.value, "1", "2025-01-05")


def test_finish_area_blocks_further_changes(runner):
    production = ProductionService(runner)
    line = production.add_service("a-centro", ServiceType.BOCA_DE_LOBO.value, "2", "2025-01-05")

    finished = production.finish_area("a-centro", "Rua 9", day=date(2025, 1, 31))

    assert finished.is_finished
    assert len(finished.services) == 1
    with pytest.raises(ValidationError):
        production.finish_area("a-centro")
    with pytest.raises(ValidationError):
        production.add_service("a-centro", ServiceType.BOCA_DE_LOBO.value, "1", "2025-02-01")
    with pytest.raises(ValidationError):
        production.delete_service("a-centro", line.id)


def test_delete_service(runner):
    production = ProductionService(runner)
    line = production.add_service("a-centro", ServiceType.BOCA_DE_LOBO.value, "2", "2025-01-05")

    production.delete_service("a-centro", line.id)

    assert runner.snapshot.area("a-centro").services == ()
    with pytest.raises(ValidationError):
        production.delete_service("a-centro", line.id)
