from datetime import date, time

import pytest

from fera_backoffice.attendance.model import EDIT_FIELDS, ActionKind, AttendanceRecord, PointForm
from fera_backoffice.attendance.service import AttendanceService
from fera_backoffice.core.enums import Collection, StoredStatus, VirtualStatus
from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.payroll.service import PayrollService
from fera_backoffice.store.memory_store import InMemoryRecordStore
from fera_backoffice.sync.runner import SyncRunner

DAY = date(2025, 3, 10)


def test_toggle_walks_the_cycle_through_the_store(runner, store):
    service = AttendanceService(runner)

    created = service.toggle("e-diaria", DAY)
    assert created.kind == ActionKind.CREATE
    assert created.record.id

    partial = service.toggle("e-diaria", DAY)
    assert partial.record.status == StoredStatus.PARTIAL
    assert partial.record.value == 50
    assert partial.record.id == created.record.id

    service.toggle("e-diaria", DAY)
    removed = service.toggle("e-diaria", DAY)

    assert removed.kind == ActionKind.DELETE
    assert runner.snapshot.record_for("e-diaria", DAY) is None
    assert store.fetch_company_snapshot("fera", False)["attendanceRecords"] == []


def test_toggle_refuses_clt_and_inactive(runner):
    service = AttendanceService(runner)

    with pytest.raises(ValidationError):
        service.toggle("e-clt", DAY)
    with pytest.raises(ValidationError):
        service.toggle("e-inativo", DAY)


def test_toggle_unknown_employee(runner):
    with pytest.raises(ValidationError):
        AttendanceService(runner).toggle("ninguem", DAY)


def test_point_for_clt_stores_clock_and_reference_value(runner):
    service = AttendanceService(runner)
    form = PointForm(status=VirtualStatus.PRESENT, clock_in=time(7, 0), clock_out=time(16, 0))

    saved = service.save_point("e-clt", DAY, form)

    assert saved.value == 3000
    assert saved.clock_in == time(7, 0)
    assert runner.snapshot.record_for("e-clt", DAY).clock_out == time(16, 0)


def test_point_rewrite_keeps_the_same_row(runner):
    service = AttendanceService(runner)
    first = service.save_point("e-clt", DAY, PointForm(status=VirtualStatus.PRESENT))

    second = service.save_point("e-clt", DAY, PointForm(status=VirtualStatus.VACATION, observation="julho"))

    assert second.id == first.id
    assert second.virtual_status == VirtualStatus.VACATION
    assert len(runner.snapshot.attendance) == 1


def test_point_for_inactive_employee_without_record_is_rejected(runner):
    with pytest.raises(ValidationError):
        AttendanceService(runner).save_point("e-inativo", DAY, PointForm(status=VirtualStatus.PRESENT))


def test_edit_values_and_payment_toggle(runner):
    service = AttendanceService(runner)
    record = service.toggle("e-diaria", DAY).record

    edited = service.edit_values(record.id, "110", "5", "x", "chegou tarde")
    assert (edited.value, edited.discount_value, edited.bonus_value) == (110, 5, 0)
    assert edited.observation == "chegou tarde"

    paid = service.toggle_payment(record.id)
    assert paid.is_paid
    assert runner.snapshot.attendance_record(record.id).is_paid


def test_edit_unknown_record(runner):
    with pytest.raises(ValidationError):
        AttendanceService(runner).edit_values("nada", "1", "0", "0")


def test_summary_and_statement_read_the_snapshot(runner, store, rows):
    store.save(Collection.ATTENDANCE, rows.attendance("", "e-diaria", "2025-03-03", value=100))
    store.save(Collection.ATTENDANCE, rows.attendance("", "e-diaria", "2025-03-04", value=50, status="partial"))
    service = AttendanceService(runner)

    assert service.monthly_summary("2025-03").total_days == 2
    assert service.employee_stats("e-diaria", "2025-03").total_pending == 150
    statement = service.statement("e-diaria", date(2025, 3, 1), date(2025, 3, 31))
    assert statement.settlement.total_to_pay == 150

    with pytest.raises(ValidationError):
        service.statement("e-diaria", date(2025, 3, 31), date(2025, 3, 1))


MARCH = (date(2025, 3, 1), date(2025, 3, 31))


def _two_sessions(seed, rows):
    seed[Collection.ATTENDANCE] = [rows.attendance("r1", "e-diaria", "2025-03-03", value=100)]
    store = InMemoryRecordStore(seed)
    return store, SyncRunner(store, company_id="fera"), SyncRunner(store, company_id="fera")


def test_edit_from_an_older_snapshot_keeps_the_record_paid(seed, rows):
    store, office, clerk = _two_sessions(seed, rows)
    payroll = PayrollService(office)
    payroll.settle_range("e-diaria", *MARCH)

    edited = AttendanceService(clerk).edit_values("r1", "100", "0", "5")

    assert edited.is_paid
    assert edited.bonus_value == 5
    assert clerk.snapshot.attendance_record("r1").is_paid

    office.refresh()
    with pytest.raises(ValidationError):
        payroll.settle_range("e-diaria", *MARCH)
    assert len(store.fetch_company_snapshot("fera", False)["cashOut"]) == 1


def test_toggle_from_an_older_snapshot_keeps_the_record_paid(seed, rows):
    _, office, clerk = _two_sessions(seed, rows)
    PayrollService(office).settle_range("e-diaria", *MARCH)

    partial = AttendanceService(clerk).toggle("e-diaria", date(2025, 3, 3))

    assert partial.record.status == StoredStatus.PARTIAL
    assert partial.record.value == 50
    assert partial.record.is_paid


def test_partial_row_carries_only_the_named_fields(rows):
    record = AttendanceRecord.from_row(rows.attendance("r1", "e-diaria", "2025-03-03", paid=True))

    assert record.to_partial_row(EDIT_FIELDS) == {
        "id": "r1",
        "companyId": "fera",
        "value": 100,
        "bonusValue": 0,
        "discountValue": 0,
        "discountObservation": "",
    }
