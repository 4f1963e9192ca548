from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import is_period, period_of, today_local
from ..common.web import arg_date, capability_required, csv_response, current_session, json_body
from ..container import Container
from ..core.enums import Capability
from ..core.exceptions import ValidationError
from ..reports.csv_export import export_employee_attendance
from .model import PointForm


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    def _period() -> str:
        period = request.args.get("period") or period_of(today_local())
        if not is_period(period):
            raise ValidationError("Período inválido, use AAAA-MM")
        return period

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @capability_required(Capability.EMPLOYEES)
    def attendance_list():
        period = _period()
        records = [r for r in _workspace().runner.snapshot.attendance if r.period == period]
        return jsonify({"success": True, "records": [r.to_row() for r in records]})

    @app.route("/api/attendance/toggle", methods=["POST"], endpoint="attendance_toggle")
    @capability_required(Capability.EMPLOYEES)
    def attendance_toggle():
        data = json_body()
        action = _workspace().attendance.toggle(str(data.get("employeeId") or ""), arg_date("date", today_local()))
        return jsonify(
            {
                "success": True,
                "action": action.kind.value,
                "record": action.record.to_row() if action.record else None,
            }
        )

    @app.route("/api/attendance/point", methods=["POST"], endpoint="attendance_point")
    @capability_required(Capability.EMPLOYEES)
    def attendance_point():
        data = json_body()
        try:
            form = PointForm.from_payload(data)
        except ValueError as exc:
            raise ValidationError("Registro de ponto inválido") from exc
        record = _workspace().attendance.save_point(str(data.get("employeeId") or ""), arg_date("date", today_local()), form)
        return jsonify({"success": True, "record": record.to_row()})

    @app.route("/api/attendance/<record_id>", methods=["PATCH"], endpoint="attendance_edit")
    @capability_required(Capability.EMPLOYEES)
    def attendance_edit(record_id: str):
        data = json_body()
        record = _workspace().attendance.edit_values(
            record_id,
            data.get("value"),
            data.get("discountValue"),
            data.get("bonusValue"),
            data.get("observation"),
        )
        return jsonify({"success": True, "record": record.to_row()})

    @app.route("/api/attendance/<record_id>/payment", methods=["POST"], endpoint="attendance_payment")
    @capability_required(Capability.EMPLOYEES)
    def attendance_payment(record_id: str):
        record = _workspace().attendance.toggle_payment(record_id)
        return jsonify({"success": True, "record": record.to_row()})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @capability_required(Capability.EMPLOYEES)
    def attendance_summary():
        return jsonify({"success": True, "summary": asdict(_workspace().attendance.monthly_summary(_period()))})

    @app.route("/api/employees/<employee_id>/stats", methods=["GET"], endpoint="employee_stats")
    @capability_required(Capability.EMPLOYEES)
    def employee_stats(employee_id: str):
        stats = _workspace().attendance.employee_stats(employee_id, _period())
        return jsonify({"success": True, "stats": asdict(stats)})

    @app.route("/api/employees/<employee_id>/statement", methods=["GET"], endpoint="employee_statement")
    @capability_required(Capability.ANALYTICS)
    def employee_statement(employee_id: str):
        today = today_local()
        start = arg_date("start", today.replace(day=1))
        end = arg_date("end", today)
        statement = _workspace().attendance.statement(employee_id, start, end)
        return jsonify(
            {
                "success": True,
                "employeeName": statement.employee_name,
                "start": statement.start,
                "end": statement.end,
                "rows": [asdict(r) for r in statement.rows],
                "settlement": statement.settlement.as_dict() if statement.settlement else None,
            }
        )

    @app.route("/api/employees/<employee_id>/attendance.csv", methods=["GET"], endpoint="employee_attendance_csv")
    @capability_required(Capability.EMPLOYEES)
    def employee_attendance_csv(employee_id: str):
        snapshot = _workspace().runner.snapshot
        employee = snapshot.employee(employee_id)
        if employee is None:
            raise ValidationError("Funcionário não encontrado")
        return csv_response(app, export_employee_attendance(employee, snapshot.attendance, _period()))
