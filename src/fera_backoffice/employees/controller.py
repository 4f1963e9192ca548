from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import capability_required, csv_response, current_session, json_body
from ..container import Container
from ..core.enums import Capability
from ..filters.predicate import apply_filter, build_predicate
from ..reports.csv_export import export_employees


def register(app: Flask, container: Container) -> None:
    def _workspace():
        return container.workspaces.get(current_session())

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @capability_required(Capability.EMPLOYEES)
    def employees_list():
        include_inactive = request.args.get("includeInactive", "1") != "0"
        predicate = build_predicate(request.args.get("search", ""), category_field=None, date_field=None)
        employees = apply_filter(_workspace().employees.list_employees(include_inactive=include_inactive), predicate)
        return jsonify({"success": True, "employees": [e.to_row() for e in employees]})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_save")
    @capability_required(Capability.EMPLOYEES)
    def employees_save():
        employee = _workspace().employees.save_employee(json_body())
        return jsonify({"success": True, "employee": employee.to_row()})

    @app.route("/api/employees/<employee_id>/toggle-status", methods=["POST"], endpoint="employees_toggle_status")
    @capability_required(Capability.EMPLOYEES)
    def employees_toggle_status(employee_id: str):
        employee = _workspace().employees.toggle_employee_status(employee_id)
        return jsonify({"success": True, "employee": employee.to_row()})

    @app.route("/api/employees/report.csv", methods=["GET"], endpoint="employees_report_csv")
    @capability_required(Capability.EMPLOYEES)
    def employees_report_csv():
        return csv_response(app, export_employees(_workspace().runner.snapshot.employees))
