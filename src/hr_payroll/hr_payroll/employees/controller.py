from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, permission_required
from ..core.permissions import EMPLOYEES_MANAGE, EMPLOYEES_READ
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @permission_required(EMPLOYEES_READ)
    def list_employees():
        status = request.args.get("status") or None
        return ok(container.employee_service.list_employees(status=status))

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @permission_required(EMPLOYEES_MANAGE)
    def create_employee():
        data = json_body()
        employee = container.employee_service.create_employee(
            identification_type=data.get("identification_type", ""),
            identification_number=data.get("identification_number", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email"),
            phone=data.get("phone"),
        )
        return ok(employee, 201)

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    @permission_required(EMPLOYEES_READ)
    def get_employee(employee_id: str):
        return ok(container.employee_service.get_employee(employee_id))

    @app.route("/api/employees/<employee_id>/status", methods=["PATCH"], endpoint="employees_set_status")
    @permission_required(EMPLOYEES_MANAGE)
    def set_employee_status(employee_id: str):
        data = json_body()
        return ok(container.employee_service.set_status(employee_id, data.get("status", "")))
