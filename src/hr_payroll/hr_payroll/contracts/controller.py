from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, permission_required
from ..core.permissions import CONTRACTS_MANAGE, CONTRACTS_READ
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<employee_id>/contracts", methods=["GET"], endpoint="contracts_list")
    @permission_required(CONTRACTS_READ)
    def list_contracts(employee_id: str):
        return ok(container.contract_service.list_for_employee(employee_id))

    @app.route("/api/employees/<employee_id>/contracts", methods=["POST"], endpoint="contracts_create")
    @permission_required(CONTRACTS_MANAGE)
    def create_contract(employee_id: str):
        data = json_body()
        contract = container.contract_service.create_contract(
            employee_id=employee_id,
            contract_type=data.get("contract_type", ""),
            position=data.get("position", ""),
            department=data.get("department"),
            salary=data.get("salary"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )
        return ok(contract, 201)

    @app.route("/api/contracts/<contract_id>", methods=["GET"], endpoint="contracts_get")
    @permission_required(CONTRACTS_READ)
    def get_contract(contract_id: str):
        return ok(container.contract_service.get_contract(contract_id))
