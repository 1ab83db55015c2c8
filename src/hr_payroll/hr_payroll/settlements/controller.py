from __future__ import annotations

from flask import Flask

from ..common.http import current_user_id, json_body, ok, permission_required
from ..core.exceptions import ValidationError
from ..core.permissions import SETTLEMENTS_APPROVE, SETTLEMENTS_MANAGE, SETTLEMENTS_PAY, SETTLEMENTS_READ
from ..container import Container
from .model import EDITABLE_AMOUNTS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/contracts/<contract_id>/settle", methods=["POST"], endpoint="settlements_generate")
    @permission_required(SETTLEMENTS_MANAGE)
    def generate_settlement(contract_id: str):
        data = json_body()
        settlement = container.settlement_service.generate_settlement(
            contract_id=contract_id,
            settlement_date=data.get("settlement_date"),
            indemnization_type=data.get("indemnization_type"),
            notes=data.get("notes"),
            user_id=current_user_id(),
        )
        return ok(settlement, 201)

    @app.route("/api/contracts/<contract_id>/settlement", methods=["GET"], endpoint="settlements_by_contract")
    @permission_required(SETTLEMENTS_READ)
    def get_by_contract(contract_id: str):
        return ok(container.settlement_service.get_by_contract(contract_id))

    @app.route("/api/employees/<employee_id>/settlements", methods=["GET"], endpoint="settlements_by_employee")
    @permission_required(SETTLEMENTS_READ)
    def list_by_employee(employee_id: str):
        return ok(container.settlement_service.list_by_employee(employee_id))

    @app.route("/api/settlements", methods=["GET"], endpoint="settlements_list")
    @permission_required(SETTLEMENTS_READ)
    def list_settlements():
        return ok(container.settlement_service.list_settlements())

    @app.route("/api/settlements/<settlement_id>", methods=["GET"], endpoint="settlements_get")
    @permission_required(SETTLEMENTS_READ)
    def get_settlement(settlement_id: str):
        return ok(container.settlement_service.get_settlement(settlement_id))

    @app.route("/api/settlements/<settlement_id>/audit", methods=["GET"], endpoint="settlements_audit")
    @permission_required(SETTLEMENTS_READ)
    def list_audit(settlement_id: str):
        return ok(container.settlement_service.list_audit(settlement_id))

    @app.route("/api/settlements/<settlement_id>", methods=["PATCH"], endpoint="settlements_update")
    @permission_required(SETTLEMENTS_MANAGE)
    def update_settlement(settlement_id: str):
        data = json_body()
        changes = data.get("changes")
        if changes is None:
            changes = {k: v for k, v in data.items() if k in EDITABLE_AMOUNTS}
        if not isinstance(changes, dict):
            raise ValidationError("changes debe ser un objeto")
        settlement = container.settlement_service.update_settlement(
            settlement_id=settlement_id,
            changes=changes,
            justification=data.get("justification"),
            notes=data.get("notes"),
            user_id=current_user_id(),
        )
        return ok(settlement)

    @app.route("/api/settlements/<settlement_id>/submit", methods=["POST"], endpoint="settlements_submit")
    @permission_required(SETTLEMENTS_MANAGE)
    def submit_settlement(settlement_id: str):
        return ok(container.settlement_service.submit_settlement(settlement_id=settlement_id, user_id=current_user_id()))

    @app.route("/api/settlements/<settlement_id>/approve", methods=["POST"], endpoint="settlements_approve")
    @permission_required(SETTLEMENTS_APPROVE)
    def approve_settlement(settlement_id: str):
        settlement = container.settlement_service.approve_settlement(
            settlement_id=settlement_id,
            user_id=current_user_id(),
            comments=json_body().get("comments"),
        )
        return ok(settlement)

    @app.route("/api/settlements/<settlement_id>/reject", methods=["POST"], endpoint="settlements_reject")
    @permission_required(SETTLEMENTS_APPROVE)
    def reject_settlement(settlement_id: str):
        settlement = container.settlement_service.reject_settlement(
            settlement_id=settlement_id,
            user_id=current_user_id(),
            reason=json_body().get("reason"),
        )
        return ok(settlement)

    @app.route("/api/settlements/<settlement_id>/paid", methods=["POST"], endpoint="settlements_paid")
    @permission_required(SETTLEMENTS_PAY)
    def mark_as_paid(settlement_id: str):
        data = json_body()
        settlement = container.settlement_service.mark_as_paid(
            settlement_id=settlement_id,
            user_id=current_user_id(),
            payment_reference=data.get("payment_reference"),
            payment_date=data.get("payment_date"),
        )
        return ok(settlement)
