from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import current_user_id, json_body, ok, permission_required
from ..core.exceptions import ValidationError
from ..core.permissions import (
    PAYROLL_APPROVE,
    PAYROLL_CLOSE,
    PAYROLL_CONFIG,
    PAYROLL_EXPORT,
    PAYROLL_LIQUIDATE,
    PAYROLL_MANAGE,
    PAYROLL_READ,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # -------- config --------
    @app.route("/api/payroll/config", methods=["GET"], endpoint="payroll_config_list")
    @permission_required(PAYROLL_READ)
    def list_config():
        return ok(container.payroll_config_service.list_config())

    @app.route("/api/payroll/config/<key>", methods=["GET"], endpoint="payroll_config_get")
    @permission_required(PAYROLL_READ)
    def get_config(key: str):
        return ok({"key": key, "value": container.payroll_config_service.get_value(key)})

    @app.route("/api/payroll/config/<key>", methods=["PUT"], endpoint="payroll_config_update")
    @permission_required(PAYROLL_CONFIG)
    def update_config(key: str):
        data = json_body()
        item = container.payroll_config_service.update_config(
            key=key,
            value=data.get("value"),
            updated_by=current_user_id(),
            description=data.get("description"),
        )
        return ok(item)

    # -------- periods --------
    @app.route("/api/payroll/periods", methods=["POST"], endpoint="payroll_periods_create")
    @permission_required(PAYROLL_MANAGE)
    def create_period():
        data = json_body()
        period = container.payroll_service.create_period(
            period_type=data.get("period_type", ""),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            description=data.get("description"),
            user_id=current_user_id(),
        )
        return ok(period, 201)

    @app.route("/api/payroll/periods", methods=["GET"], endpoint="payroll_periods_list")
    @permission_required(PAYROLL_READ)
    def list_periods():
        return ok(container.payroll_service.list_periods())

    @app.route("/api/payroll/periods/<int:period_id>", methods=["GET"], endpoint="payroll_periods_get")
    @permission_required(PAYROLL_READ)
    def get_period(period_id: int):
        return ok(container.payroll_service.get_period(period_id))

    # -------- novedades --------
    @app.route("/api/payroll/periods/<int:period_id>/novedades", methods=["POST"], endpoint="payroll_novedades_create")
    @permission_required(PAYROLL_MANAGE)
    def create_novedad(period_id: int):
        novedad = container.payroll_service.create_novedad(
            period_id=period_id,
            data=json_body(),
            user_id=current_user_id(),
        )
        return ok(novedad, 201)

    @app.route("/api/payroll/periods/<int:period_id>/novedades/bulk", methods=["POST"], endpoint="payroll_novedades_bulk")
    @permission_required(PAYROLL_MANAGE)
    def bulk_create_novedades(period_id: int):
        items = json_body().get("novedades")
        if not isinstance(items, list):
            raise ValidationError("novedades debe ser una lista")
        created = container.payroll_service.bulk_create_novedades(
            period_id=period_id,
            items=items,
            user_id=current_user_id(),
        )
        return ok({"created": len(created), "novedades": created}, 201)

    @app.route("/api/payroll/periods/<int:period_id>/novedades", methods=["GET"], endpoint="payroll_novedades_list")
    @permission_required(PAYROLL_READ)
    def list_novedades(period_id: int):
        employee_id = request.args.get("employee_id") or None
        return ok(container.payroll_service.list_novedades(period_id, employee_id=employee_id))

    @app.route("/api/payroll/novedades/<int:novedad_id>", methods=["DELETE"], endpoint="payroll_novedades_delete")
    @permission_required(PAYROLL_MANAGE)
    def delete_novedad(novedad_id: int):
        container.payroll_service.delete_novedad(novedad_id)
        return ok({"novedad_id": novedad_id})

    # -------- lifecycle --------
    @app.route("/api/payroll/periods/<int:period_id>/liquidate", methods=["POST"], endpoint="payroll_periods_liquidate")
    @permission_required(PAYROLL_LIQUIDATE)
    def liquidate_period(period_id: int):
        employee_ids = json_body().get("employee_ids")
        if employee_ids is not None and not isinstance(employee_ids, list):
            raise ValidationError("employee_ids debe ser una lista")
        summary = container.payroll_service.liquidate_period(
            period_id=period_id,
            employee_ids=employee_ids,
            user_id=current_user_id(),
        )
        return ok(summary)

    @app.route("/api/payroll/periods/<int:period_id>/approve", methods=["POST"], endpoint="payroll_periods_approve")
    @permission_required(PAYROLL_APPROVE)
    def approve_period(period_id: int):
        period = container.payroll_service.approve_period(
            period_id=period_id,
            user_id=current_user_id(),
            comment=json_body().get("comment"),
        )
        return ok(period)

    @app.route("/api/payroll/periods/<int:period_id>/close", methods=["POST"], endpoint="payroll_periods_close")
    @permission_required(PAYROLL_CLOSE)
    def close_period(period_id: int):
        period = container.payroll_service.close_period(
            period_id=period_id,
            user_id=current_user_id(),
            comment=json_body().get("comment"),
        )
        return ok(period)

    # -------- entries --------
    @app.route("/api/payroll/periods/<int:period_id>/entries", methods=["GET"], endpoint="payroll_entries_list")
    @permission_required(PAYROLL_READ)
    def list_entries(period_id: int):
        return ok(container.payroll_service.list_entries(period_id))

    @app.route(
        "/api/payroll/periods/<int:period_id>/entries/<employee_id>",
        methods=["GET"],
        endpoint="payroll_entries_get",
    )
    @permission_required(PAYROLL_READ)
    def get_entry(period_id: int, employee_id: str):
        return ok(container.payroll_service.get_entry(period_id=period_id, employee_id=employee_id))

    # -------- export --------
    @app.route("/api/payroll/periods/<int:period_id>/export", methods=["GET"], endpoint="payroll_export")
    @permission_required(PAYROLL_EXPORT)
    def export_period(period_id: int):
        export = container.payroll_export_service.export_period(
            period_id=period_id,
            fmt=request.args.get("format", "xlsx"),
            user_id=current_user_id(),
        )
        return send_file(
            io.BytesIO(export.content),
            download_name=export.filename,
            as_attachment=True,
            mimetype=export.mimetype,
        )

    @app.route("/api/payroll/periods/<int:period_id>/exports", methods=["GET"], endpoint="payroll_exports_list")
    @permission_required(PAYROLL_EXPORT)
    def list_exports(period_id: int):
        return ok(container.payroll_export_service.list_exports(period_id))
