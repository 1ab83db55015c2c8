from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..core.enums import IndemnizationType, SettlementStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_decimal,
    as_optional_decimal,
    db_cursor,
    dump_json,
    fetchall,
    fetchone,
    load_json,
)
from .model import (
    EDITABLE_AMOUNTS,
    ContractSettlement,
    NewSettlementAudit,
    SettlementAudit,
    SettlementCalculationResult,
)
from .repository import STATUS_COLUMNS, SettlementRepository

_COLUMNS = """
    settlement_id, contract_id, employee_id, settlement_date, contract_start_date, contract_end_date,
    days_worked, last_salary, average_salary, severance, severance_interest, service_bonus,
    vacation_pay, indemnization, indemnization_type, other_concepts, deductions, total, details,
    status, notes, approved_by, approved_at, approval_comments, rejected_by, rejected_at,
    rejection_reason, paid_at, payment_reference, created_by, updated_by, created_at, updated_at
"""


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_settlement(r: dict) -> ContractSettlement:
    itype = r.get("indemnization_type")
    return ContractSettlement(
        settlement_id=str(r["settlement_id"]),
        contract_id=str(r["contract_id"]),
        employee_id=str(r["employee_id"]),
        settlement_date=r["settlement_date"],
        contract_start_date=r["contract_start_date"],
        contract_end_date=r["contract_end_date"],
        days_worked=int(r["days_worked"]),
        last_salary=as_decimal(r["last_salary"]),
        average_salary=as_optional_decimal(r.get("average_salary")),
        severance=as_decimal(r["severance"]),
        severance_interest=as_decimal(r["severance_interest"]),
        service_bonus=as_decimal(r["service_bonus"]),
        vacation_pay=as_decimal(r["vacation_pay"]),
        indemnization=as_decimal(r["indemnization"]),
        indemnization_type=IndemnizationType(itype) if itype else None,
        other_concepts=as_decimal(r["other_concepts"]),
        deductions=as_decimal(r["deductions"]),
        total=as_decimal(r["total"]),
        status=SettlementStatus(r["status"]),
        details=load_json(r.get("details")),
        notes=r.get("notes"),
        approved_by=_opt_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        approval_comments=r.get("approval_comments"),
        rejected_by=_opt_int(r.get("rejected_by")),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
        paid_at=r.get("paid_at"),
        payment_reference=r.get("payment_reference"),
        created_by=_opt_int(r.get("created_by")),
        updated_by=_opt_int(r.get("updated_by")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSettlementRepository(SettlementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        result: SettlementCalculationResult,
        details: dict,
        notes: Optional[str],
        created_by: Optional[int],
    ) -> str:
        settlement_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO contract_settlements(
                    settlement_id, contract_id, employee_id, settlement_date, contract_start_date,
                    contract_end_date, days_worked, last_salary, average_salary, severance,
                    severance_interest, service_bonus, vacation_pay, indemnization, indemnization_type,
                    other_concepts, deductions, total, details, status, notes, created_by, updated_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,0,0,%s,%s,%s,%s,%s,%s)
                """,
                (
                    settlement_id,
                    result.contract_id,
                    result.employee_id,
                    result.settlement_date,
                    result.contract_start_date,
                    result.settlement_date,
                    result.days_worked,
                    result.last_salary,
                    result.average_salary,
                    result.severance,
                    result.severance_interest,
                    result.service_bonus,
                    result.vacation_pay,
                    result.indemnization,
                    result.indemnization_type.value if result.indemnization_type else None,
                    result.total,
                    dump_json(details),
                    SettlementStatus.DRAFT.value,
                    notes,
                    created_by,
                    created_by,
                ),
            )
        return settlement_id

    def get_by_id(self, settlement_id: str) -> Optional[ContractSettlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contract_settlements WHERE settlement_id=%s", (str(settlement_id),))
            r = fetchone(cur)
            return _to_settlement(r) if r else None

    def get_by_contract(self, contract_id: str) -> Optional[ContractSettlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contract_settlements WHERE contract_id=%s", (str(contract_id),))
            r = fetchone(cur)
            return _to_settlement(r) if r else None

    def list_all(self) -> Sequence[ContractSettlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contract_settlements ORDER BY created_at DESC")
            return [_to_settlement(r) for r in fetchall(cur)]

    def list_by_employee(self, employee_id: str) -> Sequence[ContractSettlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM contract_settlements WHERE employee_id=%s ORDER BY settlement_date DESC",
                (str(employee_id),),
            )
            return [_to_settlement(r) for r in fetchall(cur)]

    def update_amounts(
        self,
        settlement_id: str,
        *,
        amounts: dict[str, Decimal],
        total: Decimal,
        details: dict,
        notes: Optional[str],
        updated_by: Optional[int],
        audits: Sequence[NewSettlementAudit],
    ) -> bool:
        sets = []
        params: list = []
        for name, value in amounts.items():
            if name not in EDITABLE_AMOUNTS:
                raise ValueError(f"Column {name} is not editable")
            sets.append(f"{name}=%s")
            params.append(value)
        sets += ["total=%s", "details=%s", "notes=%s", "updated_by=%s"]
        params += [total, dump_json(details), notes, updated_by]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE contract_settlements SET {', '.join(sets)} WHERE settlement_id=%s",
                tuple(params) + (str(settlement_id),),
            )
            updated = cur.rowcount > 0
            for a in audits:
                cur.execute(
                    """
                    INSERT INTO contract_settlement_audit(
                        settlement_id, field_name, old_value, new_value, justification, modified_by, modified_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        str(settlement_id),
                        a.field_name,
                        a.old_value,
                        a.new_value,
                        a.justification,
                        a.modified_by,
                        a.modified_at,
                    ),
                )
            return updated

    def update_status(
        self,
        settlement_id: str,
        *,
        status: SettlementStatus,
        updated_by: Optional[int],
        changes: Optional[dict[str, Any]] = None,
    ) -> bool:
        sets = ["status=%s", "updated_by=%s"]
        params: list = [status.value, updated_by]
        for column, value in (changes or {}).items():
            if column not in STATUS_COLUMNS:
                raise ValueError(f"Column {column} cannot be set on status change")
            sets.append(f"{column}=%s")
            params.append(value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE contract_settlements SET {', '.join(sets)} WHERE settlement_id=%s",
                tuple(params) + (str(settlement_id),),
            )
            return cur.rowcount > 0

    def list_audit(self, settlement_id: str) -> Sequence[SettlementAudit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, settlement_id, field_name, old_value, new_value,
                       justification, modified_by, modified_at
                FROM contract_settlement_audit
                WHERE settlement_id=%s
                ORDER BY modified_at, audit_id
                """,
                (str(settlement_id),),
            )
            return [
                SettlementAudit(
                    audit_id=int(r["audit_id"]),
                    settlement_id=str(r["settlement_id"]),
                    field_name=r["field_name"],
                    old_value=r.get("old_value"),
                    new_value=r.get("new_value"),
                    justification=r.get("justification"),
                    modified_by=_opt_int(r.get("modified_by")),
                    modified_at=r.get("modified_at"),
                )
                for r in fetchall(cur)
            ]
