from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import NovedadCategory, PeriodStatus, PeriodType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import (
    NewNovedad,
    PayrollCalculationResult,
    PayrollEntry,
    PayrollExportLog,
    PayrollNovedad,
    PayrollPeriod,
)
from .repository import PayrollRepository

_PERIOD_COLUMNS = """
    period_id, period_type, start_date, end_date, status, description, created_by,
    liquidated_by, liquidated_at, approved_by, approved_at, closed_by, closed_at, created_at
"""

_NOVEDAD_COLUMNS = """
    novedad_id, period_id, employee_id, novedad_type, category, amount, quantity,
    novedad_date, comment, metadata, created_by, created_at
"""

_AMOUNT_FIELDS = (
    "base_salary",
    "overtime",
    "commissions",
    "bonuses",
    "other_earnings",
    "transport_allowance",
    "total_earned",
    "health",
    "pension",
    "solidarity_fund",
    "withholding_tax",
    "other_deductions",
    "total_deducted",
    "net_pay",
)

_ENTRY_COLUMNS = (
    "e.entry_id, e.period_id, e.employee_id, e.days, "
    + ", ".join(f"e.{f}" for f in _AMOUNT_FIELDS)
    + ", e.details, e.calculated_by, e.calculated_at"
)

# Audit columns written when a period reaches each status.
_STATUS_AUDIT_COLUMNS = {
    PeriodStatus.LIQUIDATED: ("liquidated_by", "liquidated_at"),
    PeriodStatus.APPROVED: ("approved_by", "approved_at"),
    PeriodStatus.CLOSED: ("closed_by", "closed_at"),
}


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _to_period(r: dict) -> PayrollPeriod:
    return PayrollPeriod(
        period_id=int(r["period_id"]),
        period_type=PeriodType(r["period_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=PeriodStatus(r["status"]),
        description=r.get("description"),
        created_by=_opt_int(r.get("created_by")),
        liquidated_by=_opt_int(r.get("liquidated_by")),
        liquidated_at=r.get("liquidated_at"),
        approved_by=_opt_int(r.get("approved_by")),
        approved_at=r.get("approved_at"),
        closed_by=_opt_int(r.get("closed_by")),
        closed_at=r.get("closed_at"),
        created_at=r.get("created_at"),
    )


def _to_novedad(r: dict) -> PayrollNovedad:
    return PayrollNovedad(
        novedad_id=int(r["novedad_id"]),
        period_id=int(r["period_id"]),
        employee_id=str(r["employee_id"]),
        novedad_type=r["novedad_type"],
        category=NovedadCategory(r["category"]),
        amount=as_decimal(r["amount"]),
        quantity=as_decimal(r["quantity"]),
        novedad_date=r["novedad_date"],
        comment=r.get("comment"),
        metadata=load_json(r.get("metadata")),
        created_by=_opt_int(r.get("created_by")),
        created_at=r.get("created_at"),
    )


def _to_entry(r: dict) -> PayrollEntry:
    amounts = {f: as_decimal(r[f]) for f in _AMOUNT_FIELDS}
    return PayrollEntry(
        entry_id=int(r["entry_id"]),
        period_id=int(r["period_id"]),
        employee_id=str(r["employee_id"]),
        days=int(r["days"]),
        details=load_json(r.get("details")),
        calculated_by=_opt_int(r.get("calculated_by")),
        calculated_at=r.get("calculated_at"),
        **amounts,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- periods --------
    def create_period(
        self,
        *,
        period_type: PeriodType,
        start_date: date,
        end_date: date,
        description: Optional[str],
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_periods(period_type, start_date, end_date, status, description, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (period_type.value, start_date, end_date, PeriodStatus.OPEN.value, description, created_by),
            )
            return int(cur.lastrowid)

    def get_period(self, period_id: int) -> Optional[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM payroll_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def list_periods(self) -> Sequence[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM payroll_periods ORDER BY start_date DESC, period_id DESC")
            return [_to_period(r) for r in fetchall(cur)]

    def find_overlapping_period(self, *, start_date: date, end_date: date) -> Optional[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PERIOD_COLUMNS}
                FROM payroll_periods
                WHERE status <> %s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date
                LIMIT 1
                """,
                (PeriodStatus.CLOSED.value, end_date, start_date),
            )
            r = fetchone(cur)
            return _to_period(r) if r else None

    def update_period_status(
        self,
        period_id: int,
        *,
        status: PeriodStatus,
        user_id: Optional[int],
        at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._set_status(cur, int(period_id), status, user_id, at)

    @staticmethod
    def _set_status(cur, period_id: int, status: PeriodStatus, user_id: Optional[int], at: datetime) -> bool:
        by_col, at_col = _STATUS_AUDIT_COLUMNS[status]
        cur.execute(
            f"UPDATE payroll_periods SET status=%s, {by_col}=%s, {at_col}=%s WHERE period_id=%s",
            (status.value, user_id, at, period_id),
        )
        return cur.rowcount > 0

    # -------- novedades --------
    def create_novedades(
        self,
        *,
        period_id: int,
        novedades: Sequence[NewNovedad],
        created_by: Optional[int],
    ) -> list[int]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for n in novedades:
                cur.execute(
                    """
                    INSERT INTO payroll_novedades(
                        period_id, employee_id, novedad_type, category, amount, quantity,
                        novedad_date, comment, metadata, created_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(period_id),
                        n.employee_id,
                        n.novedad_type,
                        n.category.value,
                        n.amount,
                        n.quantity,
                        n.novedad_date,
                        n.comment,
                        dump_json(n.metadata),
                        created_by,
                    ),
                )
                ids.append(int(cur.lastrowid))
        return ids

    def get_novedad(self, novedad_id: int) -> Optional[PayrollNovedad]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_NOVEDAD_COLUMNS} FROM payroll_novedades WHERE novedad_id=%s", (int(novedad_id),))
            r = fetchone(cur)
            return _to_novedad(r) if r else None

    def list_novedades(self, *, period_id: int, employee_id: Optional[str] = None) -> Sequence[PayrollNovedad]:
        sql = f"SELECT {_NOVEDAD_COLUMNS} FROM payroll_novedades WHERE period_id=%s"
        params: list = [int(period_id)]
        if employee_id:
            sql += " AND employee_id=%s"
            params.append(str(employee_id))
        sql += " ORDER BY novedad_date, novedad_id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_novedad(r) for r in fetchall(cur)]

    def delete_novedad(self, novedad_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_novedades WHERE novedad_id=%s", (int(novedad_id),))
            return cur.rowcount > 0

    # -------- entries --------
    def save_liquidation(
        self,
        *,
        period_id: int,
        results: Sequence[PayrollCalculationResult],
        user_id: Optional[int],
        at: datetime,
    ) -> None:
        columns = ("period_id", "employee_id", "days") + _AMOUNT_FIELDS + ("details", "calculated_by", "calculated_at")
        placeholders = ",".join(["%s"] * len(columns))
        updates = ", ".join(f"{c}=VALUES({c})" for c in columns if c not in ("period_id", "employee_id"))
        sql = (
            f"INSERT INTO payroll_entries({', '.join(columns)}) VALUES({placeholders}) "
            f"ON DUPLICATE KEY UPDATE {updates}"
        )
        with db_cursor(self._conn_factory) as (_, cur):
            for r in results:
                cur.execute(
                    sql,
                    (int(period_id), r.employee_id, r.days)
                    + tuple(getattr(r, f) for f in _AMOUNT_FIELDS)
                    + (dump_json(r.details), user_id, at),
                )
            self._set_status(cur, int(period_id), PeriodStatus.LIQUIDATED, user_id, at)

    def get_entry(self, *, period_id: int, employee_id: str) -> Optional[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM payroll_entries e WHERE e.period_id=%s AND e.employee_id=%s",
                (int(period_id), str(employee_id)),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_entries(self, period_id: int) -> Sequence[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM payroll_entries e WHERE e.period_id=%s ORDER BY e.net_pay DESC",
                (int(period_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_entries_for_employee(self, *, employee_id: str, period_end_from: date, period_end_to: date) -> Sequence[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM payroll_entries e
                JOIN payroll_periods p ON p.period_id = e.period_id
                WHERE e.employee_id=%s AND p.end_date BETWEEN %s AND %s
                ORDER BY p.end_date
                """,
                (str(employee_id), period_end_from, period_end_to),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    # -------- export logs --------
    def create_export_log(
        self,
        *,
        period_id: int,
        export_format: str,
        filename: str,
        total_rows: int,
        exported_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_export_logs(period_id, export_format, filename, total_rows, exported_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(period_id), export_format, filename, int(total_rows), exported_by),
            )
            return int(cur.lastrowid)

    def list_export_logs(self, period_id: int) -> Sequence[PayrollExportLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT export_id, period_id, export_format, filename, total_rows, exported_by, exported_at
                FROM payroll_export_logs
                WHERE period_id=%s
                ORDER BY exported_at DESC, export_id DESC
                """,
                (int(period_id),),
            )
            return [
                PayrollExportLog(
                    export_id=int(r["export_id"]),
                    period_id=int(r["period_id"]),
                    export_format=r["export_format"],
                    filename=r["filename"],
                    total_rows=int(r["total_rows"]),
                    exported_by=_opt_int(r.get("exported_by")),
                    exported_at=r.get("exported_at"),
                )
                for r in fetchall(cur)
            ]
