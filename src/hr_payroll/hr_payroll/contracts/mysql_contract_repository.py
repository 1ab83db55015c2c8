from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Contract
from .repository import ContractRepository

_COLUMNS = """
    contract_id, employee_id, contract_type, position, department,
    salary, start_date, end_date, is_current
"""


def _to_contract(r: dict) -> Contract:
    return Contract(
        contract_id=str(r["contract_id"]),
        employee_id=str(r["employee_id"]),
        contract_type=r["contract_type"],
        position=r["position"],
        department=r.get("department"),
        salary=as_decimal(r["salary"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        is_current=bool(r.get("is_current", True)),
    )


class MySQLContractRepository(ContractRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contracts WHERE contract_id=%s", (str(contract_id),))
            r = fetchone(cur)
            return _to_contract(r) if r else None

    def get_current_for_employee(self, employee_id: str) -> Optional[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM contracts
                WHERE employee_id=%s AND is_current=1
                ORDER BY start_date DESC
                LIMIT 1
                """,
                (str(employee_id),),
            )
            r = fetchone(cur)
            return _to_contract(r) if r else None

    def list_for_employee(self, employee_id: str) -> Sequence[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM contracts WHERE employee_id=%s ORDER BY start_date DESC",
                (str(employee_id),),
            )
            return [_to_contract(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: str,
        contract_type: str,
        position: str,
        department: Optional[str],
        salary: Decimal,
        start_date: date,
        end_date: Optional[date],
    ) -> str:
        contract_id = str(uuid.uuid4())
        # Both statements share one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE contracts SET is_current=0 WHERE employee_id=%s AND is_current=1",
                (str(employee_id),),
            )
            cur.execute(
                """
                INSERT INTO contracts(
                    contract_id, employee_id, contract_type, position, department,
                    salary, start_date, end_date, is_current
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    contract_id,
                    str(employee_id),
                    contract_type,
                    position,
                    department,
                    salary,
                    start_date,
                    end_date,
                ),
            )
        return contract_id
