from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, IdentificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, identification_type, identification_number,
    first_name, last_name, email, phone, status, created_at
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["employee_id"]),
        identification_type=IdentificationType(r["identification_type"]),
        identification_number=r["identification_number"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        status=EmployeeStatus(r["status"]),
        email=r.get("email"),
        phone=r.get("phone"),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (str(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_identification(self, identification_number: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE identification_number=%s",
                (identification_number,),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(
        self,
        *,
        identification_type: IdentificationType,
        identification_number: str,
        first_name: str,
        last_name: str,
        email: Optional[str],
        phone: Optional[str],
    ) -> str:
        employee_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_id, identification_type, identification_number,
                    first_name, last_name, email, phone, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_id,
                    identification_type.value,
                    identification_number,
                    first_name,
                    last_name,
                    email,
                    phone,
                    EmployeeStatus.ACTIVE.value,
                ),
            )
        return employee_id

    def list_all(self, *, status: Optional[EmployeeStatus] = None) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {where} ORDER BY last_name, first_name",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s WHERE employee_id=%s",
                (status.value, str(employee_id)),
            )
            return cur.rowcount > 0
