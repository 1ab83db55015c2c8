from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import PayrollConfigItem
from .repository import PayrollConfigRepository


def _to_item(r: dict) -> PayrollConfigItem:
    return PayrollConfigItem(
        key=r["config_key"],
        value=load_json(r["config_value"]),
        description=r.get("description"),
        updated_by=int(r["updated_by"]) if r.get("updated_by") is not None else None,
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollConfigRepository(PayrollConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[PayrollConfigItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT config_key, config_value, description, updated_by, updated_at
                FROM payroll_config
                WHERE config_key=%s
                """,
                (key,),
            )
            r = fetchone(cur)
            return _to_item(r) if r else None

    def upsert(self, *, key: str, value: Any, description: Optional[str], updated_by: Optional[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_config(config_key, config_value, description, updated_by)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    config_value=VALUES(config_value),
                    description=COALESCE(VALUES(description), description),
                    updated_by=VALUES(updated_by)
                """,
                (key, dump_json(value), description, updated_by),
            )

    def list_all(self) -> Sequence[PayrollConfigItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT config_key, config_value, description, updated_by, updated_at
                FROM payroll_config
                ORDER BY config_key
                """
            )
            return [_to_item(r) for r in fetchall(cur)]
