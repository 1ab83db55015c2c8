from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEMO_USERS = (
    ("Administrador Demo", "admin", "admin123", "admin"),
    ("Talento Humano Demo", "rrhh", "rrhh1234", "rrhh"),
    ("Contadora Demo", "contabilidad", "conta1234", "contabilidad"),
    ("Gerencia Demo", "gerencia", "geren1234", "gerencia"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


# A statement is a run of quoted literals or any char other than ';'.
_STATEMENT = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""", re.S)


def iter_sql_statements(sql: str) -> Iterable[str]:
    for match in _STATEMENT.finditer(sql):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def _connect(db_config: dict, *, with_database: bool = True):
    return DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)


def _run_script(db_config: dict, path: Path) -> int:
    sql = _strip_line_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))
    executed = 0
    with closing(_connect(db_config)) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    return executed


def ensure_database_exists(db_config: dict) -> None:
    database = DBConfig.from_dict(db_config).database
    with closing(_connect(db_config, with_database=False)) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, Path(schema_path))
    logger.info("Schema applied from %s (%s statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, Path(seed_path))
    logger.info("Seed applied from %s (%s statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Create or reset one login per role so a fresh install is usable."""
    with closing(_connect(db_config)) as conn:
        cur = conn.cursor()
        cur.executemany(
            """
            INSERT INTO users (full_name, username, password_hash, role, is_active)
            VALUES (%s, %s, %s, %s, 1)
            ON DUPLICATE KEY UPDATE
                full_name = VALUES(full_name),
                password_hash = VALUES(password_hash),
                role = VALUES(role),
                is_active = 1
            """,
            [
                (full_name, username, generate_password_hash(password), role)
                for full_name, username, password, role in DEMO_USERS
            ],
        )
        conn.commit()
    logger.info("Demo users ready: %s", ", ".join(u[1] for u in DEMO_USERS))


def list_tables(db_config: dict) -> list[str]:
    with closing(_connect(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
