from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_payroll.hr_payroll.database.bootstrap import apply_schema, list_tables

PAYROLL_TABLES = (
    "users",
    "employees",
    "contracts",
    "payroll_config",
    "payroll_periods",
    "payroll_novedades",
    "payroll_entries",
    "payroll_export_logs",
    "contract_settlements",
    "contract_settlement_audit",
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = set(list_tables(db_config))
    missing = [t for t in PAYROLL_TABLES if t not in tables]
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    if missing:
        raise SystemExit(f"Esquema de nómina incompleto en {target}: faltan {', '.join(missing)}")
    print(f"OK: Esquema de nómina aplicado -> {target} ({len(PAYROLL_TABLES)} tablas de nómina y liquidaciones)")


if __name__ == "__main__":
    main()
