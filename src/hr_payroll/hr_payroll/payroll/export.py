"""Payroll export to CSV / Excel."""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..common.validators import require_enum
from ..core.enums import ExportFormat, PeriodStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import PayrollEntry, PayrollExportLog
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

CSV_MIMETYPE = "text/csv"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_EXPORTABLE = {PeriodStatus.LIQUIDATED, PeriodStatus.APPROVED, PeriodStatus.CLOSED}

# (header, entry attribute)
_AMOUNT_COLUMNS = (
    ("Salario básico", "base_salary"),
    ("Horas extras", "overtime"),
    ("Comisiones", "commissions"),
    ("Bonificaciones", "bonuses"),
    ("Otros devengos", "other_earnings"),
    ("Auxilio de transporte", "transport_allowance"),
    ("Total devengado", "total_earned"),
    ("Salud", "health"),
    ("Pensión", "pension"),
    ("Fondo de solidaridad", "solidarity_fund"),
    ("Retención en la fuente", "withholding_tax"),
    ("Otras deducciones", "other_deductions"),
    ("Total deducido", "total_deducted"),
    ("Neto a pagar", "net_pay"),
)

HEADERS = ["Identificación", "Empleado", "Días"] + [h for h, _ in _AMOUNT_COLUMNS]


@dataclass(frozen=True)
class ExportFile:
    filename: str
    mimetype: str
    content: bytes
    total_rows: int


class PayrollExportService:
    def __init__(self, payroll: PayrollRepository, employees: EmployeeRepository):
        self._payroll = payroll
        self._employees = employees

    def export_period(self, *, period_id: int, fmt: str, user_id: Optional[int] = None) -> ExportFile:
        export_format = require_enum(ExportFormat, (fmt or "").lower(), "Formato")
        period = self._payroll.get_period(int(period_id))
        if not period:
            raise NotFoundError(f"Periodo de nómina {period_id} no encontrado")
        if period.status not in _EXPORTABLE:
            raise ValidationError(f"Solo se pueden exportar periodos liquidados (estado actual: {period.status.value})")

        entries = self._payroll.list_entries(period.period_id)
        rows = [self._row(e) for e in entries]

        base_name = f"nomina_{period.start_date.isoformat()}_{period.end_date.isoformat()}"
        if export_format == ExportFormat.CSV:
            content = self._to_csv(rows)
            out = ExportFile(f"{base_name}.csv", CSV_MIMETYPE, content, len(rows))
        else:
            content = self._to_xlsx(rows)
            out = ExportFile(f"{base_name}.xlsx", XLSX_MIMETYPE, content, len(rows))

        self._payroll.create_export_log(
            period_id=period.period_id,
            export_format=export_format.value,
            filename=out.filename,
            total_rows=out.total_rows,
            exported_by=user_id,
        )
        logger.info("Payroll period %s exported as %s (%s rows)", period.period_id, export_format.value, len(rows))
        return out

    def list_exports(self, period_id: int) -> list[PayrollExportLog]:
        return list(self._payroll.list_export_logs(int(period_id)))

    def _row(self, entry: PayrollEntry) -> list:
        employee = self._employees.get_by_id(entry.employee_id)
        identification = employee.identification_number if employee else entry.employee_id
        name = employee.full_name if employee else "-"
        return [identification, name, entry.days] + [getattr(entry, attr) for _, attr in _AMOUNT_COLUMNS]

    @staticmethod
    def _to_csv(rows: list[list]) -> bytes:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(HEADERS)
        for row in rows:
            writer.writerow([str(v) for v in row])
        # BOM so spreadsheet apps detect UTF-8.
        return buf.getvalue().encode("utf-8-sig")

    @staticmethod
    def _to_xlsx(rows: list[list]) -> bytes:
        df = pd.DataFrame(rows, columns=HEADERS)
        for header, _ in _AMOUNT_COLUMNS:
            df[header] = df[header].astype(float)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Nomina")
        return output.getvalue()
