from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.money import ZERO
from ..common.validators import require_date, require_enum, require_non_empty, require_non_negative
from ..core.enums import EmployeeStatus, NovedadCategory, PeriodStatus, PeriodType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculation_service import PayrollCalculationService
from .config_service import PayrollConfigService
from .model import NewNovedad, PayrollEntry, PayrollNovedad, PayrollPeriod
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidationSummary:
    period_id: int
    employees: int
    total_earned: Decimal
    total_deducted: Decimal
    total_net: Decimal


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        calculation: PayrollCalculationService,
        config: PayrollConfigService,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculation = calculation
        self._config = config

    # -------- periods --------
    def create_period(
        self,
        *,
        period_type: str,
        start_date: Any,
        end_date: Any,
        description: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> PayrollPeriod:
        ptype = require_enum(PeriodType, period_type, "Tipo de periodo")
        start = require_date(start_date, "Fecha de inicio")
        end = require_date(end_date, "Fecha de fin")
        if end <= start:
            raise ValidationError("La fecha de fin debe ser posterior a la fecha de inicio")

        overlapping = self._payroll.find_overlapping_period(start_date=start, end_date=end)
        if overlapping:
            raise ValidationError(
                f"El periodo se cruza con el periodo {overlapping.period_id} "
                f"({overlapping.start_date.isoformat()} a {overlapping.end_date.isoformat()})"
            )

        period_id = self._payroll.create_period(
            period_type=ptype,
            start_date=start,
            end_date=end,
            description=(description or "").strip() or None,
            created_by=user_id,
        )
        logger.info("Payroll period %s created (%s %s..%s)", period_id, ptype.value, start, end)
        return self.get_period(period_id)

    def list_periods(self) -> list[PayrollPeriod]:
        return list(self._payroll.list_periods())

    def get_period(self, period_id: int) -> PayrollPeriod:
        period = self._payroll.get_period(int(period_id))
        if not period:
            raise NotFoundError(f"Periodo de nómina {period_id} no encontrado")
        return period

    def _require_status(self, period: PayrollPeriod, expected: PeriodStatus, action: str) -> None:
        if period.status != expected:
            raise ValidationError(
                f"No se puede {action} el periodo en estado {period.status.value} "
                f"(se requiere {expected.value})"
            )

    # -------- novedades --------
    @staticmethod
    def _parse_novedad(data: dict, position: Optional[int] = None) -> NewNovedad:
        prefix = f"Novedad {position}: " if position is not None else ""
        if not isinstance(data, dict):
            raise ValidationError(f"{prefix}formato inválido")
        try:
            quantity = data.get("quantity")
            metadata = data.get("metadata")
            if metadata is not None and not isinstance(metadata, dict):
                raise ValidationError("metadata debe ser un objeto")
            return NewNovedad(
                employee_id=require_non_empty(data.get("employee_id"), "Empleado"),
                novedad_type=require_non_empty(data.get("novedad_type"), "Tipo de novedad"),
                category=require_enum(NovedadCategory, data.get("category"), "Categoría"),
                amount=require_non_negative(data.get("amount"), "Valor"),
                quantity=require_non_negative(quantity, "Cantidad") if quantity is not None else Decimal("1"),
                novedad_date=require_date(data.get("novedad_date"), "Fecha de la novedad"),
                comment=(data.get("comment") or "").strip() or None,
                metadata=metadata,
            )
        except ValidationError as e:
            if prefix:
                raise ValidationError(f"{prefix}{e}")
            raise

    def create_novedad(self, *, period_id: int, data: dict, user_id: Optional[int] = None) -> PayrollNovedad:
        return self._store_novedades(period_id, [data], user_id=user_id, numbered=False)[0]

    def bulk_create_novedades(
        self,
        *,
        period_id: int,
        items: Sequence[dict],
        user_id: Optional[int] = None,
    ) -> list[PayrollNovedad]:
        """All items are validated before any is stored."""
        return self._store_novedades(period_id, items, user_id=user_id, numbered=True)

    def _store_novedades(
        self,
        period_id: int,
        items: Sequence[dict],
        *,
        user_id: Optional[int],
        numbered: bool,
    ) -> list[PayrollNovedad]:
        period = self.get_period(period_id)
        self._require_status(period, PeriodStatus.OPEN, "registrar novedades en")
        if not items:
            raise ValidationError("Debe enviar al menos una novedad")

        parsed = [self._parse_novedad(item, i + 1 if numbered else None) for i, item in enumerate(items)]

        known: set[str] = set()
        for n in parsed:
            if n.employee_id in known:
                continue
            if not self._employees.get_by_id(n.employee_id):
                raise ValidationError(f"Empleado {n.employee_id} no encontrado")
            known.add(n.employee_id)

        ids = self._payroll.create_novedades(period_id=period.period_id, novedades=parsed, created_by=user_id)
        logger.info("%s novedad(es) registered in period %s", len(ids), period.period_id)
        return [n for n in (self._payroll.get_novedad(i) for i in ids) if n]

    def list_novedades(self, period_id: int, *, employee_id: Optional[str] = None) -> list[PayrollNovedad]:
        period = self.get_period(period_id)
        return list(self._payroll.list_novedades(period_id=period.period_id, employee_id=employee_id))

    def delete_novedad(self, novedad_id: int) -> None:
        novedad = self._payroll.get_novedad(int(novedad_id))
        if not novedad:
            raise NotFoundError(f"Novedad {novedad_id} no encontrada")
        period = self.get_period(novedad.period_id)
        self._require_status(period, PeriodStatus.OPEN, "eliminar novedades de")
        self._payroll.delete_novedad(novedad.novedad_id)
        logger.info("Novedad %s deleted from period %s", novedad.novedad_id, period.period_id)

    # -------- lifecycle --------
    def liquidate_period(
        self,
        *,
        period_id: int,
        employee_ids: Optional[Iterable[str]] = None,
        user_id: Optional[int] = None,
    ) -> LiquidationSummary:
        period = self.get_period(period_id)
        self._require_status(period, PeriodStatus.OPEN, "liquidar")

        if employee_ids is None:
            ids = [e.employee_id for e in self._employees.list_all(status=EmployeeStatus.ACTIVE)]
        else:
            ids = list(dict.fromkeys(str(e) for e in employee_ids))
        if not ids:
            raise ValidationError("No hay empleados para liquidar")

        params = self._config.load_parameters()
        results = []
        for employee_id in ids:
            try:
                results.append(self._calculation.calculate_payroll(employee_id, period, params=params))
            except ValidationError:
                logger.error("Liquidation of period %s aborted at employee %s", period.period_id, employee_id)
                raise

        self._payroll.save_liquidation(
            period_id=period.period_id,
            results=results,
            user_id=user_id,
            at=now_local(),
        )

        summary = LiquidationSummary(
            period_id=period.period_id,
            employees=len(results),
            total_earned=sum((r.total_earned for r in results), ZERO),
            total_deducted=sum((r.total_deducted for r in results), ZERO),
            total_net=sum((r.net_pay for r in results), ZERO),
        )
        logger.info(
            "Payroll period %s liquidated: %s employees, net %s",
            period.period_id,
            summary.employees,
            summary.total_net,
        )
        return summary

    def approve_period(self, *, period_id: int, user_id: Optional[int] = None, comment: Optional[str] = None) -> PayrollPeriod:
        period = self.get_period(period_id)
        self._require_status(period, PeriodStatus.LIQUIDATED, "aprobar")
        self._payroll.update_period_status(period.period_id, status=PeriodStatus.APPROVED, user_id=user_id, at=now_local())
        logger.info("Payroll period %s approved by user %s%s", period.period_id, user_id, f": {comment}" if comment else "")
        return self.get_period(period.period_id)

    def close_period(self, *, period_id: int, user_id: Optional[int] = None, comment: Optional[str] = None) -> PayrollPeriod:
        period = self.get_period(period_id)
        self._require_status(period, PeriodStatus.APPROVED, "cerrar")
        self._payroll.update_period_status(period.period_id, status=PeriodStatus.CLOSED, user_id=user_id, at=now_local())
        logger.info("Payroll period %s closed by user %s%s", period.period_id, user_id, f": {comment}" if comment else "")
        return self.get_period(period.period_id)

    # -------- entries --------
    def list_entries(self, period_id: int) -> list[PayrollEntry]:
        period = self.get_period(period_id)
        return list(self._payroll.list_entries(period.period_id))

    def get_entry(self, *, period_id: int, employee_id: str) -> PayrollEntry:
        period = self.get_period(period_id)
        entry = self._payroll.get_entry(period_id=period.period_id, employee_id=str(employee_id))
        if not entry:
            raise NotFoundError(f"No hay liquidación del empleado {employee_id} en el periodo {period.period_id}")
        return entry
