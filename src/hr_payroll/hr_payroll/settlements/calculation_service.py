"""Final contract settlement (liquidación definitiva) under the Colombian labour code.

- Cesantías (Art. 249 CST): one month of salary per year worked.
- Interest on cesantías (Art. 99 Ley 50/1990): 12% a year over cesantías.
- Prima de servicios (Art. 306 CST): 30 days of salary per year.
- Vacations (Art. 186 CST): 15 working days per year.
- Indemnization (Art. 64 CST) for dismissal without just cause.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import inclusive_days, months_before
from ..common.money import ZERO, round_money
from ..contracts.model import Contract
from ..core.constants import (
    COMMERCIAL_MONTH_DAYS,
    COMMERCIAL_YEAR_DAYS,
    SALARY_HISTORY_MONTHS,
    SEVERANCE_INTEREST_RATE,
    VACATION_DIVISOR,
)
from ..core.enums import IndemnizationType
from ..core.exceptions import ValidationError
from ..payroll.repository import PayrollRepository
from .model import SettlementCalculationResult

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = Decimal("12")
EARLY_TERMINATION_FACTOR = Decimal("0.5")


def _detail(formula: str, value: Decimal, note: Optional[str] = None, **inputs) -> dict:
    return {"formula": formula, "inputs": inputs, "value": value, "note": note}


class ContractSettlementCalculationService:
    def __init__(self, payroll: PayrollRepository):
        self._payroll = payroll

    def calculate_settlement(
        self,
        contract: Contract,
        settlement_date: date,
        indemnization_type: Optional[IndemnizationType] = None,
    ) -> SettlementCalculationResult:
        if settlement_date < contract.start_date:
            raise ValidationError("La fecha de liquidación no puede ser anterior al inicio del contrato")

        warnings: list[str] = []
        days = inclusive_days(contract.start_date, settlement_date)
        last_salary = contract.salary
        average_salary = self.average_salary(contract.employee_id, settlement_date)

        if average_salary is None:
            warnings.append(
                "No se encontraron registros salariales históricos. "
                "Se usa el último salario para todos los cálculos."
            )
            logger.warning("No payroll history for employee %s, settling with last salary", contract.employee_id)

        salary = average_salary if average_salary is not None else last_salary

        severance = round_money(salary * days / COMMERCIAL_YEAR_DAYS)
        severance_interest = round_money(severance * days * SEVERANCE_INTEREST_RATE / COMMERCIAL_YEAR_DAYS)
        service_bonus = round_money(salary * days / COMMERCIAL_YEAR_DAYS)
        vacation_pay = round_money(salary * days / VACATION_DIVISOR)

        if indemnization_type is None:
            indemnization = ZERO
            indemnization_detail = _detail("No aplica", ZERO, "Sin indemnización")
        else:
            indemnization, indemnization_detail = self._indemnization(
                contract, last_salary, days, settlement_date, indemnization_type
            )

        total = severance + severance_interest + service_bonus + vacation_pay + indemnization

        details = {
            "severance": _detail(
                "(Salario × Días trabajados) ÷ 360",
                severance,
                salary=salary,
                days_worked=days,
            ),
            "severance_interest": _detail(
                "(Cesantías × Días trabajados × 12%) ÷ 360",
                severance_interest,
                severance=severance,
                days_worked=days,
                rate=SEVERANCE_INTEREST_RATE,
            ),
            "service_bonus": _detail(
                "(Salario × Días trabajados) ÷ 360",
                service_bonus,
                "Prima equivalente a 30 días de salario por año (15 días por semestre)",
                salary=salary,
                days_worked=days,
            ),
            "vacation_pay": _detail(
                "(Salario × Días trabajados) ÷ 720",
                vacation_pay,
                "15 días hábiles de vacaciones por año",
                salary=salary,
                days_worked=days,
            ),
            "indemnization": indemnization_detail,
        }

        logger.info("Settlement calculated for contract %s: %s days, total %s", contract.contract_id, days, total)
        return SettlementCalculationResult(
            contract_id=contract.contract_id,
            employee_id=contract.employee_id,
            settlement_date=settlement_date,
            contract_start_date=contract.start_date,
            days_worked=days,
            last_salary=last_salary,
            average_salary=average_salary,
            severance=severance,
            severance_interest=severance_interest,
            service_bonus=service_bonus,
            vacation_pay=vacation_pay,
            indemnization=indemnization,
            indemnization_type=indemnization_type,
            total=total,
            details=details,
            warnings=warnings,
        )

    def average_salary(self, employee_id: str, settlement_date: date) -> Optional[Decimal]:
        """Mean monthly-equivalent base salary over the last 12 months of payroll."""
        entries = self._payroll.list_entries_for_employee(
            employee_id=employee_id,
            period_end_from=months_before(settlement_date, SALARY_HISTORY_MONTHS),
            period_end_to=settlement_date,
        )
        monthly = [e.base_salary / e.days * COMMERCIAL_MONTH_DAYS for e in entries if e.days > 0]
        if not monthly:
            return None
        return round_money(sum(monthly, ZERO) / len(monthly))

    def _indemnization(
        self,
        contract: Contract,
        salary: Decimal,
        days: int,
        settlement_date: date,
        indemnization_type: IndemnizationType,
    ) -> tuple[Decimal, dict]:
        amount, detail = self._unjust_dismissal(contract, salary, days, settlement_date)
        if indemnization_type == IndemnizationType.EARLY_TERMINATION:
            amount = round_money(amount * EARLY_TERMINATION_FACTOR)
            detail = _detail(
                "Indemnización sin justa causa × 50%",
                amount,
                "Retiro voluntario antes de cumplir el plazo pactado",
                base=detail,
            )
        detail["inputs"]["indemnization_type"] = indemnization_type.value
        return amount, detail

    @staticmethod
    def _unjust_dismissal(contract: Contract, salary: Decimal, days: int, settlement_date: date) -> tuple[Decimal, dict]:
        if contract.is_indefinite:
            amount = round_money(salary * days / COMMERCIAL_YEAR_DAYS)
            return amount, _detail(
                "Salario × Años trabajados",
                amount,
                "30 días de salario por cada año de servicio (contrato indefinido)",
                salary=salary,
                days_worked=days,
                contract_type=contract.contract_type,
            )

        if contract.end_date and contract.end_date > settlement_date:
            remaining = (contract.end_date - settlement_date).days
            amount = round_money(salary / COMMERCIAL_MONTH_DAYS * remaining)
            return amount, _detail(
                "(Salario ÷ 30) × Días faltantes del contrato",
                amount,
                "Salarios del tiempo faltante del contrato a término fijo",
                salary=salary,
                remaining_days=remaining,
                contract_end_date=contract.end_date,
                contract_type=contract.contract_type,
            )

        months = Decimal(days) / COMMERCIAL_MONTH_DAYS
        if months < MONTHS_PER_YEAR:
            amount = round_money(salary * (MONTHS_PER_YEAR - months))
            return amount, _detail(
                "Salario × Meses faltantes hasta completar año",
                amount,
                "Salarios correspondientes al tiempo faltante del contrato a término fijo",
                salary=salary,
                months_worked=round_money(months),
                contract_type=contract.contract_type,
            )

        return ZERO, _detail(
            "No aplica",
            ZERO,
            "Contrato a término fijo completado, no aplica indemnización",
            salary=salary,
            months_worked=round_money(months),
            contract_type=contract.contract_type,
        )
