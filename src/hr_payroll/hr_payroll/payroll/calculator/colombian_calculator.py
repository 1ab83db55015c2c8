from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from ...common.datetime_utils import commercial_days
from ...common.money import ZERO, round_money
from ...contracts.model import Contract
from ...core.constants import (
    COMMERCIAL_MONTH_DAYS,
    SOLIDARITY_FUND_THRESHOLD_WAGES,
    TRANSPORT_ALLOWANCE_CAP_WAGES,
)
from ...core.enums import NovedadCategory
from ...employees.model import Employee
from ..model import PayrollCalculationResult, PayrollNovedad, PayrollParameters, PayrollPeriod
from .base import PayrollCalculator

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

OVERTIME = "overtime"
COMMISSIONS = "commissions"
BONUSES = "bonuses"
OTHER = "other_earnings"


def classify_earning(novedad_type: str) -> str:
    """Bucket an earning novedad by the words in its type."""
    t = (novedad_type or "").lower()
    if "horas_extras" in t or "horas_dominicales" in t:
        return OVERTIME
    if "comision" in t:
        return COMMISSIONS
    if "bono" in t or "bonificacion" in t:
        return BONUSES
    return OTHER


@dataclass
class _Earnings:
    totals: dict = field(default_factory=lambda: {OVERTIME: ZERO, COMMISSIONS: ZERO, BONUSES: ZERO, OTHER: ZERO})
    items: list = field(default_factory=list)


class ColombianPayrollCalculator(PayrollCalculator):
    """Colombian statutory payroll on the 30-day commercial month.

    Earnings: prorated base salary, novedades and transport allowance.
    Deductions: health and pension over the contribution base (earnings
    without transport allowance), solidarity fund from 4 minimum wages,
    withholding tax over the UVT threshold and deduction novedades.
    """

    def calculate(
        self,
        *,
        employee: Employee,
        contract: Contract,
        period: PayrollPeriod,
        novedades: Sequence[PayrollNovedad],
        params: PayrollParameters,
    ) -> PayrollCalculationResult:
        days = commercial_days(period.start_date, period.end_date, period.day_cap)

        monthly_salary = contract.salary if contract.salary and contract.salary > ZERO else params.minimum_wage
        base_salary = round_money(self._prorate(monthly_salary, days))

        earnings = self._earnings(novedades)
        overtime = round_money(earnings.totals[OVERTIME])
        commissions = round_money(earnings.totals[COMMISSIONS])
        bonuses = round_money(earnings.totals[BONUSES])
        other_earnings = round_money(earnings.totals[OTHER])

        transport_allowance = ZERO
        if monthly_salary <= params.minimum_wage * TRANSPORT_ALLOWANCE_CAP_WAGES:
            transport_allowance = round_money(self._prorate(params.transport_allowance, days))

        total_earned = base_salary + overtime + commissions + bonuses + other_earnings + transport_allowance

        minimum_for_days = round_money(self._prorate(params.minimum_wage, days))
        if total_earned < minimum_for_days:
            logger.warning(
                "Employee %s earns %s in period %s, below the prorated minimum wage %s",
                employee.employee_id,
                total_earned,
                period.period_id,
                minimum_for_days,
            )

        contribution_base = total_earned - transport_allowance
        health = round_money(contribution_base * params.health_percentage / HUNDRED)
        pension = round_money(contribution_base * params.pension_percentage / HUNDRED)

        solidarity_fund = ZERO
        if monthly_salary >= params.minimum_wage * SOLIDARITY_FUND_THRESHOLD_WAGES:
            solidarity_fund = round_money(contribution_base * params.solidarity_fund_percentage / HUNDRED)

        withholding_tax = ZERO
        threshold = params.withholding_threshold
        if monthly_salary > threshold:
            withholding_tax = round_money(
                (monthly_salary - threshold) * params.withholding_rate / HUNDRED * days / COMMERCIAL_MONTH_DAYS
            )

        deduction_items = []
        other_deductions = ZERO
        for n in novedades:
            if n.category != NovedadCategory.DEDUCTION:
                continue
            amount = n.total
            other_deductions += amount
            deduction_items.append(self._novedad_detail(n, amount))
        other_deductions = round_money(other_deductions)

        total_deducted = health + pension + solidarity_fund + withholding_tax + other_deductions
        net_pay = total_earned - total_deducted

        details = {
            "employee": {
                "employee_id": employee.employee_id,
                "name": employee.full_name,
                "identification": employee.identification_number,
                "contract_id": contract.contract_id,
                "contract_type": contract.contract_type,
                "position": contract.position,
            },
            "period": {
                "period_id": period.period_id,
                "period_type": period.period_type,
                "start_date": period.start_date,
                "end_date": period.end_date,
                "days": days,
            },
            "earnings": {
                "monthly_salary": monthly_salary,
                "base_salary": base_salary,
                "overtime": overtime,
                "commissions": commissions,
                "bonuses": bonuses,
                "other_earnings": other_earnings,
                "transport_allowance": transport_allowance,
                "novedades": earnings.items,
                "total": total_earned,
            },
            "deductions": {
                "contribution_base": contribution_base,
                "health": health,
                "pension": pension,
                "solidarity_fund": solidarity_fund,
                "withholding_tax": withholding_tax,
                "other_deductions": other_deductions,
                "novedades": deduction_items,
                "total": total_deducted,
            },
            "net_pay": net_pay,
            "parameters": {
                "minimum_wage": params.minimum_wage,
                "transport_allowance": params.transport_allowance,
                "health_percentage": params.health_percentage,
                "pension_percentage": params.pension_percentage,
                "solidarity_fund_percentage": params.solidarity_fund_percentage,
                "withholding_uvt": params.withholding_uvt,
                "uvt_value": params.uvt_value,
                "withholding_rate": params.withholding_rate,
            },
        }

        return PayrollCalculationResult(
            employee_id=employee.employee_id,
            days=days,
            base_salary=base_salary,
            overtime=overtime,
            commissions=commissions,
            bonuses=bonuses,
            other_earnings=other_earnings,
            transport_allowance=transport_allowance,
            total_earned=total_earned,
            health=health,
            pension=pension,
            solidarity_fund=solidarity_fund,
            withholding_tax=withholding_tax,
            other_deductions=other_deductions,
            total_deducted=total_deducted,
            net_pay=net_pay,
            details=details,
        )

    @staticmethod
    def _prorate(monthly: Decimal, days: int) -> Decimal:
        return monthly / COMMERCIAL_MONTH_DAYS * days

    def _earnings(self, novedades: Sequence[PayrollNovedad]) -> _Earnings:
        out = _Earnings()
        for n in novedades:
            if n.category != NovedadCategory.EARNING:
                continue
            bucket = classify_earning(n.novedad_type)
            amount = n.total
            out.totals[bucket] += amount
            item = self._novedad_detail(n, amount)
            item["bucket"] = bucket
            out.items.append(item)
        return out

    @staticmethod
    def _novedad_detail(n: PayrollNovedad, amount: Decimal) -> dict:
        return {
            "novedad_id": n.novedad_id,
            "type": n.novedad_type,
            "amount": n.amount,
            "quantity": n.quantity,
            "total": round_money(amount),
            "date": n.novedad_date,
            "comment": n.comment,
        }
