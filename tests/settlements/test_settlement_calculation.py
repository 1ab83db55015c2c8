from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.hr_payroll.hr_payroll.core.enums import IndemnizationType, PeriodType
from src.hr_payroll.hr_payroll.core.exceptions import ValidationError
from src.hr_payroll.hr_payroll.payroll.model import PayrollCalculationResult


def _entry(employee_id: str, base_salary: str, days: int) -> PayrollCalculationResult:
    zero = Decimal("0")
    return PayrollCalculationResult(
        employee_id=employee_id,
        days=days,
        base_salary=Decimal(base_salary),
        overtime=zero,
        commissions=zero,
        bonuses=zero,
        other_earnings=zero,
        transport_allowance=zero,
        total_earned=Decimal(base_salary),
        health=zero,
        pension=zero,
        solidarity_fund=zero,
        withholding_tax=zero,
        other_deductions=zero,
        total_deducted=zero,
        net_pay=Decimal(base_salary),
    )


def test_full_year_indefinite_contract_without_history(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(world.add_contract(emp, salary="3600000", start_date=date(2023, 1, 1)))
    calc = world.container.settlement_calculation_service

    # Jan 1 to Dec 26 is 360 days inclusive
    result = calc.calculate_settlement(contract, date(2023, 12, 26), IndemnizationType.UNJUST_DISMISSAL)

    assert result.days_worked == 360
    assert result.average_salary is None
    assert len(result.warnings) == 1
    assert result.severance == Decimal("3600000.00")
    assert result.severance_interest == Decimal("432000.00")
    assert result.service_bonus == Decimal("3600000.00")
    assert result.vacation_pay == Decimal("1800000.00")
    assert result.indemnization == Decimal("3600000.00")
    assert result.total == Decimal("13032000.00")
    assert result.details["severance"]["inputs"]["days_worked"] == 360


def test_interest_uses_rounded_severance(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(world.add_contract(emp, salary="3000000", start_date=date(2023, 1, 1)))

    result = world.container.settlement_calculation_service.calculate_settlement(contract, date(2023, 12, 31))

    assert result.days_worked == 365
    assert result.severance == Decimal("3041666.67")
    assert result.severance_interest == Decimal("370069.44")
    assert result.vacation_pay == Decimal("1520833.33")
    assert result.indemnization == Decimal("0")


def test_early_termination_is_half_of_unjust_dismissal(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(world.add_contract(emp, salary="3600000", start_date=date(2023, 1, 1)))

    result = world.container.settlement_calculation_service.calculate_settlement(
        contract, date(2023, 12, 26), IndemnizationType.EARLY_TERMINATION
    )

    assert result.indemnization == Decimal("1800000.00")
    assert result.details["indemnization"]["inputs"]["indemnization_type"] == "terminacion_anticipada"


def test_fixed_term_without_end_date_pays_months_left_of_the_year(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(
        world.add_contract(emp, salary="2000000", start_date=date(2024, 1, 1), contract_type="fijo")
    )

    result = world.container.settlement_calculation_service.calculate_settlement(
        contract, date(2024, 3, 30), IndemnizationType.UNJUST_DISMISSAL
    )

    assert result.days_worked == 90
    assert result.indemnization == Decimal("18000000.00")


def test_fixed_term_with_end_date_pays_remaining_days(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(
        world.add_contract(
            emp,
            salary="2000000",
            start_date=date(2024, 1, 1),
            contract_type="fijo",
            end_date=date(2024, 6, 30),
        )
    )

    result = world.container.settlement_calculation_service.calculate_settlement(
        contract, date(2024, 3, 30), IndemnizationType.UNJUST_DISMISSAL
    )

    # 92 days between Mar 30 and Jun 30
    assert result.indemnization == Decimal("6133333.33")


def test_fixed_term_over_a_year_has_no_indemnization(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(
        world.add_contract(emp, salary="2000000", start_date=date(2022, 1, 1), contract_type="Fijo")
    )

    result = world.container.settlement_calculation_service.calculate_settlement(
        contract, date(2023, 6, 30), IndemnizationType.UNJUST_DISMISSAL
    )

    assert result.indemnization == Decimal("0")


def test_average_salary_uses_monthly_equivalent_of_recent_entries(world):
    emp = world.add_employee()
    other = world.add_employee("2002")
    contract = world.contracts.get_by_id(world.add_contract(emp, salary="4000000", start_date=date(2023, 1, 1)))
    may = world.add_period(date(2023, 5, 1), date(2023, 5, 15), PeriodType.BIWEEKLY)
    june = world.add_period(date(2023, 6, 1), date(2023, 6, 30))
    old = world.add_period(date(2022, 1, 1), date(2022, 1, 31))
    world.payroll.save_liquidation(period_id=may, results=[_entry(emp, "1500000", 15)], user_id=1, at=None)
    world.payroll.save_liquidation(
        period_id=june, results=[_entry(emp, "2000000", 30), _entry(other, "9000000", 30)], user_id=1, at=None
    )
    world.payroll.save_liquidation(period_id=old, results=[_entry(emp, "100", 30)], user_id=1, at=None)

    result = world.container.settlement_calculation_service.calculate_settlement(contract, date(2023, 12, 26))

    assert result.average_salary == Decimal("2500000.00")
    assert result.last_salary == Decimal("4000000")
    assert result.warnings == []
    # prestaciones use the average, 360 days
    assert result.severance == Decimal("2500000.00")


def test_settlement_date_before_start_is_rejected(world):
    emp = world.add_employee()
    contract = world.contracts.get_by_id(world.add_contract(emp, salary="2000000", start_date=date(2024, 1, 1)))

    with pytest.raises(ValidationError):
        world.container.settlement_calculation_service.calculate_settlement(contract, date(2023, 12, 31))
