from __future__ import annotations

from typing import Optional

from ..contracts.repository import ContractRepository
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.colombian_calculator import ColombianPayrollCalculator
from .config_service import PayrollConfigService
from .model import PayrollCalculationResult, PayrollParameters, PayrollPeriod
from .repository import PayrollRepository


class PayrollCalculationService:
    """Loads employee, contract and novedades and delegates to the calculator."""

    def __init__(
        self,
        employees: EmployeeRepository,
        contracts: ContractRepository,
        payroll: PayrollRepository,
        config: PayrollConfigService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._contracts = contracts
        self._payroll = payroll
        self._config = config
        self._calculator = calculator or ColombianPayrollCalculator()

    def calculate_payroll(
        self,
        employee_id: str,
        period: PayrollPeriod,
        *,
        params: Optional[PayrollParameters] = None,
    ) -> PayrollCalculationResult:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError(f"Empleado {employee_id} no encontrado")
        if not employee.is_active:
            raise ValidationError(f"Empleado {employee.full_name} no está activo")

        contract = self._contracts.get_current_for_employee(employee_id)
        if not contract:
            raise ValidationError(f"Empleado {employee.full_name} no tiene contrato vigente")

        novedades = self._payroll.list_novedades(period_id=period.period_id, employee_id=employee_id)

        return self._calculator.calculate(
            employee=employee,
            contract=contract,
            period=period,
            novedades=novedades,
            params=params or self._config.load_parameters(),
        )
