"""Ejemplo: usar la capa de servicios sin Flask.

Liquida en memoria la nómina de un empleado para el último periodo abierto,
sin guardar nada.
"""

import importlib

from config import get_settings_module

from src.hr_payroll.hr_payroll.container import build_container
from src.hr_payroll.hr_payroll.core.enums import EmployeeStatus, PeriodStatus


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    open_periods = [p for p in container.payroll_service.list_periods() if p.status == PeriodStatus.OPEN]
    employees = container.employee_service.list_employees(status=EmployeeStatus.ACTIVE.value)
    if not open_periods or not employees:
        print("No hay periodos abiertos o empleados activos")
        return

    result = container.payroll_calculation_service.calculate_payroll(employees[0].employee_id, open_periods[0])
    print(f"{employees[0].full_name}: devengado={result.total_earned} deducido={result.total_deducted} neto={result.net_pay}")


if __name__ == "__main__":
    main()
