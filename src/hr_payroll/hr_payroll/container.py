from __future__ import annotations

from dataclasses import dataclass

from .contracts.mysql_contract_repository import MySQLContractRepository
from .contracts.repository import ContractRepository
from .contracts.service import ContractService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .payroll.calculation_service import PayrollCalculationService
from .payroll.config_service import PayrollConfigService
from .payroll.export import PayrollExportService
from .payroll.mysql_config_repository import MySQLPayrollConfigRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollConfigRepository, PayrollRepository
from .payroll.service import PayrollService
from .settlements.calculation_service import ContractSettlementCalculationService
from .settlements.mysql_settlement_repository import MySQLSettlementRepository
from .settlements.repository import SettlementRepository
from .settlements.service import ContractSettlementService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    employees_repo: EmployeeRepository
    contracts_repo: ContractRepository
    payroll_config_repo: PayrollConfigRepository
    payroll_repo: PayrollRepository
    settlements_repo: SettlementRepository

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    contract_service: ContractService
    payroll_config_service: PayrollConfigService
    payroll_calculation_service: PayrollCalculationService
    payroll_service: PayrollService
    payroll_export_service: PayrollExportService
    settlement_calculation_service: ContractSettlementCalculationService
    settlement_service: ContractSettlementService


def wire_container(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    contracts_repo: ContractRepository,
    payroll_config_repo: PayrollConfigRepository,
    payroll_repo: PayrollRepository,
    settlements_repo: SettlementRepository,
) -> Container:
    """Build every service on top of the given repositories."""
    payroll_config_service = PayrollConfigService(payroll_config_repo)
    payroll_calculation_service = PayrollCalculationService(
        employees_repo,
        contracts_repo,
        payroll_repo,
        payroll_config_service,
    )
    settlement_calculation_service = ContractSettlementCalculationService(payroll_repo)

    return Container(
        users_repo=users_repo,
        employees_repo=employees_repo,
        contracts_repo=contracts_repo,
        payroll_config_repo=payroll_config_repo,
        payroll_repo=payroll_repo,
        settlements_repo=settlements_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        employee_service=EmployeeService(employees_repo),
        contract_service=ContractService(contracts_repo, employees_repo),
        payroll_config_service=payroll_config_service,
        payroll_calculation_service=payroll_calculation_service,
        payroll_service=PayrollService(
            payroll_repo,
            employees_repo,
            payroll_calculation_service,
            payroll_config_service,
        ),
        payroll_export_service=PayrollExportService(payroll_repo, employees_repo),
        settlement_calculation_service=settlement_calculation_service,
        settlement_service=ContractSettlementService(
            settlements_repo,
            contracts_repo,
            settlement_calculation_service,
        ),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        contracts_repo=MySQLContractRepository(conn),
        payroll_config_repo=MySQLPayrollConfigRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        settlements_repo=MySQLSettlementRepository(conn),
    )
