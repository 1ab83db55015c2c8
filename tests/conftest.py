"""In-memory repositories shared by the service and controller tests."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

import pytest

from src.hr_payroll.hr_payroll.container import Container, wire_container
from src.hr_payroll.hr_payroll.contracts.model import Contract
from src.hr_payroll.hr_payroll.core.enums import (
    EmployeeStatus,
    IdentificationType,
    PeriodStatus,
    PeriodType,
    Role,
    SettlementStatus,
)
from src.hr_payroll.hr_payroll.employees.model import Employee
from src.hr_payroll.hr_payroll.payroll.model import (
    PayrollConfigItem,
    PayrollEntry,
    PayrollExportLog,
    PayrollNovedad,
    PayrollPeriod,
)
from src.hr_payroll.hr_payroll.settlements.model import ContractSettlement, SettlementAudit
from src.hr_payroll.hr_payroll.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, *, full_name: str, username: str, password_hash: str, role: Role) -> int:
        self._id += 1
        self.users[self._id] = User(
            user_id=self._id,
            full_name=full_name,
            username=username,
            password_hash=password_hash,
            role=role,
        )
        return self._id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = dataclasses.replace(self.users[user_id], is_active=is_active)
        return True

    def list_all(self):
        return list(self.users.values())


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[str, Employee] = {}
        self._id = 0

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    def get_by_identification(self, identification_number: str) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.identification_number == identification_number), None)

    def create(self, *, identification_type, identification_number, first_name, last_name, email, phone) -> str:
        self._id += 1
        employee_id = f"emp-{self._id}"
        self.employees[employee_id] = Employee(
            employee_id=employee_id,
            identification_type=identification_type,
            identification_number=identification_number,
            first_name=first_name,
            last_name=last_name,
            status=EmployeeStatus.ACTIVE,
            email=email,
            phone=phone,
        )
        return employee_id

    def list_all(self, *, status: Optional[EmployeeStatus] = None):
        return [e for e in self.employees.values() if status is None or e.status == status]

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        if employee_id not in self.employees:
            return False
        self.employees[employee_id] = dataclasses.replace(self.employees[employee_id], status=status)
        return True


class InMemoryContracts:
    def __init__(self):
        self.contracts: dict[str, Contract] = {}
        self._id = 0

    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        return self.contracts.get(contract_id)

    def get_current_for_employee(self, employee_id: str) -> Optional[Contract]:
        current = [c for c in self.contracts.values() if c.employee_id == employee_id and c.is_current]
        current.sort(key=lambda c: c.start_date, reverse=True)
        return current[0] if current else None

    def list_for_employee(self, employee_id: str):
        items = [c for c in self.contracts.values() if c.employee_id == employee_id]
        return sorted(items, key=lambda c: c.start_date, reverse=True)

    def create(self, *, employee_id, contract_type, position, department, salary, start_date, end_date) -> str:
        for cid, c in list(self.contracts.items()):
            if c.employee_id == employee_id and c.is_current:
                self.contracts[cid] = dataclasses.replace(c, is_current=False)
        self._id += 1
        contract_id = f"con-{self._id}"
        self.contracts[contract_id] = Contract(
            contract_id=contract_id,
            employee_id=employee_id,
            contract_type=contract_type,
            position=position,
            department=department,
            salary=salary,
            start_date=start_date,
            end_date=end_date,
        )
        return contract_id


class InMemoryPayrollConfig:
    def __init__(self, values: Optional[dict[str, Any]] = None):
        self.items: dict[str, PayrollConfigItem] = {
            k: PayrollConfigItem(key=k, value=v) for k, v in (values or {}).items()
        }

    def get(self, key: str) -> Optional[PayrollConfigItem]:
        return self.items.get(key)

    def upsert(self, *, key: str, value: Any, description: Optional[str], updated_by: Optional[int]) -> None:
        old = self.items.get(key)
        self.items[key] = PayrollConfigItem(
            key=key,
            value=value,
            description=description if description is not None else (old.description if old else None),
            updated_by=updated_by,
        )

    def list_all(self):
        return list(self.items.values())


_STATUS_AUDIT = {
    PeriodStatus.LIQUIDATED: ("liquidated_by", "liquidated_at"),
    PeriodStatus.APPROVED: ("approved_by", "approved_at"),
    PeriodStatus.CLOSED: ("closed_by", "closed_at"),
}


class InMemoryPayroll:
    def __init__(self):
        self.periods: dict[int, PayrollPeriod] = {}
        self.novedades: dict[int, PayrollNovedad] = {}
        self.entries: dict[tuple[int, str], PayrollEntry] = {}
        self.export_logs: list[PayrollExportLog] = []
        self._ids = {"period": 0, "novedad": 0, "entry": 0, "export": 0}

    def _next(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def create_period(self, *, period_type, start_date, end_date, description, created_by) -> int:
        period_id = self._next("period")
        self.periods[period_id] = PayrollPeriod(
            period_id=period_id,
            period_type=period_type,
            start_date=start_date,
            end_date=end_date,
            status=PeriodStatus.OPEN,
            description=description,
            created_by=created_by,
        )
        return period_id

    def get_period(self, period_id: int) -> Optional[PayrollPeriod]:
        return self.periods.get(period_id)

    def list_periods(self):
        return sorted(self.periods.values(), key=lambda p: p.start_date, reverse=True)

    def find_overlapping_period(self, *, start_date: date, end_date: date) -> Optional[PayrollPeriod]:
        for p in self.periods.values():
            if p.status != PeriodStatus.CLOSED and p.start_date <= end_date and p.end_date >= start_date:
                return p
        return None

    def update_period_status(self, period_id: int, *, status, user_id, at) -> bool:
        if period_id not in self.periods:
            return False
        by_col, at_col = _STATUS_AUDIT[status]
        self.periods[period_id] = dataclasses.replace(
            self.periods[period_id], status=status, **{by_col: user_id, at_col: at}
        )
        return True

    def create_novedades(self, *, period_id, novedades, created_by) -> list[int]:
        ids = []
        for n in novedades:
            novedad_id = self._next("novedad")
            self.novedades[novedad_id] = PayrollNovedad(
                novedad_id=novedad_id,
                period_id=period_id,
                employee_id=n.employee_id,
                novedad_type=n.novedad_type,
                category=n.category,
                amount=n.amount,
                quantity=n.quantity,
                novedad_date=n.novedad_date,
                comment=n.comment,
                metadata=n.metadata,
                created_by=created_by,
            )
            ids.append(novedad_id)
        return ids

    def get_novedad(self, novedad_id: int) -> Optional[PayrollNovedad]:
        return self.novedades.get(novedad_id)

    def list_novedades(self, *, period_id: int, employee_id: Optional[str] = None):
        return [
            n
            for n in self.novedades.values()
            if n.period_id == period_id and (employee_id is None or n.employee_id == employee_id)
        ]

    def delete_novedad(self, novedad_id: int) -> bool:
        return self.novedades.pop(novedad_id, None) is not None

    def save_liquidation(self, *, period_id, results, user_id, at) -> None:
        for r in results:
            key = (period_id, r.employee_id)
            existing = self.entries.get(key)
            values = {f.name: getattr(r, f.name) for f in dataclasses.fields(r)}
            self.entries[key] = PayrollEntry(
                entry_id=existing.entry_id if existing else self._next("entry"),
                period_id=period_id,
                calculated_by=user_id,
                calculated_at=at,
                **values,
            )
        self.update_period_status(period_id, status=PeriodStatus.LIQUIDATED, user_id=user_id, at=at)

    def get_entry(self, *, period_id: int, employee_id: str) -> Optional[PayrollEntry]:
        return self.entries.get((period_id, employee_id))

    def list_entries(self, period_id: int):
        items = [e for (pid, _), e in self.entries.items() if pid == period_id]
        return sorted(items, key=lambda e: e.net_pay, reverse=True)

    def list_entries_for_employee(self, *, employee_id: str, period_end_from: date, period_end_to: date):
        out = []
        for (pid, eid), e in self.entries.items():
            period = self.periods.get(pid)
            if eid == employee_id and period and period_end_from <= period.end_date <= period_end_to:
                out.append(e)
        return out

    def create_export_log(self, *, period_id, export_format, filename, total_rows, exported_by) -> int:
        export_id = self._next("export")
        self.export_logs.append(
            PayrollExportLog(
                export_id=export_id,
                period_id=period_id,
                export_format=export_format,
                filename=filename,
                total_rows=total_rows,
                exported_by=exported_by,
                exported_at=datetime(2024, 7, 1, 9, 0),
            )
        )
        return export_id

    def list_export_logs(self, period_id: int):
        return [log for log in self.export_logs if log.period_id == period_id]


class InMemorySettlements:
    def __init__(self):
        self.settlements: dict[str, ContractSettlement] = {}
        self.audit: list[SettlementAudit] = []
        self._id = 0

    def create(self, *, result, details, notes, created_by) -> str:
        self._id += 1
        settlement_id = f"set-{self._id}"
        self.settlements[settlement_id] = ContractSettlement(
            settlement_id=settlement_id,
            contract_id=result.contract_id,
            employee_id=result.employee_id,
            settlement_date=result.settlement_date,
            contract_start_date=result.contract_start_date,
            contract_end_date=result.settlement_date,
            days_worked=result.days_worked,
            last_salary=result.last_salary,
            average_salary=result.average_salary,
            severance=result.severance,
            severance_interest=result.severance_interest,
            service_bonus=result.service_bonus,
            vacation_pay=result.vacation_pay,
            indemnization=result.indemnization,
            indemnization_type=result.indemnization_type,
            other_concepts=Decimal("0"),
            deductions=Decimal("0"),
            total=result.total,
            status=SettlementStatus.DRAFT,
            details=details,
            notes=notes,
            created_by=created_by,
            updated_by=created_by,
        )
        return settlement_id

    def get_by_id(self, settlement_id: str) -> Optional[ContractSettlement]:
        return self.settlements.get(settlement_id)

    def get_by_contract(self, contract_id: str) -> Optional[ContractSettlement]:
        return next((s for s in self.settlements.values() if s.contract_id == contract_id), None)

    def list_all(self):
        return list(self.settlements.values())

    def list_by_employee(self, employee_id: str):
        return [s for s in self.settlements.values() if s.employee_id == employee_id]

    def update_amounts(self, settlement_id, *, amounts, total, details, notes, updated_by, audits) -> bool:
        if settlement_id not in self.settlements:
            return False
        self.settlements[settlement_id] = dataclasses.replace(
            self.settlements[settlement_id],
            total=total,
            details=details,
            notes=notes,
            updated_by=updated_by,
            **amounts,
        )
        for a in audits:
            self.audit.append(
                SettlementAudit(
                    audit_id=len(self.audit) + 1,
                    settlement_id=settlement_id,
                    field_name=a.field_name,
                    old_value=a.old_value,
                    new_value=a.new_value,
                    justification=a.justification,
                    modified_by=a.modified_by,
                    modified_at=a.modified_at,
                )
            )
        return True

    def update_status(self, settlement_id, *, status, updated_by, changes=None) -> bool:
        if settlement_id not in self.settlements:
            return False
        self.settlements[settlement_id] = dataclasses.replace(
            self.settlements[settlement_id], status=status, updated_by=updated_by, **(changes or {})
        )
        return True

    def list_audit(self, settlement_id: str):
        return [a for a in self.audit if a.settlement_id == settlement_id]


@dataclass
class World:
    users: InMemoryUsers
    employees: InMemoryEmployees
    contracts: InMemoryContracts
    config: InMemoryPayrollConfig
    payroll: InMemoryPayroll
    settlements: InMemorySettlements
    container: Container

    def add_employee(self, identification: str = "1001", first_name: str = "Ana", last_name: str = "Gómez") -> str:
        return self.employees.create(
            identification_type=IdentificationType.CC,
            identification_number=identification,
            first_name=first_name,
            last_name=last_name,
            email=None,
            phone=None,
        )

    def add_contract(
        self,
        employee_id: str,
        *,
        salary: str,
        start_date: date,
        contract_type: str = "indefinido",
        end_date: Optional[date] = None,
    ) -> str:
        return self.contracts.create(
            employee_id=employee_id,
            contract_type=contract_type,
            position="Analista",
            department="Operaciones",
            salary=Decimal(salary),
            start_date=start_date,
            end_date=end_date,
        )

    def add_period(self, start: date, end: date, period_type: PeriodType = PeriodType.MONTHLY) -> int:
        return self.payroll.create_period(
            period_type=period_type,
            start_date=start,
            end_date=end,
            description=None,
            created_by=1,
        )


@pytest.fixture
def world() -> World:
    users = InMemoryUsers()
    employees = InMemoryEmployees()
    contracts = InMemoryContracts()
    config = InMemoryPayrollConfig()
    payroll = InMemoryPayroll()
    settlements = InMemorySettlements()
    container = wire_container(
        users_repo=users,
        employees_repo=employees,
        contracts_repo=contracts,
        payroll_config_repo=config,
        payroll_repo=payroll,
        settlements_repo=settlements,
    )
    return World(
        users=users,
        employees=employees,
        contracts=contracts,
        config=config,
        payroll=payroll,
        settlements=settlements,
        container=container,
    )
