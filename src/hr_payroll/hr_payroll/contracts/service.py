from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.validators import optional_date, require_date, require_non_empty, require_non_negative
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import Contract
from .repository import ContractRepository

logger = logging.getLogger(__name__)


class ContractService:
    def __init__(self, contracts: ContractRepository, employees: EmployeeRepository):
        self._contracts = contracts
        self._employees = employees

    def create_contract(
        self,
        *,
        employee_id: str,
        contract_type: str,
        position: str,
        salary: Any,
        start_date: Any,
        end_date: Any = None,
        department: Optional[str] = None,
    ) -> Contract:
        if not self._employees.get_by_id(str(employee_id)):
            raise NotFoundError(f"Empleado {employee_id} no encontrado")

        contract_type = require_non_empty(contract_type, "Tipo de contrato")
        position = require_non_empty(position, "Cargo")
        amount = require_non_negative(salary, "Salario")
        start_date = require_date(start_date, "Fecha de inicio")
        end_date = optional_date(end_date, "Fecha de fin")
        if end_date is not None and end_date < start_date:
            raise ValidationError("La fecha fin del contrato no puede ser anterior a la fecha inicio")

        contract_id = self._contracts.create(
            employee_id=str(employee_id),
            contract_type=contract_type,
            position=position,
            department=(department or "").strip() or None,
            salary=amount,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info("Contract %s created for employee %s", contract_id, employee_id)
        return self.get_contract(contract_id)

    def get_contract(self, contract_id: str) -> Contract:
        contract = self._contracts.get_by_id(str(contract_id))
        if not contract:
            raise NotFoundError(f"Contrato {contract_id} no encontrado")
        return contract

    def list_for_employee(self, employee_id: str) -> list[Contract]:
        if not self._employees.get_by_id(str(employee_id)):
            raise NotFoundError(f"Empleado {employee_id} no encontrado")
        return list(self._contracts.list_for_employee(str(employee_id)))

    def get_current_for_employee(self, employee_id: str) -> Contract:
        contract = self._contracts.get_current_for_employee(str(employee_id))
        if not contract:
            raise NotFoundError(f"No se encontró contrato vigente para el empleado {employee_id}")
        return contract
