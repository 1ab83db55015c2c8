from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_enum, require_non_empty
from ..core.enums import EmployeeStatus, IdentificationType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def create_employee(
        self,
        *,
        identification_type: str,
        identification_number: str,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        id_type = require_enum(IdentificationType, identification_type, "Tipo de identificación")
        id_number = require_non_empty(identification_number, "Número de identificación")
        first = require_non_empty(first_name, "Nombres")
        last = require_non_empty(last_name, "Apellidos")

        if self._employees.get_by_identification(id_number):
            raise ValidationError(f"Ya existe un empleado con identificación {id_number}")

        employee_id = self._employees.create(
            identification_type=id_type,
            identification_number=id_number,
            first_name=first,
            last_name=last,
            email=(email or "").strip() or None,
            phone=(phone or "").strip() or None,
        )
        logger.info("Employee %s created (%s %s)", employee_id, id_type.value, id_number)
        return self.get_employee(employee_id)

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError(f"Empleado {employee_id} no encontrado")
        return employee

    def list_employees(self, *, status: Optional[str] = None) -> list[Employee]:
        status_enum = require_enum(EmployeeStatus, status, "Estado") if status else None
        return list(self._employees.list_all(status=status_enum))

    def set_status(self, employee_id: str, status: str) -> Employee:
        status_enum = require_enum(EmployeeStatus, status, "Estado")
        self.get_employee(employee_id)
        self._employees.set_status(str(employee_id), status_enum)
        logger.info("Employee %s status -> %s", employee_id, status_enum.value)
        return self.get_employee(employee_id)
