from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, IdentificationType
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_identification(self, identification_number: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        identification_type: IdentificationType,
        identification_number: str,
        first_name: str,
        last_name: str,
        email: Optional[str],
        phone: Optional[str],
    ) -> str:
        """Insert an active employee and return its generated id."""

        raise NotImplementedError

    def list_all(self, *, status: Optional[EmployeeStatus] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        raise NotImplementedError
