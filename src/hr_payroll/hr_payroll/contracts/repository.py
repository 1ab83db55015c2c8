from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Contract


class ContractRepository(Protocol):
    def get_by_id(self, contract_id: str) -> Optional[Contract]:
        raise NotImplementedError

    def get_current_for_employee(self, employee_id: str) -> Optional[Contract]:
        """Latest (by start_date) contract flagged as current."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Contract]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        contract_type: str,
        position: str,
        department: Optional[str],
        salary: Decimal,
        start_date: date,
        end_date: Optional[date],
    ) -> str:
        """Insert a current contract and unset the employee's previous current ones."""

        raise NotImplementedError
