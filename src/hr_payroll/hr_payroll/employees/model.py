from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EmployeeStatus, IdentificationType


@dataclass(frozen=True)
class Employee:
    employee_id: str
    identification_type: IdentificationType
    identification_number: str
    first_name: str
    last_name: str
    status: EmployeeStatus
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
