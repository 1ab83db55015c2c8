from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

INDEFINITE_CONTRACT = "indefinido"


@dataclass(frozen=True)
class Contract:
    contract_id: str
    employee_id: str
    contract_type: str
    position: str
    department: Optional[str]
    salary: Decimal
    start_date: date
    end_date: Optional[date] = None
    is_current: bool = True

    @property
    def is_indefinite(self) -> bool:
        return self.contract_type.strip().lower() == INDEFINITE_CONTRACT
