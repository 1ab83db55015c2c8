from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...contracts.model import Contract
from ...employees.model import Employee
from ..model import PayrollCalculationResult, PayrollNovedad, PayrollParameters, PayrollPeriod


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        employee: Employee,
        contract: Contract,
        period: PayrollPeriod,
        novedades: Sequence[PayrollNovedad],
        params: PayrollParameters,
    ) -> PayrollCalculationResult:
        raise NotImplementedError
