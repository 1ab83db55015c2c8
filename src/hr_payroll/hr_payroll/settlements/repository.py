from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import SettlementStatus
from .model import ContractSettlement, NewSettlementAudit, SettlementAudit, SettlementCalculationResult

# Columns update_status may touch besides status/updated_by.
STATUS_COLUMNS = frozenset(
    {
        "approved_by",
        "approved_at",
        "approval_comments",
        "rejected_by",
        "rejected_at",
        "rejection_reason",
        "paid_at",
        "payment_reference",
    }
)


class SettlementRepository(Protocol):
    def create(
        self,
        *,
        result: SettlementCalculationResult,
        details: dict,
        notes: Optional[str],
        created_by: Optional[int],
    ) -> str:
        """Insert a draft settlement and return its generated id."""

        raise NotImplementedError

    def get_by_id(self, settlement_id: str) -> Optional[ContractSettlement]:
        raise NotImplementedError

    def get_by_contract(self, contract_id: str) -> Optional[ContractSettlement]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ContractSettlement]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: str) -> Sequence[ContractSettlement]:
        raise NotImplementedError

    def update_amounts(
        self,
        settlement_id: str,
        *,
        amounts: dict[str, Decimal],
        total: Decimal,
        details: dict,
        notes: Optional[str],
        updated_by: Optional[int],
        audits: Sequence[NewSettlementAudit],
    ) -> bool:
        """Apply the new amounts and write the audit rows in one transaction."""

        raise NotImplementedError

    def update_status(
        self,
        settlement_id: str,
        *,
        status: SettlementStatus,
        updated_by: Optional[int],
        changes: Optional[dict[str, Any]] = None,
    ) -> bool:
        raise NotImplementedError

    def list_audit(self, settlement_id: str) -> Sequence[SettlementAudit]:
        raise NotImplementedError
