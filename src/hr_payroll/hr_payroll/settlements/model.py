from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import IndemnizationType, SettlementStatus

# Amounts an HR user may adjust by hand after the automatic calculation.
EDITABLE_AMOUNTS = (
    "severance",
    "severance_interest",
    "service_bonus",
    "vacation_pay",
    "indemnization",
    "other_concepts",
    "deductions",
)

EDITABLE_STATUSES = (SettlementStatus.DRAFT, SettlementStatus.PENDING_APPROVAL)


@dataclass(frozen=True)
class SettlementCalculationResult:
    contract_id: str
    employee_id: str
    settlement_date: date
    contract_start_date: date
    days_worked: int
    last_salary: Decimal
    average_salary: Optional[Decimal]
    severance: Decimal
    severance_interest: Decimal
    service_bonus: Decimal
    vacation_pay: Decimal
    indemnization: Decimal
    indemnization_type: Optional[IndemnizationType]
    total: Decimal
    details: dict = field(default_factory=dict)
    warnings: list = field(default_factory=list)


@dataclass(frozen=True)
class ContractSettlement:
    settlement_id: str
    contract_id: str
    employee_id: str
    settlement_date: date
    contract_start_date: date
    contract_end_date: date
    days_worked: int
    last_salary: Decimal
    average_salary: Optional[Decimal]
    severance: Decimal
    severance_interest: Decimal
    service_bonus: Decimal
    vacation_pay: Decimal
    indemnization: Decimal
    indemnization_type: Optional[IndemnizationType]
    other_concepts: Decimal
    deductions: Decimal
    total: Decimal
    status: SettlementStatus
    details: Optional[dict] = None
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_comments: Optional[str] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_reference: Optional[str] = None
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES


@dataclass(frozen=True)
class NewSettlementAudit:
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    justification: Optional[str]
    modified_by: Optional[int]
    modified_at: datetime


@dataclass(frozen=True)
class SettlementAudit:
    audit_id: int
    settlement_id: str
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    justification: Optional[str] = None
    modified_by: Optional[int] = None
    modified_at: Optional[datetime] = None
