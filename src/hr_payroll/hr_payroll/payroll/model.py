from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..core.constants import BIWEEKLY_PERIOD_DAYS, COMMERCIAL_MONTH_DAYS
from ..core.enums import NovedadCategory, PeriodStatus, PeriodType


@dataclass(frozen=True)
class PayrollConfigItem:
    key: str
    value: Any
    description: Optional[str] = None
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollParameters:
    """Snapshot of the legal parameters used for one liquidation run."""

    minimum_wage: Decimal
    transport_allowance: Decimal
    health_percentage: Decimal
    pension_percentage: Decimal
    solidarity_fund_percentage: Decimal
    overtime_day_surcharge: Decimal
    overtime_night_surcharge: Decimal
    sunday_surcharge: Decimal
    withholding_uvt: Decimal
    uvt_value: Decimal
    withholding_rate: Decimal

    @property
    def withholding_threshold(self) -> Decimal:
        return self.withholding_uvt * self.uvt_value


@dataclass(frozen=True)
class PayrollPeriod:
    period_id: int
    period_type: PeriodType
    start_date: date
    end_date: date
    status: PeriodStatus
    description: Optional[str] = None
    created_by: Optional[int] = None
    liquidated_by: Optional[int] = None
    liquidated_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    closed_by: Optional[int] = None
    closed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def day_cap(self) -> int:
        if self.period_type == PeriodType.BIWEEKLY:
            return BIWEEKLY_PERIOD_DAYS
        return COMMERCIAL_MONTH_DAYS


@dataclass(frozen=True)
class NewNovedad:
    employee_id: str
    novedad_type: str
    category: NovedadCategory
    amount: Decimal
    quantity: Decimal
    novedad_date: date
    comment: Optional[str] = None
    metadata: Optional[dict] = None


@dataclass(frozen=True)
class PayrollNovedad:
    novedad_id: int
    period_id: int
    employee_id: str
    novedad_type: str
    category: NovedadCategory
    amount: Decimal
    quantity: Decimal
    novedad_date: date
    comment: Optional[str] = None
    metadata: Optional[dict] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def total(self) -> Decimal:
        # A missing or zero quantity counts as a single unit.
        return self.amount * (self.quantity or Decimal("1"))


@dataclass(frozen=True)
class PayrollCalculationResult:
    employee_id: str
    days: int
    base_salary: Decimal
    overtime: Decimal
    commissions: Decimal
    bonuses: Decimal
    other_earnings: Decimal
    transport_allowance: Decimal
    total_earned: Decimal
    health: Decimal
    pension: Decimal
    solidarity_fund: Decimal
    withholding_tax: Decimal
    other_deductions: Decimal
    total_deducted: Decimal
    net_pay: Decimal
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class PayrollEntry:
    entry_id: int
    period_id: int
    employee_id: str
    days: int
    base_salary: Decimal
    overtime: Decimal
    commissions: Decimal
    bonuses: Decimal
    other_earnings: Decimal
    transport_allowance: Decimal
    total_earned: Decimal
    health: Decimal
    pension: Decimal
    solidarity_fund: Decimal
    withholding_tax: Decimal
    other_deductions: Decimal
    total_deducted: Decimal
    net_pay: Decimal
    details: Optional[dict] = None
    calculated_by: Optional[int] = None
    calculated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollExportLog:
    export_id: int
    period_id: int
    export_format: str
    filename: str
    total_rows: int
    exported_by: Optional[int] = None
    exported_at: Optional[datetime] = None
