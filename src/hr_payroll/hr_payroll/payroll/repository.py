from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import PeriodStatus, PeriodType
from .model import (
    NewNovedad,
    PayrollCalculationResult,
    PayrollConfigItem,
    PayrollEntry,
    PayrollExportLog,
    PayrollNovedad,
    PayrollPeriod,
)


class PayrollConfigRepository(Protocol):
    def get(self, key: str) -> Optional[PayrollConfigItem]:
        raise NotImplementedError

    def upsert(self, *, key: str, value: Any, description: Optional[str], updated_by: Optional[int]) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[PayrollConfigItem]:
        raise NotImplementedError


class PayrollRepository(Protocol):
    # Periods
    def create_period(
        self,
        *,
        period_type: PeriodType,
        start_date: date,
        end_date: date,
        description: Optional[str],
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def get_period(self, period_id: int) -> Optional[PayrollPeriod]:
        raise NotImplementedError

    def list_periods(self) -> Sequence[PayrollPeriod]:
        """Newest first (by start_date)."""

        raise NotImplementedError

    def find_overlapping_period(self, *, start_date: date, end_date: date) -> Optional[PayrollPeriod]:
        """Any period that is not closed and intersects [start_date, end_date]."""

        raise NotImplementedError

    def update_period_status(
        self,
        period_id: int,
        *,
        status: PeriodStatus,
        user_id: Optional[int],
        at: datetime,
    ) -> bool:
        """Set the status and the matching *_by/*_at audit columns."""

        raise NotImplementedError

    # Novedades
    def create_novedades(
        self,
        *,
        period_id: int,
        novedades: Sequence[NewNovedad],
        created_by: Optional[int],
    ) -> list[int]:
        """Insert all novedades in one transaction."""

        raise NotImplementedError

    def get_novedad(self, novedad_id: int) -> Optional[PayrollNovedad]:
        raise NotImplementedError

    def list_novedades(self, *, period_id: int, employee_id: Optional[str] = None) -> Sequence[PayrollNovedad]:
        raise NotImplementedError

    def delete_novedad(self, novedad_id: int) -> bool:
        raise NotImplementedError

    # Entries
    def save_liquidation(
        self,
        *,
        period_id: int,
        results: Sequence[PayrollCalculationResult],
        user_id: Optional[int],
        at: datetime,
    ) -> None:
        """Upsert one entry per (period, employee) and mark the period liquidated atomically."""

        raise NotImplementedError

    def get_entry(self, *, period_id: int, employee_id: str) -> Optional[PayrollEntry]:
        raise NotImplementedError

    def list_entries(self, period_id: int) -> Sequence[PayrollEntry]:
        """Ordered by net pay, highest first."""

        raise NotImplementedError

    def list_entries_for_employee(self, *, employee_id: str, period_end_from: date, period_end_to: date) -> Sequence[PayrollEntry]:
        """Entries of an employee whose period ends within the given range."""

        raise NotImplementedError

    # Export logs
    def create_export_log(
        self,
        *,
        period_id: int,
        export_format: str,
        filename: str,
        total_rows: int,
        exported_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def list_export_logs(self, period_id: int) -> Sequence[PayrollExportLog]:
        raise NotImplementedError
