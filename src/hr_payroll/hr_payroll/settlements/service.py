from __future__ import annotations

import copy
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.money import round_money
from ..common.validators import optional_date, require_enum, require_non_empty, require_non_negative
from ..contracts.repository import ContractRepository
from ..core.enums import IndemnizationType, SettlementStatus
from ..core.exceptions import NotFoundError, ValidationError
from .calculation_service import ContractSettlementCalculationService
from .model import (
    EDITABLE_AMOUNTS,
    ContractSettlement,
    NewSettlementAudit,
    SettlementAudit,
)
from .repository import SettlementRepository

logger = logging.getLogger(__name__)


def settlement_total(amounts: dict[str, Decimal]) -> Decimal:
    """Components plus other concepts minus deductions."""
    return (
        amounts["severance"]
        + amounts["severance_interest"]
        + amounts["service_bonus"]
        + amounts["vacation_pay"]
        + amounts["indemnization"]
        + amounts["other_concepts"]
        - amounts["deductions"]
    )


class ContractSettlementService:
    def __init__(
        self,
        settlements: SettlementRepository,
        contracts: ContractRepository,
        calculation: ContractSettlementCalculationService,
    ):
        self._settlements = settlements
        self._contracts = contracts
        self._calculation = calculation

    def generate_settlement(
        self,
        *,
        contract_id: str,
        settlement_date: Any = None,
        indemnization_type: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> ContractSettlement:
        contract = self._contracts.get_by_id(str(contract_id))
        if not contract:
            raise NotFoundError(f"Contrato {contract_id} no encontrado")

        existing = self._settlements.get_by_contract(contract.contract_id)
        if existing:
            raise ValidationError(
                f"El contrato ya tiene una liquidación ({existing.settlement_id}, estado {existing.status.value})"
            )

        when = optional_date(settlement_date, "Fecha de liquidación") or now_local().date()
        itype = require_enum(IndemnizationType, indemnization_type, "Tipo de indemnización") if indemnization_type else None

        result = self._calculation.calculate_settlement(contract, when, itype)
        details = {
            "automatic_calculation": {
                "components": result.details,
                "last_salary": result.last_salary,
                "average_salary": result.average_salary,
                "days_worked": result.days_worked,
                "total": result.total,
            },
            "warnings": list(result.warnings),
            "manual_adjustments": [],
        }

        settlement_id = self._settlements.create(
            result=result,
            details=details,
            notes=(notes or "").strip() or None,
            created_by=user_id,
        )
        logger.info(
            "Settlement %s generated for contract %s (total %s, by user %s)",
            settlement_id,
            contract.contract_id,
            result.total,
            user_id,
        )
        return self.get_settlement(settlement_id)

    def get_settlement(self, settlement_id: str) -> ContractSettlement:
        settlement = self._settlements.get_by_id(str(settlement_id))
        if not settlement:
            raise NotFoundError(f"Liquidación {settlement_id} no encontrada")
        return settlement

    def list_settlements(self) -> list[ContractSettlement]:
        return list(self._settlements.list_all())

    def list_by_employee(self, employee_id: str) -> list[ContractSettlement]:
        return list(self._settlements.list_by_employee(str(employee_id)))

    def get_by_contract(self, contract_id: str) -> ContractSettlement:
        settlement = self._settlements.get_by_contract(str(contract_id))
        if not settlement:
            raise NotFoundError(f"El contrato {contract_id} no tiene liquidación")
        return settlement

    def list_audit(self, settlement_id: str) -> list[SettlementAudit]:
        settlement = self.get_settlement(settlement_id)
        return list(self._settlements.list_audit(settlement.settlement_id))

    def update_settlement(
        self,
        *,
        settlement_id: str,
        changes: dict,
        justification: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> ContractSettlement:
        settlement = self.get_settlement(settlement_id)
        if not settlement.is_editable:
            raise ValidationError(f"No se puede modificar una liquidación en estado {settlement.status.value}")

        unknown = sorted(set(changes or {}) - set(EDITABLE_AMOUNTS))
        if unknown:
            raise ValidationError(f"Campos no editables: {', '.join(unknown)}")

        amounts = {name: getattr(settlement, name) for name in EDITABLE_AMOUNTS}
        changed: dict[str, tuple[Decimal, Decimal]] = {}
        for name, raw in (changes or {}).items():
            new_value = round_money(require_non_negative(raw, name))
            if new_value != amounts[name]:
                changed[name] = (amounts[name], new_value)
                amounts[name] = new_value

        notes = (notes or "").strip() or None
        if not changed and notes is None:
            raise ValidationError("No hay cambios para aplicar")

        justification = (justification or "").strip() or None
        if changed and not justification:
            raise ValidationError("Debe justificar los ajustes manuales")

        at = now_local()
        audits = [
            NewSettlementAudit(
                field_name=name,
                old_value=str(old),
                new_value=str(new),
                justification=justification,
                modified_by=user_id,
                modified_at=at,
            )
            for name, (old, new) in changed.items()
        ]

        details = copy.deepcopy(settlement.details) if settlement.details else {}
        details.setdefault("manual_adjustments", [])
        for a in audits:
            details["manual_adjustments"].append(
                {
                    "field": a.field_name,
                    "old_value": a.old_value,
                    "new_value": a.new_value,
                    "justification": a.justification,
                    "modified_by": a.modified_by,
                    "modified_at": a.modified_at,
                }
            )

        total = settlement_total(amounts)
        self._settlements.update_amounts(
            settlement.settlement_id,
            amounts={name: amounts[name] for name in changed},
            total=total,
            details=details,
            notes=notes if notes is not None else settlement.notes,
            updated_by=user_id,
            audits=audits,
        )
        if changed:
            logger.info(
                "Settlement %s adjusted by user %s: %s (total %s -> %s)",
                settlement.settlement_id,
                user_id,
                ", ".join(changed),
                settlement.total,
                total,
            )
        return self.get_settlement(settlement.settlement_id)

    def submit_settlement(self, *, settlement_id: str, user_id: Optional[int] = None) -> ContractSettlement:
        settlement = self.get_settlement(settlement_id)
        if settlement.status != SettlementStatus.DRAFT:
            raise ValidationError(f"Solo se pueden enviar a aprobación liquidaciones en borrador (estado: {settlement.status.value})")
        self._settlements.update_status(
            settlement.settlement_id,
            status=SettlementStatus.PENDING_APPROVAL,
            updated_by=user_id,
        )
        logger.info("Settlement %s submitted for approval by user %s", settlement.settlement_id, user_id)
        return self.get_settlement(settlement.settlement_id)

    def approve_settlement(
        self,
        *,
        settlement_id: str,
        user_id: Optional[int] = None,
        comments: Optional[str] = None,
    ) -> ContractSettlement:
        settlement = self.get_settlement(settlement_id)
        if not settlement.is_editable:
            raise ValidationError(f"No se puede aprobar una liquidación en estado {settlement.status.value}")
        self._settlements.update_status(
            settlement.settlement_id,
            status=SettlementStatus.APPROVED,
            updated_by=user_id,
            changes={
                "approved_by": user_id,
                "approved_at": now_local(),
                "approval_comments": (comments or "").strip() or None,
            },
        )
        logger.info("Settlement %s approved by user %s", settlement.settlement_id, user_id)
        return self.get_settlement(settlement.settlement_id)

    def reject_settlement(
        self,
        *,
        settlement_id: str,
        user_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> ContractSettlement:
        settlement = self.get_settlement(settlement_id)
        if not settlement.is_editable:
            raise ValidationError(f"No se puede rechazar una liquidación en estado {settlement.status.value}")
        reason = require_non_empty(reason, "Motivo de rechazo")
        self._settlements.update_status(
            settlement.settlement_id,
            status=SettlementStatus.REJECTED,
            updated_by=user_id,
            changes={
                "rejected_by": user_id,
                "rejected_at": now_local(),
                "rejection_reason": reason,
            },
        )
        logger.info("Settlement %s rejected by user %s: %s", settlement.settlement_id, user_id, reason)
        return self.get_settlement(settlement.settlement_id)

    def mark_as_paid(
        self,
        *,
        settlement_id: str,
        user_id: Optional[int] = None,
        payment_reference: Optional[str] = None,
        payment_date: Any = None,
    ) -> ContractSettlement:
        settlement = self.get_settlement(settlement_id)
        if settlement.status != SettlementStatus.APPROVED:
            raise ValidationError(f"Solo se pueden pagar liquidaciones aprobadas (estado: {settlement.status.value})")
        reference = require_non_empty(payment_reference, "Referencia de pago")

        paid_on: Optional[date] = optional_date(payment_date, "Fecha de pago")
        paid_at: datetime = datetime.combine(paid_on, time.min) if paid_on else now_local()

        self._settlements.update_status(
            settlement.settlement_id,
            status=SettlementStatus.PAID,
            updated_by=user_id,
            changes={"paid_at": paid_at, "payment_reference": reference},
        )
        logger.info("Settlement %s paid (ref %s) by user %s", settlement.settlement_id, reference, user_id)
        return self.get_settlement(settlement.settlement_id)
