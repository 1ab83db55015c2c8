from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    HR = "rrhh"
    ACCOUNTANT = "contabilidad"
    MANAGER = "gerencia"
    EMPLOYEE = "empleado"


class IdentificationType(str, Enum):
    CC = "CC"
    CE = "CE"
    TI = "TI"
    PAS = "PAS"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class PeriodType(str, Enum):
    BIWEEKLY = "quincenal"
    MONTHLY = "mensual"


class PeriodStatus(str, Enum):
    """Payroll period lifecycle: abierto -> liquidado -> aprobado -> cerrado."""

    OPEN = "abierto"
    LIQUIDATED = "liquidado"
    APPROVED = "aprobado"
    CLOSED = "cerrado"


class NovedadCategory(str, Enum):
    EARNING = "devengo"
    DEDUCTION = "deduccion"


class SettlementStatus(str, Enum):
    DRAFT = "borrador"
    PENDING_APPROVAL = "pendiente_aprobacion"
    APPROVED = "aprobado"
    PAID = "pagado"
    REJECTED = "rechazado"


class IndemnizationType(str, Enum):
    UNJUST_DISMISSAL = "sin_justa_causa"
    EARLY_TERMINATION = "terminacion_anticipada"


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
