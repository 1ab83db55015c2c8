"""Role based permissions.

Roles map to a fixed set of permission names; admin implicitly has all.
"""
from __future__ import annotations

from .enums import Role

USERS_MANAGE = "users.manage"
EMPLOYEES_READ = "employees.read"
EMPLOYEES_MANAGE = "employees.manage"
CONTRACTS_READ = "contracts.read"
CONTRACTS_MANAGE = "contracts.manage"
PAYROLL_READ = "payroll.read"
PAYROLL_CONFIG = "payroll.config"
PAYROLL_MANAGE = "payroll.manage"
PAYROLL_LIQUIDATE = "payroll.liquidate"
PAYROLL_APPROVE = "payroll.approve"
PAYROLL_CLOSE = "payroll.close"
PAYROLL_EXPORT = "payroll.export"
SETTLEMENTS_READ = "settlements.read"
SETTLEMENTS_MANAGE = "settlements.manage"
SETTLEMENTS_APPROVE = "settlements.approve"
SETTLEMENTS_PAY = "settlements.pay"

ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.HR: frozenset(
        {
            EMPLOYEES_READ,
            EMPLOYEES_MANAGE,
            CONTRACTS_READ,
            CONTRACTS_MANAGE,
            PAYROLL_READ,
            PAYROLL_MANAGE,
            PAYROLL_LIQUIDATE,
            PAYROLL_EXPORT,
            SETTLEMENTS_READ,
            SETTLEMENTS_MANAGE,
        }
    ),
    Role.ACCOUNTANT: frozenset(
        {
            EMPLOYEES_READ,
            CONTRACTS_READ,
            PAYROLL_READ,
            PAYROLL_CLOSE,
            PAYROLL_EXPORT,
            SETTLEMENTS_READ,
            SETTLEMENTS_APPROVE,
            SETTLEMENTS_PAY,
        }
    ),
    Role.MANAGER: frozenset(
        {
            EMPLOYEES_READ,
            CONTRACTS_READ,
            PAYROLL_READ,
            PAYROLL_APPROVE,
            SETTLEMENTS_READ,
        }
    ),
    Role.EMPLOYEE: frozenset(),
}


def has_permission(role: Role, permission: str) -> bool:
    if role == Role.ADMIN:
        return True
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


ALL_PERMISSIONS = frozenset(
    {
        USERS_MANAGE,
        PAYROLL_CONFIG,
        PAYROLL_APPROVE,
        PAYROLL_CLOSE,
        SETTLEMENTS_APPROVE,
        SETTLEMENTS_PAY,
    }.union(*ROLE_PERMISSIONS.values())
)


def permissions_for(role: Role) -> frozenset[str]:
    if role == Role.ADMIN:
        return ALL_PERMISSIONS
    return ROLE_PERMISSIONS.get(role, frozenset())
