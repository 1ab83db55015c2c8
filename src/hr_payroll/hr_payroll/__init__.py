"""HR Payroll package.

This package is organized by feature modules (users, employees, contracts,
payroll, settlements) with a thin Flask JSON controller layer and SOLID
service/repository layers. Payroll and settlement amounts follow Colombian
labour law.
"""
