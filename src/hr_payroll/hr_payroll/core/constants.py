"""Constants and statutory defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Defaults apply only when the matching key is missing from payroll_config.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200

# payroll_config keys
KEY_MINIMUM_WAGE = "salario_minimo_legal"
KEY_TRANSPORT_ALLOWANCE = "auxilio_transporte"
KEY_HEALTH_PERCENTAGE = "porcentaje_salud_empleado"
KEY_PENSION_PERCENTAGE = "porcentaje_pension_empleado"
KEY_SOLIDARITY_FUND_PERCENTAGE = "porcentaje_fondo_solidaridad"
KEY_OVERTIME_DAY_SURCHARGE = "horas_extras_recargo_diurno"
KEY_OVERTIME_NIGHT_SURCHARGE = "horas_extras_recargo_nocturno"
KEY_SUNDAY_SURCHARGE = "horas_extras_recargo_dominical"
KEY_WITHHOLDING_BASE = "retencion_fuente_base"
KEY_WITHHOLDING_RATE = "retencion_fuente_porcentaje"

DEFAULT_MINIMUM_WAGE = Decimal("1300000")
DEFAULT_TRANSPORT_ALLOWANCE = Decimal("162000")
DEFAULT_HEALTH_PERCENTAGE = Decimal("4")
DEFAULT_PENSION_PERCENTAGE = Decimal("4")
DEFAULT_SOLIDARITY_FUND_PERCENTAGE = Decimal("1")
DEFAULT_OVERTIME_DAY_SURCHARGE = Decimal("25")
DEFAULT_OVERTIME_NIGHT_SURCHARGE = Decimal("75")
DEFAULT_SUNDAY_SURCHARGE = Decimal("75")
DEFAULT_WITHHOLDING_UVT = Decimal("95")
DEFAULT_UVT_VALUE = Decimal("42412")
DEFAULT_WITHHOLDING_RATE = Decimal("10")

# Commercial calendar used by Colombian payroll
COMMERCIAL_MONTH_DAYS = 30
COMMERCIAL_YEAR_DAYS = 360
BIWEEKLY_PERIOD_DAYS = 15

SOLIDARITY_FUND_THRESHOLD_WAGES = Decimal("4")
TRANSPORT_ALLOWANCE_CAP_WAGES = Decimal("2")

SEVERANCE_INTEREST_RATE = Decimal("0.12")
VACATION_DIVISOR = Decimal("720")
SALARY_HISTORY_MONTHS = 12
