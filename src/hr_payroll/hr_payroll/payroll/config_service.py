"""Tunable legal parameters stored in ``payroll_config``."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from ..common.money import ZERO, to_decimal
from ..common.validators import require_non_empty
from ..core import constants as c
from ..core.exceptions import ValidationError
from .model import PayrollConfigItem, PayrollParameters
from .repository import PayrollConfigRepository

logger = logging.getLogger(__name__)

# Keys whose value is a single non-negative number stored as {"value": n}.
_SCALAR_KEYS = {
    c.KEY_MINIMUM_WAGE,
    c.KEY_TRANSPORT_ALLOWANCE,
    c.KEY_HEALTH_PERCENTAGE,
    c.KEY_PENSION_PERCENTAGE,
    c.KEY_SOLIDARITY_FUND_PERCENTAGE,
    c.KEY_OVERTIME_DAY_SURCHARGE,
    c.KEY_OVERTIME_NIGHT_SURCHARGE,
    c.KEY_SUNDAY_SURCHARGE,
    c.KEY_WITHHOLDING_RATE,
}


class PayrollConfigService:
    def __init__(self, config: PayrollConfigRepository):
        self._config = config

    def get_value(self, key: str) -> Any:
        item = self._config.get(key)
        return item.value if item else None

    def _scalar(self, key: str, default: Decimal) -> Decimal:
        value = self.get_value(key)
        if isinstance(value, dict):
            value = value.get("value")
        if value is None:
            return default
        try:
            return to_decimal(value, key)
        except ValidationError:
            logger.warning("Invalid payroll_config value for %s: %r, using default %s", key, value, default)
            return default

    def get_minimum_wage(self) -> Decimal:
        return self._scalar(c.KEY_MINIMUM_WAGE, c.DEFAULT_MINIMUM_WAGE)

    def get_transport_allowance(self) -> Decimal:
        return self._scalar(c.KEY_TRANSPORT_ALLOWANCE, c.DEFAULT_TRANSPORT_ALLOWANCE)

    def get_health_percentage(self) -> Decimal:
        return self._scalar(c.KEY_HEALTH_PERCENTAGE, c.DEFAULT_HEALTH_PERCENTAGE)

    def get_pension_percentage(self) -> Decimal:
        return self._scalar(c.KEY_PENSION_PERCENTAGE, c.DEFAULT_PENSION_PERCENTAGE)

    def get_solidarity_fund_percentage(self) -> Decimal:
        return self._scalar(c.KEY_SOLIDARITY_FUND_PERCENTAGE, c.DEFAULT_SOLIDARITY_FUND_PERCENTAGE)

    def get_overtime_day_surcharge(self) -> Decimal:
        return self._scalar(c.KEY_OVERTIME_DAY_SURCHARGE, c.DEFAULT_OVERTIME_DAY_SURCHARGE)

    def get_overtime_night_surcharge(self) -> Decimal:
        return self._scalar(c.KEY_OVERTIME_NIGHT_SURCHARGE, c.DEFAULT_OVERTIME_NIGHT_SURCHARGE)

    def get_sunday_surcharge(self) -> Decimal:
        return self._scalar(c.KEY_SUNDAY_SURCHARGE, c.DEFAULT_SUNDAY_SURCHARGE)

    def get_withholding_base(self) -> tuple[Decimal, Decimal]:
        """Return (uvt, uvt_value)."""
        value = self.get_value(c.KEY_WITHHOLDING_BASE)
        if not isinstance(value, dict):
            return c.DEFAULT_WITHHOLDING_UVT, c.DEFAULT_UVT_VALUE
        return (
            self._withholding_part(value, "uvt", c.DEFAULT_WITHHOLDING_UVT),
            self._withholding_part(value, "uvt_value", c.DEFAULT_UVT_VALUE),
        )

    @staticmethod
    def _withholding_part(value: dict, name: str, default: Decimal) -> Decimal:
        raw = value.get(name)
        if raw is None:
            return default
        try:
            return to_decimal(raw, name)
        except ValidationError:
            logger.warning(
                "Invalid payroll_config value for %s.%s: %r, using default %s",
                c.KEY_WITHHOLDING_BASE,
                name,
                raw,
                default,
            )
            return default

    def get_withholding_rate(self) -> Decimal:
        return self._scalar(c.KEY_WITHHOLDING_RATE, c.DEFAULT_WITHHOLDING_RATE)

    def load_parameters(self) -> PayrollParameters:
        uvt, uvt_value = self.get_withholding_base()
        return PayrollParameters(
            minimum_wage=self.get_minimum_wage(),
            transport_allowance=self.get_transport_allowance(),
            health_percentage=self.get_health_percentage(),
            pension_percentage=self.get_pension_percentage(),
            solidarity_fund_percentage=self.get_solidarity_fund_percentage(),
            overtime_day_surcharge=self.get_overtime_day_surcharge(),
            overtime_night_surcharge=self.get_overtime_night_surcharge(),
            sunday_surcharge=self.get_sunday_surcharge(),
            withholding_uvt=uvt,
            uvt_value=uvt_value,
            withholding_rate=self.get_withholding_rate(),
        )

    def update_config(
        self,
        *,
        key: str,
        value: Any,
        updated_by: Optional[int],
        description: Optional[str] = None,
    ) -> PayrollConfigItem:
        key = require_non_empty(key, "Clave")
        stored = self._normalize(key, value)
        self._config.upsert(key=key, value=stored, description=description, updated_by=updated_by)
        logger.info("Payroll config %s updated by user %s", key, updated_by)
        item = self._config.get(key)
        return item or PayrollConfigItem(key=key, value=stored, description=description, updated_by=updated_by)

    def list_config(self) -> list[PayrollConfigItem]:
        return sorted(self._config.list_all(), key=lambda item: item.key)

    @staticmethod
    def _normalize(key: str, value: Any) -> Any:
        if value is None:
            raise ValidationError("Valor es requerido")

        if key in _SCALAR_KEYS:
            raw = value.get("value") if isinstance(value, dict) else value
            amount = to_decimal(raw, key)
            if amount < ZERO:
                raise ValidationError(f"{key} no puede ser negativo")
            return {"value": amount}

        if key == c.KEY_WITHHOLDING_BASE:
            if not isinstance(value, dict) or "uvt" not in value or "uvt_value" not in value:
                raise ValidationError("retencion_fuente_base requiere uvt y uvt_value")
            uvt = to_decimal(value["uvt"], "uvt")
            uvt_value = to_decimal(value["uvt_value"], "uvt_value")
            if uvt < ZERO or uvt_value < ZERO:
                raise ValidationError("retencion_fuente_base no puede ser negativo")
            return {"uvt": uvt, "uvt_value": uvt_value}

        return value
