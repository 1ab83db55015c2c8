from __future__ import annotations

from decimal import Decimal

import pytest

from src.hr_payroll.hr_payroll.core import constants as c
from src.hr_payroll.hr_payroll.core.exceptions import ValidationError
from src.hr_payroll.hr_payroll.payroll.config_service import PayrollConfigService


def test_missing_keys_fall_back_to_statutory_defaults(world):
    svc = PayrollConfigService(world.config)

    params = svc.load_parameters()

    assert params.minimum_wage == c.DEFAULT_MINIMUM_WAGE
    assert params.transport_allowance == c.DEFAULT_TRANSPORT_ALLOWANCE
    assert params.withholding_threshold == Decimal("95") * Decimal("42412")


def test_stored_zero_is_honoured(world):
    world.config.upsert(key=c.KEY_SOLIDARITY_FUND_PERCENTAGE, value={"value": 0}, description=None, updated_by=1)
    svc = PayrollConfigService(world.config)

    assert svc.get_solidarity_fund_percentage() == Decimal("0")


def test_values_stored_as_json_strings_are_read(world):
    world.config.upsert(key=c.KEY_MINIMUM_WAGE, value={"value": "1423500"}, description=None, updated_by=1)
    world.config.upsert(
        key=c.KEY_WITHHOLDING_BASE,
        value={"uvt": "95", "uvt_value": "47065"},
        description=None,
        updated_by=1,
    )
    svc = PayrollConfigService(world.config)

    assert svc.get_minimum_wage() == Decimal("1423500")
    assert svc.get_withholding_base() == (Decimal("95"), Decimal("47065"))


def test_unreadable_withholding_base_parts_fall_back_to_defaults(world):
    world.config.upsert(
        key=c.KEY_WITHHOLDING_BASE,
        value={"uvt": "abc", "uvt_value": "NaN"},
        description=None,
        updated_by=1,
    )
    svc = PayrollConfigService(world.config)

    params = svc.load_parameters()

    assert (params.withholding_uvt, params.uvt_value) == (c.DEFAULT_WITHHOLDING_UVT, c.DEFAULT_UVT_VALUE)


def test_withholding_base_keeps_the_readable_part(world):
    world.config.upsert(
        key=c.KEY_WITHHOLDING_BASE,
        value={"uvt": "100", "uvt_value": "abc"},
        description=None,
        updated_by=1,
    )

    assert PayrollConfigService(world.config).get_withholding_base() == (Decimal("100"), c.DEFAULT_UVT_VALUE)


@pytest.mark.parametrize("value", ["Infinity", "NaN", "sNaN", "-Infinity", float("inf")])
def test_update_config_rejects_non_finite_values(world, value):
    svc = PayrollConfigService(world.config)

    with pytest.raises(ValidationError):
        svc.update_config(key=c.KEY_MINIMUM_WAGE, value=value, updated_by=1)
    with pytest.raises(ValidationError):
        svc.update_config(key=c.KEY_WITHHOLDING_BASE, value={"uvt": value, "uvt_value": 42412}, updated_by=1)
    assert world.config.items == {}


def test_update_config_wraps_scalars_and_rejects_negatives(world):
    svc = PayrollConfigService(world.config)

    item = svc.update_config(key=c.KEY_TRANSPORT_ALLOWANCE, value=200000, updated_by=7, description="2025")

    assert item.value == {"value": Decimal("200000")}
    assert item.updated_by == 7
    assert svc.get_transport_allowance() == Decimal("200000")

    with pytest.raises(ValidationError):
        svc.update_config(key=c.KEY_HEALTH_PERCENTAGE, value=-1, updated_by=7)


def test_withholding_base_requires_both_parts(world):
    svc = PayrollConfigService(world.config)

    with pytest.raises(ValidationError):
        svc.update_config(key=c.KEY_WITHHOLDING_BASE, value={"uvt": 95}, updated_by=1)


def test_list_config_is_sorted_by_key(world):
    svc = PayrollConfigService(world.config)
    svc.update_config(key="zeta", value={"anything": True}, updated_by=1)
    svc.update_config(key=c.KEY_MINIMUM_WAGE, value=1300000, updated_by=1)

    assert [i.key for i in svc.list_config()] == sorted([c.KEY_MINIMUM_WAGE, "zeta"])
