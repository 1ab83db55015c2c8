from __future__ import annotations

import csv
import io
from datetime import date

import pandas as pd
import pytest

from src.hr_payroll.hr_payroll.core.exceptions import ValidationError
from src.hr_payroll.hr_payroll.payroll.export import HEADERS


@pytest.fixture
def liquidated_period(world):
    ana = world.add_employee("1001", "Ana", "Gómez")
    world.add_contract(ana, salary="2000000", start_date=date(2023, 1, 1))
    period_id = world.add_period(date(2024, 6, 1), date(2024, 6, 30))
    world.container.payroll_service.liquidate_period(period_id=period_id, user_id=1)
    return period_id


def test_csv_export_has_bom_headers_and_one_row_per_entry(world, liquidated_period):
    export = world.container.payroll_export_service.export_period(period_id=liquidated_period, fmt="CSV", user_id=4)

    assert export.filename == "nomina_2024-06-01_2024-06-30.csv"
    assert export.content.startswith(b"\xef\xbb\xbf")
    rows = list(csv.reader(io.StringIO(export.content.decode("utf-8-sig"))))
    assert rows[0] == HEADERS
    assert rows[1][:3] == ["1001", "Ana Gómez", "30"]
    assert rows[1][-1] == "2002000.00"


def test_xlsx_export_is_readable_and_logged(world, liquidated_period):
    svc = world.container.payroll_export_service

    export = svc.export_period(period_id=liquidated_period, fmt="xlsx", user_id=4)

    df = pd.read_excel(io.BytesIO(export.content))
    assert list(df.columns) == HEADERS
    assert len(df) == 1
    assert float(df.iloc[0]["Neto a pagar"]) == pytest.approx(2002000.00)

    logs = svc.list_exports(liquidated_period)
    assert [(log.export_format, log.total_rows, log.exported_by) for log in logs] == [("xlsx", 1, 4)]


def test_open_period_cannot_be_exported(world):
    period_id = world.add_period(date(2024, 6, 1), date(2024, 6, 30))

    with pytest.raises(ValidationError):
        world.container.payroll_export_service.export_period(period_id=period_id, fmt="csv", user_id=1)


def test_unknown_format_is_rejected(world, liquidated_period):
    with pytest.raises(ValidationError):
        world.container.payroll_export_service.export_period(period_id=liquidated_period, fmt="pdf", user_id=1)
