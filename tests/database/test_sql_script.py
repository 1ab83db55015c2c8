from __future__ import annotations

from src.hr_payroll.hr_payroll.database.bootstrap import iter_sql_statements


def test_splits_on_semicolons_outside_quotes():
    sql = """
    INSERT INTO payroll_config (config_key, config_value) VALUES ('a;b', '{"value": 1}');
    UPDATE users SET full_name = 'O\\'Neil; Jr' WHERE user_id = 1;
    SELECT 1
    """

    stmts = list(iter_sql_statements(sql))

    assert len(stmts) == 3
    assert stmts[0].endswith("'{\"value\": 1}')")
    assert "O\\'Neil; Jr" in stmts[1]
    assert stmts[2] == "SELECT 1"


def test_blank_statements_are_skipped():
    assert list(iter_sql_statements(" ;\n; SELECT 2;; ")) == ["SELECT 2"]
