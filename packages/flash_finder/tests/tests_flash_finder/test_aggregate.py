import pytest
from flash_finder.aggregate import (
    RowCount,
    count_sql,
    exists_sql,
    strip_trailing_limit,
)


class TestStripTrailingLimit:
    def test_limit_and_offset_are_removed(self):
        sql = "SELECT * FROM users WHERE name = ? LIMIT 10 OFFSET 20"
        assert strip_trailing_limit(sql) == "SELECT * FROM users WHERE name = ? "

    def test_bare_limit_is_removed(self):
        sql = "SELECT * FROM users WHERE name = ? LIMIT 5"
        assert strip_trailing_limit(sql) == "SELECT * FROM users WHERE name = ? "

    def test_statement_without_limit_is_unchanged(self):
        sql = "SELECT * FROM users WHERE name = ?"
        assert strip_trailing_limit(sql) == sql

    @pytest.mark.parametrize(
        "sql",
        [
            "select id from users limit 3 offset 6",
            "SELECT id FROM users Limit 3 Offset 6",
            "SELECT id FROM users LIMIT 3\n",
        ],
    )
    def test_match_is_case_insensitive(self, sql):
        assert strip_trailing_limit(sql).lower() == "select id from users "

    def test_no_dangling_offset_is_left(self):
        stripped = strip_trailing_limit("SELECT id FROM users LIMIT 1 OFFSET 2")
        assert "OFFSET" not in stripped
        assert "LIMIT" not in stripped

    def test_limit_inside_the_statement_is_kept(self):
        """Only a trailing clause is stripped."""
        sql = "SELECT id FROM (SELECT id FROM users LIMIT 5) t WHERE id > ?"
        assert strip_trailing_limit(sql) == sql

    def test_other_pagination_syntax_is_left_alone(self):
        sql = "SELECT id FROM users FETCH FIRST 5 ROWS ONLY"
        assert strip_trailing_limit(sql) == sql


def test_count_sql_wraps_stripped_statement():
    assert (
        count_sql("SELECT id FROM users LIMIT 1 OFFSET 1", "name")
        == "SELECT COUNT(name) AS row_count FROM (SELECT id FROM users ) a"
    )


def test_count_sql_defaults_to_star():
    assert count_sql("SELECT id FROM users") == (
        "SELECT COUNT(*) AS row_count FROM (SELECT id FROM users) a"
    )


def test_exists_sql_wraps_stripped_statement():
    assert exists_sql("SELECT id FROM users LIMIT 1") == (
        "SELECT EXISTS (SELECT id FROM users )"
    )


def test_row_count_reads_row_count_column():
    assert RowCount.model_validate({"row_count": 7}).count == 7
