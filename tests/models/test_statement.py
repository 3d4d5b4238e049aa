"""Tests for the Statement model."""

import pytest
from pydantic import ValidationError

from localstore.models.statement import Statement, count_placeholders


class TestCountPlaceholders:
    def test_plain(self):
        assert count_placeholders("UPDATE t SET a = ? WHERE b = ?") == 2

    def test_ignores_single_quoted_literal(self):
        assert count_placeholders("SELECT * FROM t WHERE q = 'why?' AND id = ?") == 1

    def test_ignores_double_quoted_literal(self):
        assert count_placeholders('SELECT * FROM t WHERE name = "Who?"') == 0

    def test_escaped_quote_inside_literal(self):
        assert count_placeholders("SELECT 'it''s?' FROM t WHERE id = ?") == 1

    def test_ignores_line_comment(self):
        assert count_placeholders("SELECT ? -- don't count this?\nFROM t") == 1

    def test_ignores_block_comment(self):
        assert count_placeholders("SELECT /* which? */ a FROM t WHERE id = ?") == 1

    def test_unterminated_comment_hides_the_rest(self):
        assert count_placeholders("SELECT ? /* a = ?") == 1


class TestStatement:
    def test_valid(self):
        statement = Statement(text="SELECT * FROM people WHERE name = ?;", parameters=["John"])
        assert statement.parameters == ["John"]

    def test_defaults_to_no_parameters(self):
        assert Statement(text="SELECT * FROM people;").parameters == []

    def test_placeholder_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="placeholder"):
            Statement(text="SELECT * FROM people WHERE name = ?;")

    def test_extra_parameters_rejected(self):
        with pytest.raises(ValidationError):
            Statement(text="SELECT * FROM people;", parameters=["John"])

    def test_commented_apostrophe_accepted(self):
        statement = Statement(text="SELECT * FROM t -- don't\nWHERE id = ?;", parameters=[1])
        assert statement.parameters == [1]


class TestCoerce:
    def test_string(self):
        assert Statement.coerce("SELECT 1;") == Statement(text="SELECT 1;")

    def test_pair(self):
        statement = Statement.coerce(["SELECT * FROM t WHERE a = ?;", [1]])
        assert statement.text == "SELECT * FROM t WHERE a = ?;"
        assert statement.parameters == [1]

    def test_pair_with_scalar_params(self):
        assert Statement.coerce(("SELECT ?;", "x")).parameters == ["x"]

    def test_statement_passes_through(self):
        statement = Statement(text="SELECT 1;")
        assert Statement.coerce(statement) is statement

    def test_rejects_other(self):
        with pytest.raises(TypeError):
            Statement.coerce(42)
