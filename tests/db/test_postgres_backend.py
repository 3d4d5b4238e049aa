"""Unit tests for PostgresConnection helpers; no database needed."""

from localstore.db.postgres_backend import _parse_rowcount, _translate_placeholders
from localstore.sql import builder


class TestTranslatePlaceholders:
    """Test ? → $N placeholder translation."""

    def test_no_placeholders(self):
        assert _translate_placeholders("SELECT * FROM people;") == "SELECT * FROM people;"

    def test_where_clause(self):
        assert _translate_placeholders("SELECT * FROM people WHERE name=?;") == (
            "SELECT * FROM people WHERE name=$1;"
        )

    def test_insert_values(self):
        sql = "INSERT INTO people(name,age) VALUES(?, ?);"
        assert _translate_placeholders(sql) == "INSERT INTO people(name,age) VALUES($1, $2);"

    def test_set_before_where(self):
        sql = "UPDATE people SET name=?, age=? WHERE name=?;"
        assert _translate_placeholders(sql) == "UPDATE people SET name=$1, age=$2 WHERE name=$3;"

    def test_empty_sql(self):
        assert _translate_placeholders("") == ""

    def test_quoted_question_marks_untouched(self):
        sql = builder.select("people", "name = 'who?'").text
        assert _translate_placeholders(sql) == "SELECT * FROM people WHERE name = 'who?';"

    def test_numbering_skips_literals_and_comments(self):
        sql = "SELECT 'a?' AS q /* b? */ FROM t WHERE x = ? -- c?\nAND y = ?;"
        assert _translate_placeholders(sql) == (
            "SELECT 'a?' AS q /* b? */ FROM t WHERE x = $1 -- c?\nAND y = $2;"
        )


class TestParseRowcount:
    def test_insert(self):
        assert _parse_rowcount("INSERT 0 1") == 1

    def test_update(self):
        assert _parse_rowcount("UPDATE 3") == 3

    def test_delete_none(self):
        assert _parse_rowcount("DELETE 0") == 0

    def test_select(self):
        assert _parse_rowcount("SELECT 2") == 2

    def test_no_count(self):
        assert _parse_rowcount("CREATE TABLE") == -1

    def test_missing(self):
        assert _parse_rowcount(None) == -1
        assert _parse_rowcount("") == -1
