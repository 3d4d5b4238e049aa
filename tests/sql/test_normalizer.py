"""Tests for where/changes/values normalization."""

from localstore.models.condition import Keyed, Paired
from localstore.sql.normalizer import AND, COMMA, normalize


def test_hash_form():
    assert normalize({"name": "John"}) == ("name=?", ["John"])


def test_pair_form():
    assert normalize(["name = ?", ["John"]]) == ("name = ?", ["John"])


def test_string_form_verbatim():
    assert normalize("name = 'O''Brien'") == ("name = 'O''Brien'", [])


def test_absent():
    assert normalize(None) == (None, [])


def test_empty_mapping_same_as_absent():
    assert normalize({}) == normalize(None)


def test_where_joiner():
    assert normalize({"a": 1, "b": 2}, AND) == ("a=? AND b=?", [1, 2])


def test_set_joiner():
    assert normalize({"a": 1, "b": 2}, COMMA) == ("a=?, b=?", [1, 2])


def test_pair_is_idempotent():
    once = normalize(["name = ? AND age = ?", ["John", 30]])
    assert normalize(list(once)) == once


def test_keyed_result_renormalizes_unchanged():
    text, params = normalize(Keyed({"name": "John", "age": 30}))
    assert normalize(Paired(text, params)) == (text, params)
