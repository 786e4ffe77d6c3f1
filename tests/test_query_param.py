# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""Tests for query params."""

import pytest

from sqlalchemy import Boolean, Column, Integer, MetaData, String, Table, insert, select
from sqlalchemy.dialects import mysql, postgresql

from fastfield.db import dialect_name
from fastfield.query import (
    InvalidParamError,
    QueryParam,
    convert_value,
    escape_param,
    json_contains,
    parse_param,
    parse_query_param,
    to_like_pattern,
)


PEOPLE = [
    {"id": 1, "name": "alice", "age": 30, "note": None},
    {"id": 2, "name": "bob", "age": 25, "note": ""},
    {"id": 3, "name": "Carol", "age": 40, "note": "vip"},
    {"id": 4, "name": "a*b", "age": 18, "note": "x"},
]


@pytest.fixture
def people(connection):
    table = Table(
        "people",
        MetaData(),
        Column("id", Integer, primary_key=True),
        Column("name", String(50)),
        Column("age", Integer),
        Column("note", String(50), nullable=True),
    )
    table.metadata.create_all(connection)
    connection.execute(insert(table), PEOPLE)

    return table


def select_ids(connection, table, condition):
    query = select(table.c.id).order_by(table.c.id)

    if condition is not None:
        query = query.where(condition)

    return connection.execute(query).scalars().all()


class TestEscapeParam:
    """Tests for escape_param()."""

    def test_special_chars(self):
        assert escape_param("a,b*c") == "a\\,b\\*c"

    def test_backslash(self):
        assert escape_param("a\\b") == "a\\\\b"
        assert escape_param("a\\,b") == "a\\\\\\,b"

    @pytest.mark.parametrize("value", ["not me", ">= 5", "<5", "=x", "!=x", ":empty:", ":NotEmpty:"])
    def test_leading_operator(self, value):
        assert escape_param(value) == "\\" + value

    def test_leading_operator_kept(self):
        assert escape_param("not me", leading=False) == "not me"
        assert escape_param(">= 5,6", leading=False) == ">= 5\\,6"

    def test_plain(self):
        assert escape_param("nothing") == "nothing"


class TestParseQueryParam:
    """Tests for parse_query_param() and QueryParam.parse()."""

    def test_string(self):
        assert parse_query_param("foo, bar") == QueryParam("or", ["foo", "bar"])

    def test_glue_in_string(self):
        assert parse_query_param("not foo, bar") == QueryParam("not", ["foo", "bar"])
        assert parse_query_param("and > 20, < 35") == QueryParam("and", ["> 20", "< 35"])

    def test_list(self):
        assert parse_query_param(["and", "a", "b"]) == QueryParam("and", ["a", "b"])
        assert parse_query_param(["a", "b"]) == QueryParam("or", ["a", "b"])

    def test_escaped_comma(self):
        assert parse_query_param("a\\,b, c") == QueryParam("or", ["a,b", "c"])

    def test_escaped_backslash_before_comma(self):
        assert parse_query_param("a\\\\, b") == QueryParam("or", ["a\\\\", "b"])

    def test_empty(self):
        assert parse_query_param(None) == QueryParam()
        assert parse_query_param("") == QueryParam()
        assert parse_query_param("not") == QueryParam()
        assert parse_query_param([]) == QueryParam()

    def test_scalars_and_mappings(self):
        assert parse_query_param(5) == QueryParam("or", [5])
        assert parse_query_param({"a": "x", "b": "y"}) == QueryParam("or", ["x", "y"])

    def test_query_param_passthrough(self):
        param = QueryParam("and", ["a"])

        assert parse_query_param(param) is param
        assert QueryParam.parse("not a") == QueryParam("not", ["a"])

    def test_invalid(self):
        with pytest.raises(InvalidParamError):
            parse_query_param(object())


class TestParseParam:
    """Tests for parse_param() on SQLite."""

    @pytest.mark.parametrize(
        "column_name, value, expected",
        [
            ("name", "alice, bob", [1, 2]),
            ("name", "not alice, bob", [3, 4]),
            ("name", "a*", [1, 4]),
            ("name", "not a*", [2, 3]),
            ("name", "a\\*b", [4]),
            ("age", "> 20", [1, 2, 3]),
            ("age", ["and", "> 20", "< 35"], [1, 2]),
            ("age", "and > 20, < 35", [1, 2]),
            ("age", "18, 40", [3, 4]),
            ("age", "<= 25", [2, 4]),
            ("age", "not 18", [1, 2, 3]),
            ("note", ":empty:", [1, 2]),
            ("note", ":notempty:", [3, 4]),
            ("note", "not :empty:", [3, 4]),
            ("note", "= \\:empty:", []),
        ],
    )
    def test_predicates(self, connection, people, column_name, value, expected):
        condition = parse_param(people.c[column_name], value)

        assert select_ids(connection, people, condition) == expected

    def test_case_insensitive(self, connection, people):
        assert select_ids(connection, people, parse_param(people.c.name, "carol")) == []
        assert select_ids(
            connection, people, parse_param(people.c.name, "carol", case_insensitive=True)
        ) == [3]

    def test_default_operator(self, connection, people):
        condition = parse_param(people.c.age, "30", default_operator=">=")

        assert select_ids(connection, people, condition) == [1, 3]

    @pytest.mark.parametrize("value", [None, "", "not", [], QueryParam()])
    def test_empty_param(self, people, value):
        assert parse_param(people.c.name, value) is None


class TestHelpers:
    """Tests for the value helpers."""

    def test_to_like_pattern(self):
        assert to_like_pattern("50%_off*") == "50\\%\\_off%"
        assert to_like_pattern("a\\*b*") == "a*b%"
        assert to_like_pattern("a\\\\*") == "a\\\\%"
        assert to_like_pattern("a\\\\\\*b") == "a\\\\*b"

    def test_convert_value(self):
        assert convert_value(Column("age", Integer), "5") == 5
        assert convert_value(Column("age", Integer), "five") == "five"
        assert convert_value(Column("active", Boolean), "true") is True
        assert convert_value(Column("name", String), "5") == "5"
        assert convert_value(Column("age", Integer), 5) == 5


class TestJsonContains:
    """Tests for json_contains() on the supported dialects."""

    def test_postgresql(self):
        condition = json_contains(Column("colors", String), "red", "postgresql")

        assert "@>" in str(condition.compile(dialect=postgresql.dialect()))

    def test_mysql(self):
        condition = json_contains(Column("colors", String), "red", "mysql")

        assert "json_contains" in str(condition.compile(dialect=mysql.dialect())).lower()

    def test_generic(self):
        condition = json_contains(Column("colors", String), "red")

        assert "LIKE" in str(condition)

    def test_dialect_name(self, connection):
        assert dialect_name(None) is None
        assert dialect_name("mysql") == "mysql"
        assert dialect_name(connection) == "sqlite"
        assert dialect_name(connection.engine) == "sqlite"
        assert dialect_name(postgresql.dialect()) == "postgresql"
