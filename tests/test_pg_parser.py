"""Tests for the PostgreSQL parser."""
import pytest

from ddl_to_er.src.pg_parser import PostgresParser, declared_types
from ddl_to_er.src.sql_parser import SQLParseError
from ddl_to_er.src.visualization import render_er_diagram


@pytest.fixture
def parsed(postgres_sql):
    return PostgresParser().parse(postgres_sql)


def _tables(parsed):
    return {table.name: table for table in parsed.tables}


def test_tables_in_statement_order(parsed):
    assert [t.name for t in parsed.tables] == ["authors", "books", "book_details", "reviews"]


def test_columns_and_types(parsed):
    authors = _tables(parsed)["authors"]
    assert [col.name for col in authors.columns] == ["id", "name", "email"]
    assert authors.columns[0].data_type.upper() == "SERIAL"
    assert authors.columns[2].data_type.upper() == "VARCHAR(255)"



def test_declared_type_spelling_is_kept():
    parsed = PostgresParser().parse(
        "CREATE TABLE t (id SERIAL PRIMARY KEY, n integer, ts timestamp with time zone, "
        "c character varying(20) NOT NULL, b bool, f float8, amount numeric(10, 2), tags text[]);"
    )
    assert [col.data_type for col in parsed.tables[0].columns] == [
        "SERIAL", "integer", "timestamp with time zone", "character varying(20)",
        "bool", "float8", "numeric(10,2)", "text[]",
    ]


def test_declared_types_first_table_of_a_name_wins():
    declared = declared_types(
        "CREATE TABLE t (a integer);\n"
        "-- CREATE TABLE t (a text);\n"
        "CREATE TABLE T (a bigint);\n"
        "CREATE INDEX idx_a ON t (a);\n"
    )
    assert declared == {"t": {"a": "integer"}}


def test_inline_constraints(parsed):
    authors = _tables(parsed)["authors"]
    assert authors.find_column("id").is_primary
    assert authors.find_column("email").is_unique
    assert authors.find_column("name").nullable is False


def test_inline_references(parsed):
    author_id = _tables(parsed)["books"].find_column("author_id")
    assert author_id.is_foreign
    assert author_id.references == {"table": "authors", "column": "id"}


def test_table_level_constraints(parsed):
    reviews = _tables(parsed)["reviews"]
    assert reviews.find_column("id").is_primary
    book_id = reviews.find_column("book_id")
    assert book_id.references == {"table": "books", "column": "id"}
    assert not book_id.is_primary



def test_table_level_unique_makes_a_one_to_one_link():
    parsed = PostgresParser().parse(
        "CREATE TABLE u (id SERIAL PRIMARY KEY);\n"
        "CREATE TABLE p (id SERIAL PRIMARY KEY, user_id INTEGER REFERENCES u(id), "
        "a INTEGER, b INTEGER, UNIQUE (user_id), CONSTRAINT uq_ab UNIQUE (a, b));"
    )
    profile = parsed.tables[1]
    assert profile.find_column("user_id").is_unique
    # a composite unique key marks neither column
    assert not profile.find_column("a").is_unique
    assert not profile.find_column("b").is_unique
    assert "U ||--|| P : user_id→id" in render_er_diagram(parsed.tables)


def test_alter_table_primary_keys_are_reported():
    parsed = PostgresParser().parse(
        "CREATE TABLE public.users (id integer NOT NULL, name text);\n"
        "ALTER TABLE ONLY public.users ADD CONSTRAINT users_pkey PRIMARY KEY (id);\n"
    )
    assert [(c.table, c.columns) for c in parsed.primary_keys] == [("users", ["id"])]
    assert parsed.foreign_keys == []


def test_alter_table_foreign_keys_are_reported(parsed):
    assert len(parsed.foreign_keys) == 1
    clause = parsed.foreign_keys[0]
    assert clause.table == "book_details"
    assert clause.columns == ["book_id"]
    assert clause.ref_table == "books"
    assert clause.ref_columns == ["id"]
    # applying the clause is the schema builder's job
    details = _tables(parsed)["book_details"]
    assert details.find_column("book_id").references is None


def test_plain_columns_have_no_flags():
    parsed = PostgresParser().parse("CREATE TABLE notes (body TEXT, author TEXT, created DATE);")
    table = parsed.tables[0]
    assert [col.name for col in table.columns] == ["body", "author", "created"]
    assert not any(col.is_primary or col.is_foreign or col.is_unique for col in table.columns)


def test_malformed_sql_raises_parse_error():
    with pytest.raises(SQLParseError):
        PostgresParser().parse("CREATE TABLE broken (id SERIAL PRIMARY KEY, name TEXT")
