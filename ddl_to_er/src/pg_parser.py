"""
PostgreSQL DDL parser built on sqlglot
"""
import logging
from typing import Dict, List, Optional, Tuple

import sqlglot
import sqlparse
from sqlglot import exp
from sqlglot.errors import ParseError, TokenError

from .dialect import Dialect
from .er_model import Column, ForeignKeyClause, ParsedSQL, PrimaryKeyClause, Table
from .sql_parser import UNKNOWN_TYPE, DialectParser, SQLParseError, parse_create_table

logger = logging.getLogger(__name__)


class PostgresParser(DialectParser):
    """Parses CREATE TABLE / ALTER TABLE statements with sqlglot's postgres grammar."""

    dialects = (Dialect.POSTGRES,)

    def parse(self, sql: str) -> ParsedSQL:
        try:
            statements = sqlglot.parse(sql, read="postgres")
        except (ParseError, TokenError) as e:
            raise SQLParseError(str(e)) from e

        declared = declared_types(sql)
        result = ParsedSQL()
        for statement in statements:
            if statement is None:
                continue
            if isinstance(statement, exp.Create) and statement.kind == "TABLE":
                table = self._extract_table(statement, declared)
                if table is not None:
                    result.tables.append(table)
            elif isinstance(statement, exp.Alter):
                result.primary_keys.extend(self._extract_alter_primary_keys(statement))
                result.foreign_keys.extend(self._extract_alter_foreign_keys(statement))

        return result

    def _extract_table(self, statement: exp.Create,
                       declared: Dict[str, Dict[str, str]]) -> Optional[Table]:
        schema_node = statement.this
        if not isinstance(schema_node, exp.Schema):
            # CREATE TABLE ... AS SELECT has no column list
            logger.debug("Skipping CREATE TABLE without column definitions: %s", schema_node)
            return None

        table = Table(schema_node.this.name)
        column_types = declared.get(table.name.lower(), {})
        constraints = []

        for expression in schema_node.expressions:
            if isinstance(expression, exp.ColumnDef):
                name = expression.this.name
                if table.find_column(name) is not None:
                    logger.debug("Duplicate column %s in %s ignored", name, table.name)
                    continue
                table.add_column(self._extract_column(expression, column_types))
            elif isinstance(expression, exp.Constraint):
                # CONSTRAINT name PRIMARY KEY (...) and friends
                constraints.extend(expression.expressions)
            else:
                constraints.append(expression)

        for constraint in constraints:
            self._apply_table_constraint(table, constraint)

        return table

    def _extract_column(self, expression: exp.ColumnDef, column_types: Dict[str, str]) -> Column:
        name = expression.this.name
        data_type = column_types.get(name.lower(), UNKNOWN_TYPE)
        if data_type == UNKNOWN_TYPE:
            kind = expression.args.get("kind")
            if kind is not None:
                data_type = kind.sql(dialect="postgres")
        column = Column(name=name, data_type=data_type)

        for constraint in expression.constraints:
            kind = constraint.kind
            if isinstance(kind, exp.PrimaryKeyColumnConstraint):
                column.is_primary = True
                column.nullable = False
            elif isinstance(kind, exp.UniqueColumnConstraint):
                column.is_unique = True
            elif isinstance(kind, exp.NotNullColumnConstraint):
                column.nullable = bool(kind.args.get("allow_null"))
            elif isinstance(kind, exp.DefaultColumnConstraint):
                column.default = kind.this.sql(dialect="postgres")
            elif isinstance(kind, exp.Reference):
                ref_table, ref_columns = _reference_target(kind)
                column.set_reference(ref_table, ref_columns[0] if ref_columns else "id")

        return column

    def _apply_table_constraint(self, table: Table, constraint: exp.Expression):
        if isinstance(constraint, exp.PrimaryKey):
            for name in _column_names(constraint.expressions):
                column = table.find_column(name)
                if column is not None:
                    column.is_primary = True
                    column.nullable = False
        elif isinstance(constraint, exp.ForeignKey):
            clause = _foreign_key_clause(table.name, constraint)
            for column_name, ref_column in clause.pairs():
                column = table.find_column(column_name)
                if column is not None:
                    column.set_reference(clause.ref_table, ref_column)
        elif isinstance(constraint, exp.UniqueColumnConstraint):
            target = constraint.this
            names = _column_names(target.expressions) if isinstance(target, exp.Schema) else []
            if len(names) == 1:
                column = table.find_column(names[0])
                if column is not None:
                    column.is_unique = True

    def _extract_alter_primary_keys(self, statement: exp.Alter) -> List[PrimaryKeyClause]:
        # pg_dump adds every primary key this way: ALTER TABLE ONLY t ADD CONSTRAINT t_pkey PRIMARY KEY (id)
        table_name = statement.this.name
        return [
            PrimaryKeyClause(table_name, _column_names(primary_key.expressions))
            for primary_key in statement.find_all(exp.PrimaryKey)
        ]

    def _extract_alter_foreign_keys(self, statement: exp.Alter) -> List[ForeignKeyClause]:
        table_name = statement.this.name
        clauses = []
        for foreign_key in statement.find_all(exp.ForeignKey):
            clause = _foreign_key_clause(table_name, foreign_key)
            constraint = foreign_key.find_ancestor(exp.Constraint)
            if constraint is not None and constraint.this is not None:
                clause.constraint_name = constraint.this.name
            clauses.append(clause)
        return clauses



def declared_types(sql: str) -> Dict[str, Dict[str, str]]:
    """
    Column types as written in the source, by lowercased table then column name

    sqlglot regenerates types in its canonical form (``integer`` comes back
    as ``INT``, ``timestamp with time zone`` as ``TIMESTAMPTZ``), so the
    spelling is read from the CREATE TABLE text. The first table of a name wins.
    """
    declared: Dict[str, Dict[str, str]] = {}
    cleaned = sqlparse.format(sql, strip_comments=True)
    for statement in sqlparse.parse(cleaned):
        if statement.get_type() != 'CREATE':
            continue
        try:
            table = parse_create_table(str(statement).strip())
        except SQLParseError as e:
            # the sqlglot AST already parsed; its own type rendering is used
            logger.debug("No declared types for statement: %s", e)
            continue
        if table is None or table.name.lower() in declared:
            continue
        declared[table.name.lower()] = {col.name.lower(): col.data_type for col in table.columns}
    return declared


def _identifier_name(node: exp.Expression) -> str:
    identifier = node.find(exp.Identifier)
    return identifier.name if identifier is not None else node.name


def _column_names(nodes: List[exp.Expression]) -> List[str]:
    return [_identifier_name(node) for node in nodes]


def _reference_target(reference: exp.Reference) -> Tuple[str, List[str]]:
    """Table name and column names a REFERENCES clause points at"""
    target = reference.this
    if isinstance(target, exp.Schema):
        return target.this.name, _column_names(target.expressions)
    return target.name, []


def _foreign_key_clause(table_name: str, foreign_key: exp.ForeignKey) -> ForeignKeyClause:
    reference = foreign_key.args.get("reference")
    if reference is None:
        ref_table, ref_columns = "", []
    else:
        ref_table, ref_columns = _reference_target(reference)
    return ForeignKeyClause(table_name, _column_names(foreign_key.expressions), ref_table, ref_columns)
