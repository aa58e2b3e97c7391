"""
Schema builder - folds parsed SQL files into one list of tables
"""
import logging
from typing import Iterable, List, Optional

from .dialect import Dialect, detect_dialect
from .er_model import ForeignKeyClause, PrimaryKeyClause, Table
from .pg_parser import PostgresParser
from .sql_parser import DialectParser, MySQLParser, SQLParseError

logger = logging.getLogger(__name__)

# Searched in order; the first parser that handles a dialect wins
PARSERS: List[DialectParser] = [PostgresParser(), MySQLParser()]


def parser_for(dialect: Dialect, parsers: Optional[List[DialectParser]] = None) -> DialectParser:
    """Pick the registered parser for a dialect"""
    for parser in parsers if parsers is not None else PARSERS:
        if parser.handles(dialect):
            return parser
    raise LookupError(f"No parser registered for dialect {dialect.value}")


class SchemaBuilder:
    """Accumulates tables across SQL files for a single diagram run"""

    def __init__(self, parsers: Optional[List[DialectParser]] = None):
        self.parsers = parsers if parsers is not None else PARSERS
        self.tables: List[Table] = []

    def add_sql(self, sql: str, source: str = '<sql>') -> int:
        """
        Parse one SQL file and append its tables

        Args:
            sql: Raw SQL text
            source: Label used in log messages

        Returns:
            Number of tables the file contributed (0 when parsing failed)
        """
        dialect = detect_dialect(sql)
        parser = parser_for(dialect, self.parsers)
        logger.debug("Parsing %s as %s", source, dialect.value)

        try:
            parsed = parser.parse(sql)
        except SQLParseError as e:
            logger.warning("Failed to parse %s (%s): %s", source, dialect.value, e)
            return 0

        self.tables.extend(parsed.tables)
        self.apply_primary_keys(parsed.primary_keys)
        self.apply_foreign_keys(parsed.foreign_keys)
        # the recovery pass runs last and wins
        self.apply_foreign_keys(parser.recover_foreign_keys(sql))

        return len(parsed.tables)

    def find_table(self, name: str) -> Optional[Table]:
        """Exact name match first, then case-insensitive; earliest table wins"""
        for table in self.tables:
            if table.name == name:
                return table
        wanted = name.lower()
        for table in self.tables:
            if table.name.lower() == wanted:
                return table
        return None

    def apply_primary_keys(self, clauses: Iterable[PrimaryKeyClause]):
        for clause in clauses:
            table = self.find_table(clause.table)
            if table is None:
                logger.debug("Dropping %r: table %s not defined", clause, clause.table)
                continue
            for column_name in clause.columns:
                column = table.find_column(column_name)
                if column is not None:
                    column.is_primary = True
                    column.nullable = False

    def apply_foreign_keys(self, clauses: Iterable[ForeignKeyClause]):
        for clause in clauses:
            table = self.find_table(clause.table)
            if table is None:
                logger.debug("Dropping %r: table %s not defined", clause, clause.table)
                continue
            for column_name, ref_column in clause.pairs():
                column = table.find_column(column_name)
                if column is not None:
                    column.set_reference(clause.ref_table, ref_column)


def build_schema(sql_texts: Iterable[str]) -> List[Table]:
    """Parse SQL texts in order and return every table found"""
    builder = SchemaBuilder()
    for index, sql in enumerate(sql_texts):
        builder.add_sql(sql, source=f'<sql #{index + 1}>')
    return builder.tables
