"""
SQL DDL to ER Diagram Converter Package
"""
from .dialect import Dialect, detect_dialect
from .sql_parser import SQLParseError, DialectParser, MySQLParser
from .pg_parser import PostgresParser
from .er_model import Column, Table, Relation, ForeignKeyClause, PrimaryKeyClause
from .schema_builder import SchemaBuilder, build_schema, parser_for
from .relations import parse_relations
from .visualization import render_er_diagram, ERDiagramRenderer
from .pipeline import build_er_model, generate_er_diagram

__all__ = [
    'Dialect',
    'detect_dialect',
    'SQLParseError',
    'DialectParser',
    'MySQLParser',
    'PostgresParser',
    'Column',
    'Table',
    'Relation',
    'ForeignKeyClause',
    'PrimaryKeyClause',
    'SchemaBuilder',
    'build_schema',
    'parser_for',
    'parse_relations',
    'render_er_diagram',
    'ERDiagramRenderer',
    'build_er_model',
    'generate_er_diagram',
]
