"""
SQL dialect detection by signature tokens
"""
from enum import Enum
from typing import List, Tuple


class Dialect(str, Enum):
    POSTGRES = 'postgres'
    MYSQL = 'mysql'
    SQLITE = 'sqlite'


# Checked in order, first hit wins. SQLite's AUTOINCREMENT must stay after
# MySQL's AUTO_INCREMENT.
DIALECT_SIGNATURES: List[Tuple[Dialect, Tuple[str, ...]]] = [
    (Dialect.POSTGRES, ('SERIAL', 'BYTEA', '::')),
    (Dialect.MYSQL, ('AUTO_INCREMENT', 'ENGINE=', 'UNSIGNED')),
    (Dialect.SQLITE, ('AUTOINCREMENT', 'WITHOUT ROWID')),
]

DEFAULT_DIALECT = Dialect.POSTGRES


def detect_dialect(sql: str) -> Dialect:
    """Guess which SQL dialect a DDL script is written in"""
    upper_sql = sql.upper()
    for dialect, signatures in DIALECT_SIGNATURES:
        if any(token in upper_sql for token in signatures):
            return dialect
    return DEFAULT_DIALECT
