"""
MySQL / SQLite DDL parser with ALTER TABLE foreign key support
"""
import logging
import re
from typing import List, Optional, Tuple

import sqlparse

from .dialect import Dialect
from .er_model import Column, ForeignKeyClause, ParsedSQL, Table

logger = logging.getLogger(__name__)

# An identifier, bare or quoted with backticks, double quotes or brackets
NAME = r'(?:`[^`]+`|"[^"]+"|\[[^\]]+\]|\w+)'
# Possibly schema-qualified; captures the last part
QUALIFIED_NAME = rf'(?:{NAME}\s*\.\s*)*({NAME})'

CREATE_TABLE_RE = re.compile(
    rf'^CREATE\s+(?:TEMP(?:ORARY)?\s+)?TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?{QUALIFIED_NAME}\s*\(',
    re.IGNORECASE
)
ALTER_TABLE_RE = re.compile(
    rf'^ALTER\s+TABLE\s+(?:ONLY\s+)?(?:IF\s+EXISTS\s+)?{QUALIFIED_NAME}\s+(.*?);?\s*$',
    re.IGNORECASE | re.DOTALL
)
ADD_FOREIGN_KEY_RE = re.compile(
    rf'^ADD\s+(?:CONSTRAINT\s+({NAME})\s+)?FOREIGN\s+KEY\s*(?:{NAME}\s*)?\(([^)]+)\)'
    rf'\s*REFERENCES\s+{QUALIFIED_NAME}\s*(?:\(([^)]+)\))?',
    re.IGNORECASE
)

CONSTRAINT_PREFIX = rf'^(?:CONSTRAINT\s+{NAME}\s+)?'
PRIMARY_KEY_LINE_RE = re.compile(CONSTRAINT_PREFIX + r'PRIMARY\s+KEY', re.IGNORECASE)
FOREIGN_KEY_LINE_RE = re.compile(CONSTRAINT_PREFIX + r'FOREIGN\s+KEY', re.IGNORECASE)
UNIQUE_LINE_RE = re.compile(CONSTRAINT_PREFIX + r'UNIQUE\b', re.IGNORECASE)
CHECK_LINE_RE = re.compile(CONSTRAINT_PREFIX + r'CHECK\b', re.IGNORECASE)
# KEY / INDEX lines list column names, so `key VARCHAR(64)` stays a column
INDEX_LINE_RE = re.compile(
    rf'^(?:FULLTEXT\s+|SPATIAL\s+)?(?:KEY|INDEX)\s*(?:{NAME}\s*)?\(\s*[`"\[A-Za-z_]', re.IGNORECASE
)

COLUMN_LIST_RE = re.compile(r'\(([^)]+)\)')
TABLE_FOREIGN_KEY_RE = re.compile(
    rf'FOREIGN\s+KEY\s*(?:{NAME}\s*)?\(([^)]+)\)\s*REFERENCES\s+{QUALIFIED_NAME}\s*(?:\(([^)]+)\))?',
    re.IGNORECASE
)
INLINE_REFERENCES_RE = re.compile(
    rf'\bREFERENCES\s+{QUALIFIED_NAME}\s*(?:\(([^)]+)\))?', re.IGNORECASE
)
COLUMN_RE = re.compile(rf'^({NAME})(?:\s+(.*))?$', re.DOTALL)

UNKNOWN_TYPE = 'UNKNOWN'
# One word of a column type with its optional (args) and [] suffixes
TYPE_WORD_RE = re.compile(r'\s*(\w+(?:\.\w+)*)(\s*\([^)]*\))?((?:\s*\[\s*\d*\s*\])*)')
CHARACTER_SET_RE = re.compile(r'\s*CHARACTER\s+SET\b', re.IGNORECASE)
# Words that end a column type
TYPE_STOP_WORDS = {
    'CONSTRAINT', 'PRIMARY', 'KEY', 'NOT', 'NULL', 'UNIQUE', 'DEFAULT', 'REFERENCES',
    'CHECK', 'AUTO_INCREMENT', 'AUTOINCREMENT', 'IDENTITY', 'GENERATED', 'AS',
    'COLLATE', 'CHARSET', 'COMMENT', 'ON',
}

# Dialect-agnostic recovery pass over whole ALTER TABLE statements
ALTER_STATEMENT_RE = re.compile(
    rf'ALTER\s+TABLE\s+(?:ONLY\s+)?(?:IF\s+EXISTS\s+)?{QUALIFIED_NAME}\s+(.*?)(?:;|$)',
    re.IGNORECASE | re.DOTALL
)
ALTER_FOREIGN_KEY_RE = re.compile(
    rf'ADD\s+(?:CONSTRAINT\s+({NAME})\s+)?FOREIGN\s+KEY\s*\(([^)]+)\)'
    rf'\s*REFERENCES\s+{QUALIFIED_NAME}\s*\(([^)]+)\)',
    re.IGNORECASE
)


class SQLParseError(Exception):
    """Raised when a dialect parser cannot make sense of a SQL file"""


class DialectParser:
    """Base class for the DDL engines, one per family of dialects"""

    dialects: Tuple[Dialect, ...] = ()

    def handles(self, dialect: Dialect) -> bool:
        return dialect in self.dialects

    def parse(self, sql: str) -> ParsedSQL:
        raise NotImplementedError

    def recover_foreign_keys(self, sql: str) -> List[ForeignKeyClause]:
        """Second look at the raw text for foreign keys the parse may have missed"""
        return []


class MySQLParser(DialectParser):
    """Statement splitter plus column scanner for MySQL and SQLite DDL"""

    dialects = (Dialect.MYSQL, Dialect.SQLITE)

    def parse(self, sql: str) -> ParsedSQL:
        result = ParsedSQL()
        cleaned = sqlparse.format(sql, strip_comments=True)

        for statement in sqlparse.parse(cleaned):
            kind = statement.get_type()
            text = str(statement).strip()
            if kind == 'CREATE':
                table = parse_create_table(text)
                if table is not None:
                    result.tables.append(table)
            elif kind == 'ALTER':
                result.foreign_keys.extend(parse_alter_table(text))

        return result

    def recover_foreign_keys(self, sql: str) -> List[ForeignKeyClause]:
        return recover_alter_foreign_keys(sql)


def unquote(name: str) -> str:
    """Strip identifier quoting: `name`, "name" or [name]"""
    name = name.strip()
    if len(name) >= 2 and (name[0], name[-1]) in (('`', '`'), ('"', '"'), ('[', ']')):
        return name[1:-1]
    return name


def split_columns(column_list: Optional[str]) -> List[str]:
    """Split a parenthesised column list into bare column names"""
    if not column_list:
        return []
    columns = []
    for part in column_list.split(','):
        part = part.strip()
        if not part:
            continue
        if part[0] in '`"[':
            columns.append(unquote(part))
        else:
            # drop ASC/DESC and similar trailing words
            columns.append(part.split()[0])
    return columns


def smart_split(content: str) -> List[str]:
    """Split on top-level commas, ignoring commas inside parentheses or quotes"""
    parts = []
    current = ''
    depth = 0
    in_quote = False
    quote_char = None

    i = 0
    while i < len(content):
        char = content[i]

        if char in ("'", '"', '`') and (i == 0 or content[i-1] != '\\'):
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None

        if not in_quote:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
            elif char == ',' and depth == 0:
                parts.append(current.strip())
                current = ''
                i += 1
                continue

        current += char
        i += 1

    if current.strip():
        parts.append(current.strip())

    return parts


def extract_table_body(sql: str, start_paren: int, table_name: str) -> str:
    """Return the text between the parenthesis at start_paren and its match"""
    paren_count = 1
    i = start_paren + 1
    in_quote = False
    quote_char = None

    while i < len(sql) and paren_count > 0:
        char = sql[i]

        if char in ("'", '"', '`') and sql[i-1] != '\\':
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None

        if not in_quote:
            if char == '(':
                paren_count += 1
            elif char == ')':
                paren_count -= 1

        i += 1

    if paren_count != 0:
        raise SQLParseError(f"Unbalanced parentheses in CREATE TABLE {table_name}")

    return sql[start_paren + 1:i - 1]


def parse_create_table(statement: str) -> Optional[Table]:
    """Build a Table from one CREATE TABLE statement, or None for other CREATEs"""
    name_match = CREATE_TABLE_RE.match(statement)
    if not name_match:
        logger.debug("Skipping non-table CREATE statement: %.60s", statement)
        return None

    table = Table(unquote(name_match.group(1)))
    body = extract_table_body(statement, name_match.end() - 1, table.name)

    # Table-level constraints may precede the columns they name
    constraint_lines = []
    for part in smart_split(body):
        if not part:
            continue

        if (PRIMARY_KEY_LINE_RE.match(part) or FOREIGN_KEY_LINE_RE.match(part)
                or UNIQUE_LINE_RE.match(part)):
            constraint_lines.append(part)
            continue
        if CHECK_LINE_RE.match(part) or INDEX_LINE_RE.match(part):
            continue

        col_match = COLUMN_RE.match(part)
        if not col_match:
            logger.debug("Unrecognised definition in %s: %s", table.name, part)
            continue

        col_name = unquote(col_match.group(1))
        if table.find_column(col_name) is not None:
            logger.debug("Duplicate column %s in %s ignored", col_name, table.name)
            continue
        col_type = column_type(col_match.group(2) or '') or UNKNOWN_TYPE
        table.add_column(extract_column_info(part, col_name, col_type))

    for part in constraint_lines:
        apply_table_constraint(table, part)

    return table


def column_type(definition: str) -> str:
    """
    Read the declared type off the front of a column definition

    The source spelling is kept, multi-word types included
    (``character varying(20)``, ``timestamp with time zone``), up to the
    first constraint keyword. Whitespace inside the argument list is dropped.
    """
    words = []
    pos = 0
    while True:
        match = TYPE_WORD_RE.match(definition, pos)
        if not match or match.group(1).upper() in TYPE_STOP_WORDS:
            break
        if CHARACTER_SET_RE.match(definition, pos):
            break
        args = re.sub(r'\s+', '', match.group(2) or '')
        arrays = re.sub(r'\s+', '', match.group(3))
        words.append(match.group(1) + args + arrays)
        pos = match.end()
    return ' '.join(words)


def extract_column_info(part: str, col_name: str, col_type: str) -> Column:
    """Read inline constraints off a column definition"""
    upper_part = part.upper()

    column = Column(
        name=col_name,
        data_type=col_type,
        is_primary=re.search(r'\bPRIMARY\s+KEY\b', upper_part) is not None,
        is_unique=re.search(r'\bUNIQUE\b', upper_part) is not None,
        nullable=re.search(r'\bNOT\s+NULL\b', upper_part) is None,
        default=extract_default(part),
    )

    ref_match = INLINE_REFERENCES_RE.search(part)
    if ref_match:
        ref_columns = split_columns(ref_match.group(2))
        column.set_reference(unquote(ref_match.group(1)), ref_columns[0] if ref_columns else 'id')

    return column


def extract_default(part: str) -> Optional[str]:
    """Extract the DEFAULT value of a column definition"""
    default_match = re.search(r'DEFAULT\s+([^\s,]+)', part, re.IGNORECASE)
    if default_match:
        value = default_match.group(1).strip("'\"")
        return value if value.upper() != 'NULL' else None
    return None


def apply_table_constraint(table: Table, part: str):
    """Fold a table-level PRIMARY KEY / FOREIGN KEY / UNIQUE clause into the columns"""
    if PRIMARY_KEY_LINE_RE.match(part):
        pk_match = COLUMN_LIST_RE.search(part)
        if pk_match:
            for name in split_columns(pk_match.group(1)):
                column = table.find_column(name)
                if column is not None:
                    column.is_primary = True
                    column.nullable = False
    elif FOREIGN_KEY_LINE_RE.match(part):
        fk_match = TABLE_FOREIGN_KEY_RE.search(part)
        if fk_match:
            clause = ForeignKeyClause(
                table.name,
                split_columns(fk_match.group(1)),
                unquote(fk_match.group(2)),
                split_columns(fk_match.group(3)),
            )
            for column_name, ref_column in clause.pairs():
                column = table.find_column(column_name)
                if column is not None:
                    column.set_reference(clause.ref_table, ref_column)
    else:
        unique_match = COLUMN_LIST_RE.search(part)
        if unique_match:
            names = split_columns(unique_match.group(1))
            # a composite unique key does not make any single column unique
            if len(names) == 1:
                column = table.find_column(names[0])
                if column is not None:
                    column.is_unique = True


def parse_alter_table(statement: str) -> List[ForeignKeyClause]:
    """Collect the ADD FOREIGN KEY actions of one ALTER TABLE statement"""
    alter_match = ALTER_TABLE_RE.match(statement)
    if not alter_match:
        return []

    table_name = unquote(alter_match.group(1))
    clauses = []
    for action in smart_split(alter_match.group(2)):
        fk_match = ADD_FOREIGN_KEY_RE.match(action)
        if not fk_match:
            continue
        clauses.append(ForeignKeyClause(
            table_name,
            split_columns(fk_match.group(2)),
            unquote(fk_match.group(3)),
            split_columns(fk_match.group(4)),
            constraint_name=unquote(fk_match.group(1)) if fk_match.group(1) else None,
        ))
    return clauses


def recover_alter_foreign_keys(sql: str) -> List[ForeignKeyClause]:
    """
    Regex scan of ALTER TABLE ... ADD [CONSTRAINT n] FOREIGN KEY statements

    Works on the text alone, so it also catches statements the statement
    splitter did not classify as ALTER.
    """
    cleaned = sqlparse.format(sql, strip_comments=True)
    clauses = []
    for alter_match in ALTER_STATEMENT_RE.finditer(cleaned):
        table_name = unquote(alter_match.group(1))
        for fk_match in ALTER_FOREIGN_KEY_RE.finditer(alter_match.group(2)):
            clauses.append(ForeignKeyClause(
                table_name,
                split_columns(fk_match.group(2)),
                unquote(fk_match.group(3)),
                split_columns(fk_match.group(4)),
                constraint_name=unquote(fk_match.group(1)) if fk_match.group(1) else None,
            ))
    return clauses
