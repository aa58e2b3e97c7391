"""
ER Model Classes - Represent tables, columns, and relationships
"""
from typing import List, Optional, Dict, Any


class Column:
    """Represents a column of a table"""

    def __init__(self, name: str, data_type: str, is_primary: bool = False,
                 is_unique: bool = False, nullable: bool = True,
                 default: Optional[str] = None):
        self.name = name
        self.data_type = data_type
        self.is_primary = is_primary
        self.is_unique = is_unique
        self.nullable = nullable
        self.default = default
        self.is_foreign = False
        self.references: Optional[Dict[str, str]] = None

    def set_reference(self, table: str, column: str):
        """Mark this column as a foreign key pointing at table.column"""
        self.is_foreign = True
        self.references = {'table': table, 'column': column}

    def to_dict(self) -> Dict[str, Any]:
        """Converts the column to a dictionary."""
        return {
            'name': self.name,
            'type': self.data_type,
            'isPK': self.is_primary,
            'isFK': self.is_foreign,
            'isUnique': self.is_unique,
            'nullable': self.nullable,
            'default': self.default,
            'references': dict(self.references) if self.references else None,
        }

    def __repr__(self):
        pk_str = " [PK]" if self.is_primary else ""
        fk_str = ""
        if self.references:
            fk_str = f" -> {self.references['table']}.{self.references['column']}"
        return f"Column(name={self.name}{pk_str}, type={self.data_type}{fk_str})"


class Table:
    """Represents a table parsed from a CREATE TABLE statement"""

    def __init__(self, name: str):
        self.name = name
        self.columns: List[Column] = []

    def add_column(self, column: Column):
        """Add a column to this table"""
        self.columns.append(column)

    def find_column(self, name: str) -> Optional[Column]:
        """Look a column up by name, ignoring case"""
        wanted = name.lower()
        for column in self.columns:
            if column.name.lower() == wanted:
                return column
        return None

    @property
    def primary_keys(self) -> List[Column]:
        return [col for col in self.columns if col.is_primary]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns],
        }

    def __repr__(self):
        return f"Table(name={self.name}, columns={len(self.columns)})"


class Relation:
    """An explicit relationship read from an annotation file"""

    def __init__(self, name: str, source_table: str, source_column: str,
                 target_table: str, target_column: str, cardinality: str = ''):
        self.name = name
        self.source_table = source_table
        self.source_column = source_column
        self.target_table = target_table
        self.target_column = target_column
        self.cardinality = cardinality

    @property
    def is_many(self) -> bool:
        return 'many' in self.cardinality.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'from': self.source_table,
            'fromAttr': self.source_column,
            'to': self.target_table,
            'toAttr': self.target_column,
            'type': self.cardinality,
        }

    def __repr__(self):
        return (f"Relation({self.source_table}.{self.source_column} -> "
                f"{self.target_table}.{self.target_column}, type={self.cardinality})")


class ForeignKeyClause:
    """A FOREIGN KEY declaration (column lists on both sides), not yet applied"""

    def __init__(self, table: str, columns: List[str], ref_table: str,
                 ref_columns: List[str], constraint_name: Optional[str] = None):
        self.table = table
        self.columns = columns
        self.ref_table = ref_table
        self.ref_columns = ref_columns
        self.constraint_name = constraint_name

    def pairs(self):
        """Pair child columns with parent columns by position.

        A shorter parent list reuses its first column for the remaining
        child columns; an empty one assumes ``id``.
        """
        for i, column in enumerate(self.columns):
            if i < len(self.ref_columns):
                yield column, self.ref_columns[i]
            elif self.ref_columns:
                yield column, self.ref_columns[0]
            else:
                yield column, 'id'

    def __repr__(self):
        return (f"ForeignKeyClause({self.table}({', '.join(self.columns)}) -> "
                f"{self.ref_table}({', '.join(self.ref_columns)}))")


class PrimaryKeyClause:
    """A PRIMARY KEY added after the table was created (ALTER TABLE ... ADD)"""

    def __init__(self, table: str, columns: List[str]):
        self.table = table
        self.columns = columns

    def __repr__(self):
        return f"PrimaryKeyClause({self.table}({', '.join(self.columns)}))"


class ParsedSQL:
    """What a dialect parser extracted from one SQL file"""

    def __init__(self, tables: Optional[List[Table]] = None,
                 foreign_keys: Optional[List[ForeignKeyClause]] = None,
                 primary_keys: Optional[List[PrimaryKeyClause]] = None):
        self.tables = tables if tables is not None else []
        self.foreign_keys = foreign_keys if foreign_keys is not None else []
        self.primary_keys = primary_keys if primary_keys is not None else []


def derive_foreign_key_relations(tables: List[Table]) -> List[Dict[str, Any]]:
    """
    Build relationship records from foreign key columns

    Args:
        tables: Tables in parse order (duplicates included)

    Returns:
        One record per foreign key column, with a one_to_one flag when the
        column is unique or the only primary key column of its table
    """
    relationships = []
    for table in tables:
        pk_count = len(table.primary_keys)
        for col in table.columns:
            if not col.is_foreign or not col.references:
                continue
            is_sole_pk = col.is_primary and pk_count == 1
            relationships.append({
                'from': table.name,
                'fromAttr': col.name,
                'to': col.references['table'],
                'toAttr': col.references['column'],
                'one_to_one': col.is_unique or is_sole_pk,
            })
    return relationships
