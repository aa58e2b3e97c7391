"""
ER Diagram Visualization Module - Renders ER diagrams as Mermaid erDiagram text
"""
import re
from typing import List, Optional

from .er_model import Relation, Table, derive_foreign_key_relations

ONE_TO_ONE = '||--||'
ONE_TO_MANY = '||--o{'

EMPTY_DIAGRAM = '\n'.join([
    'erDiagram',
    '  EMPTY {',
    '    string note "No tables found"',
    '  }',
])

# Applied in order; each would otherwise be read as diagram syntax
LABEL_REPLACEMENTS = [
    ('--', '—'),
    ('{', ''),
    ('}', ''),
    ('[', ''),
    (']', ''),
    ('|', ''),
    ('->', '→'),
    ('<', '‹'),
    ('>', '›'),
]


def sanitize_label(label: str) -> str:
    """Make a relationship label safe to place after the colon"""
    for old, new in LABEL_REPLACEMENTS:
        label = label.replace(old, new)
    label = label.strip()
    if re.search(r'\s', label):
        label = '"' + label.replace('"', "'") + '"'
    return label


class ERDiagramRenderer:
    """Builds the text of a Mermaid ER diagram"""

    def __init__(self):
        self.lines = ['erDiagram']

    def render_entities(self, tables: List[Table]):
        """Render one block per table name; the first table with a given name wins"""
        seen = set()
        for table in tables:
            key = table.name.upper()
            if key in seen:
                continue
            seen.add(key)

            self.lines.append(f'  {key} {{')
            for col in table.columns:
                data_type = re.sub(r'\s+', '_', col.data_type.upper())
                line = f'    {data_type} {col.name}'
                if col.is_primary:
                    line += ' PK'
                elif col.is_foreign:
                    line += ' FK'
                self.lines.append(line)
            self.lines.append('  }')

    def render_relationships(self, relations: List[Relation]):
        """Render the relationships from the annotation file"""
        for rel in relations:
            arrow = ONE_TO_MANY if rel.is_many else ONE_TO_ONE
            label = sanitize_label(rel.name or rel.cardinality or 'rel')
            self.lines.append(
                f'  {rel.target_table.upper()} {arrow} {rel.source_table.upper()} : {label}'
            )

    def render_foreign_keys(self, tables: List[Table]):
        """Render one relationship per foreign key column"""
        for fk in derive_foreign_key_relations(tables):
            arrow = ONE_TO_ONE if fk['one_to_one'] else ONE_TO_MANY
            label = sanitize_label(f"{fk['fromAttr']}→{fk['toAttr']}")
            self.lines.append(f"  {fk['to'].upper()} {arrow} {fk['from'].upper()} : {label}")

    def render(self) -> str:
        return '\n'.join(self.lines)


def render_er_diagram(tables: List[Table], relations: Optional[List[Relation]] = None) -> str:
    """
    Convenience function to render an ER diagram

    Args:
        tables: Tables in parse order, duplicates included
        relations: Explicit relationships from the annotation file

    Returns:
        Mermaid erDiagram source
    """
    if not tables:
        return EMPTY_DIAGRAM

    renderer = ERDiagramRenderer()
    renderer.render_entities(tables)
    renderer.render_relationships(relations or [])
    renderer.render_foreign_keys(tables)
    return renderer.render()
