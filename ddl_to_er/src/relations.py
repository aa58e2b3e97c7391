"""
Relationship annotation parser

Lines look like::

    Ref fk_posts_user: posts.user_id > users.id // many-to-one

Anything that does not match is ignored.
"""
import re
from typing import List, Optional

from .er_model import Relation

REF_LINE_RE = re.compile(r'^Ref\s+(\w+):\s+(\w+)\.(\w+)\s*>\s*(\w+)\.(\w+)\s*//\s*(.+)$')


def parse_relations(text: Optional[str]) -> List[Relation]:
    """Parse an annotation file into Relation records, in file order"""
    if not text:
        return []

    relations = []
    for line in text.splitlines():
        match = REF_LINE_RE.match(line)
        if not match:
            continue
        name, source_table, source_column, target_table, target_column, cardinality = match.groups()
        relations.append(Relation(
            name=name,
            source_table=source_table,
            source_column=source_column,
            target_table=target_table,
            target_column=target_column,
            cardinality=cardinality.strip(),
        ))
    return relations
