"""
End-to-end conversion: SQL texts (+ annotation text) to diagram text
"""
import logging
from typing import Iterable, List, Optional, Tuple

from .er_model import Relation, Table
from .relations import parse_relations
from .schema_builder import SchemaBuilder
from .visualization import render_er_diagram

logger = logging.getLogger(__name__)


def build_er_model(sql_texts: Iterable[str], relations_text: Optional[str] = None,
                   sources: Optional[List[str]] = None) -> Tuple[List[Table], List[Relation]]:
    """Parse every SQL text in order plus the optional annotation text"""
    builder = SchemaBuilder()
    for index, sql in enumerate(sql_texts):
        source = sources[index] if sources and index < len(sources) else f'<sql #{index + 1}>'
        count = builder.add_sql(sql, source=source)
        logger.info("%s: %d table(s)", source, count)

    relations = parse_relations(relations_text)
    return builder.tables, relations


def generate_er_diagram(sql_texts: Iterable[str], relations_text: Optional[str] = None,
                        sources: Optional[List[str]] = None) -> str:
    """Convert SQL texts to Mermaid ER diagram text"""
    tables, relations = build_er_model(sql_texts, relations_text, sources)
    return render_er_diagram(tables, relations)
