#!/usr/bin/env python3
"""
SQL DDL to ER Diagram Converter - Main Program
Converts CREATE TABLE / ALTER TABLE migrations to a Mermaid ER diagram
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .app_config import config
from .src import build_er_model, render_er_diagram

logger = logging.getLogger(__name__)


def collect_inputs(paths: List[str], sql_glob: str = config.SQL_GLOB,
                   relations_glob: str = config.RELATIONS_GLOB) -> Tuple[List[Path], Optional[Path]]:
    """
    Enumerate SQL files and the annotation file

    Folders are searched recursively and sorted so that runs are repeatable;
    the first annotation file found is the one used.
    """
    sql_files: List[Path] = []
    relations_file = None

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            sql_files.extend(sorted(p for p in path.rglob(sql_glob) if p.is_file()))
            if relations_file is None:
                found = sorted(p for p in path.rglob(relations_glob) if p.is_file())
                if found:
                    relations_file = found[0]
        else:
            sql_files.append(path)

    return sql_files, relations_file


def sql_to_er(sql_files: List[Path], relations_file: Optional[Path] = None,
              output: Optional[str] = None) -> str:
    """
    Convert SQL files to an ER diagram

    Args:
        sql_files: SQL files, in the order they should be applied
        relations_file: Optional annotation file
        output: Optional path to export the diagram to

    Returns:
        The diagram text
    """
    # read everything before parsing starts
    sql_texts = [p.read_text(encoding='utf-8') for p in sql_files]
    relations_text = relations_file.read_text(encoding='utf-8') if relations_file else None

    print(f"🔍 Parsing {len(sql_files)} SQL file(s)...", file=sys.stderr)
    tables, relations = build_er_model(sql_texts, relations_text, [str(p) for p in sql_files])

    print(f"✅ Found {len(tables)} table(s)", file=sys.stderr)
    for table in tables:
        print(f"   - {table.name}", file=sys.stderr)
    if relations_file:
        print(f"   - {len(relations)} annotated relationship(s) from {relations_file}", file=sys.stderr)

    diagram = render_er_diagram(tables, relations)

    if output:
        export_diagram(diagram, output)
        print(f"\n✅ ER diagram saved to: {output}", file=sys.stderr)

    return diagram


def export_diagram(diagram: str, output: str, watermark: str = config.WATERMARK):
    """Write the diagram to a file with the watermark line appended"""
    Path(output).write_text(f"{diagram}\n{watermark}\n", encoding='utf-8')


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Convert SQL migrations to a Mermaid ER diagram"
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="SQL files or folders containing them (default: current folder)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Export the diagram to this file"
    )
    parser.add_argument(
        "-r", "--relations",
        help="Relationship annotation file (default: first match in the folders)"
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help="Logging level (default: %(default)s)"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    for raw in args.paths + ([args.relations] if args.relations else []):
        if not Path(raw).exists():
            print(f"❌ Error: File not found: {raw}", file=sys.stderr)
            return 1

    sql_files, relations_file = collect_inputs(args.paths)
    if args.relations:
        relations_file = Path(args.relations)

    try:
        diagram = sql_to_er(sql_files, relations_file, args.output)
    except (OSError, UnicodeDecodeError) as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    print(diagram)
    return 0


if __name__ == "__main__":
    sys.exit(main())
