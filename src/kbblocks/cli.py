#!/usr/bin/env python3
"""Command line tools for block-tree documents.

Usage:
    python -m kbblocks [command] [args...]

Commands:
    validate FILE           Check a JSON document for structural problems
    tree FILE               Print the block outline of a JSON document
    render FILE             Export a JSON document as Markdown
    import-md FILE          Convert a Markdown file to a JSON document
    apply FILE OPS_FILE     Apply a JSON list of operations and print the result
    ops                     List the supported operation names
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from .errors import KBBlocksError, SerializationError, get_error_code
from .logging_setup import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(__doc__)
        return 0

    command = args[0]

    try:
        configure_logging()
        if command == "validate":
            if len(args) < 2:
                print("Usage: validate FILE")
                return 1
            return cmd_validate(Path(args[1]))
        elif command == "tree":
            if len(args) < 2:
                print("Usage: tree FILE")
                return 1
            return cmd_tree(Path(args[1]))
        elif command == "render":
            if len(args) < 2:
                print("Usage: render FILE")
                return 1
            return cmd_render(Path(args[1]))
        elif command == "import-md":
            if len(args) < 2:
                print("Usage: import-md FILE")
                return 1
            return cmd_import_md(Path(args[1]))
        elif command == "apply":
            if len(args) < 3:
                print("Usage: apply FILE OPS_FILE")
                return 1
            return cmd_apply(Path(args[1]), Path(args[2]))
        elif command == "ops":
            return cmd_ops()
        elif command in ("-h", "--help", "help"):
            print(__doc__)
            return 0
        else:
            print(f"Unknown command: {command}")
            print(__doc__)
            return 1

    except KBBlocksError as e:
        logger.debug("command %s failed", command, exc_info=True)
        print(f"Error: {e} (code {get_error_code(e)})")
        return 1
    except OSError as e:
        logger.debug("command %s failed", command, exc_info=True)
        print(f"Error: {e}")
        return 1


def _load(path: Path):
    from .models import loads_document

    return loads_document(path.read_text(encoding="utf-8"))


def cmd_validate(path: Path) -> int:
    """Report duplicate ids and invalid column layouts."""
    from .document import collect_ids, validate_tree

    tree = _load(path)
    problems = validate_tree(tree)
    if problems:
        for problem in problems:
            print(f"- {problem}")
        print(f"\n{len(problems)} problem(s) in {path}")
        return 1

    print(f"OK: {len(collect_ids(tree))} blocks, {len(tree)} top-level")
    return 0


def cmd_tree(path: Path) -> int:
    """Print the outline of a document."""
    from .models import Block, CollapsibleContent, ColumnsContent, ExpandableListContent

    def print_block(block: Block, indent: int = 0) -> None:
        prefix = "  " * indent
        content = block.content
        if isinstance(content, ColumnsContent):
            print(f"{prefix}{block.type.value} [{block.id}] widths={content.widths}")
            for col in content.columns:
                print(f"{prefix}  column {col.id} ({col.width}%)")
                for child in col.blocks:
                    print_block(child, indent + 2)
        elif isinstance(content, CollapsibleContent):
            print(f"{prefix}{block.type.value} [{block.id}] {content.title!r}")
            for child in content.blocks:
                print_block(child, indent + 1)
        elif isinstance(content, ExpandableListContent):
            print(f"{prefix}{block.type.value} [{block.id}] sort={content.sort_mode.value}")
            for entry in content.entries:
                print(f"{prefix}  entry {entry.id} {entry.title!r}")
                for child in entry.blocks:
                    print_block(child, indent + 2)
        else:
            text = content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
            print(f"{prefix}{block.type.value} [{block.id}] {text[:60] or '(empty)'}")

    tree = _load(path)
    for block in tree:
        print_block(block)
    print(f"\nTotal: {len(tree)} root blocks")
    return 0


def cmd_render(path: Path) -> int:
    """Export a document as Markdown."""
    from .markdown_renderer import render_markdown

    print(render_markdown(_load(path)))
    return 0


def cmd_import_md(path: Path) -> int:
    """Convert Markdown into a JSON document."""
    from .markdown_parser import parse_markdown
    from .models import dumps_document

    print(dumps_document(parse_markdown(path.read_text(encoding="utf-8"))))
    return 0


def cmd_apply(path: Path, ops_path: Path) -> int:
    """Apply a batch of operations to a document."""
    from .document import collect_node_ids
    from .ids import SequentialIdGenerator
    from .models import dumps_document
    from .operations import apply_operations

    tree = _load(path)
    ops: Any
    try:
        ops = json.loads(ops_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}", source=str(ops_path)) from e
    if isinstance(ops, dict):
        ops = [ops]

    ids = SequentialIdGenerator()
    ids.reserve(collect_node_ids(tree))
    print(dumps_document(apply_operations(tree, ops, ids)))
    return 0


def cmd_ops() -> int:
    """List the operation names understood by apply."""
    from .operations import list_operations

    for name in list_operations():
        print(name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
