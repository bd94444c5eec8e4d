"""
CLI interface for AST tree operations.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import click
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from ..core.ast_tree import (
    ConditionalStatement,
    emit_source,
    load_file_to_tree,
    parse_path,
    render_raw,
    resolve_path,
    save_tree_to_file,
)
from ..core.config import ComposerConfig, load_config
from ..core.exceptions import ComposerError
from ..fragments import parse_source
from ..logging import setup_logging

logger = logging.getLogger(__name__)


def _exit_with_error(action: str, error: Exception) -> None:
    """Print error to stderr and exit with status 1."""
    click.echo(f"❌ Error {action}: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to JSON configuration file",
)
@click.option("--log-level", type=str, help="Override configured log level")
@click.pass_context
def tree(
    ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]
) -> None:
    """AST tree operations - parse, render and edit source files."""
    try:
        config = load_config(config_path) if config_path else ComposerConfig()
        if log_level:
            config = ComposerConfig(**{**config.model_dump(), "log_level": log_level})
    except (ComposerError, ValueError) as e:
        _exit_with_error("loading configuration", e)
    setup_logging(config.log_level, config.log_file)
    ctx.obj = config


@tree.command()
@click.argument(
    "source_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--out", type=click.Path(dir_okay=False, path_type=Path), help="Write JSON here"
)
@click.option("--indent", type=int, default=2, help="JSON indentation (default: 2)")
def parse(source_file: Path, out: Optional[Path], indent: int) -> None:
    """Parse a source file and print its raw JSON tree."""
    try:
        raw = parse_source(source_file.read_text(encoding="utf-8"))
    except ComposerError as e:
        _exit_with_error("parsing source", e)
    text = json.dumps(raw, indent=indent, ensure_ascii=False)
    if out:
        out.write_text(text + "\n", encoding="utf-8")
        click.echo(f"✅ Raw tree written: {out}")
    else:
        click.echo(text)


@tree.command()
@click.argument(
    "json_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.pass_obj
def render(config: ComposerConfig, json_file: Path) -> None:
    """Render a raw JSON tree back to source text."""
    try:
        raw = json.loads(json_file.read_text(encoding="utf-8"))
        source = render_raw(raw, config=config)
    except json.JSONDecodeError as e:
        _exit_with_error("reading JSON", e)
    except ComposerError as e:
        _exit_with_error("rendering tree", e)
    click.echo(source, nl=False)


@tree.command()
@click.argument(
    "source_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.pass_obj
def check(config: ComposerConfig, source_file: Path) -> None:
    """Verify that a file survives parse, build and emit unchanged."""
    original = source_file.read_text(encoding="utf-8")
    try:
        ast_tree = load_file_to_tree(str(source_file), config=config)
        emitted = emit_source(ast_tree)
    except ComposerError as e:
        _exit_with_error("building tree", e)
    if emitted != original:
        click.echo(f"❌ Round-trip mismatch: {source_file}", err=True)
        sys.exit(1)
    click.echo(f"✅ Round-trip OK: {source_file} ({len(ast_tree.nodes)} nodes)")


@tree.command("set-condition")
@click.argument(
    "source_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--path", "node_path", required=True, help='Node path, e.g. "0/0"')
@click.option("--expr", "expression", required=True, help="New condition expression")
@click.option("--in-place", is_flag=True, help="Rewrite the file instead of printing")
@click.pass_obj
def set_condition(
    config: ComposerConfig,
    source_file: Path,
    node_path: str,
    expression: str,
    in_place: bool,
) -> None:
    """Replace the condition of an if, else-if or while statement."""
    try:
        ast_tree = load_file_to_tree(str(source_file), config=config)
        node = resolve_path(ast_tree, parse_path(node_path))
    except (ComposerError, LookupError, ValueError) as e:
        _exit_with_error("locating node", e)
    if not isinstance(node, ConditionalStatement):
        click.echo(
            f"❌ Node at {node_path!r} is {node.type}, not a conditional statement",
            err=True,
        )
        sys.exit(1)
    try:
        node.set_condition_from_string(expression)
        if in_place:
            save_tree_to_file(ast_tree)
        else:
            source = emit_source(ast_tree)
    except ComposerError as e:
        _exit_with_error("setting condition", e)
    if in_place:
        click.echo(f"✅ Condition updated: {source_file}")
    else:
        click.echo(source, nl=False)


if __name__ == "__main__":
    tree()
