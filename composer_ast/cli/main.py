"""
Entry point of the `composer-ast` command.

Command groups live in their own modules and are imported when invoked.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

# mypy: ignore-errors

import click
import importlib
from typing import Dict

from composer_ast import __version__

# group name -> "module:attribute" of its click group
_COMMANDS: Dict[str, str] = {
    "tree": "composer_ast.cli.tree_cli:tree",
    "config": "composer_ast.cli.config_cli:config",
}


def _load_click_command(import_path: str) -> click.Command:
    module_path, obj_name = import_path.split(":", 1)
    mod = importlib.import_module(module_path)
    return getattr(mod, obj_name)


class LazyGroup(click.Group):
    """Top-level group resolving `tree` and `config` from `_COMMANDS`."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        target = _COMMANDS.get(cmd_name)
        if not target:
            return None
        return _load_click_command(target)


@click.group(cls=LazyGroup)
@click.version_option(__version__, prog_name="composer-ast")
def cli() -> None:
    """Parse source into an editable AST and emit it back unchanged."""


if __name__ == "__main__":
    cli()
