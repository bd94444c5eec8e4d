"""
CLI commands for composer-ast.

This module contains all CLI commands that can be used from command line.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from .config_cli import config as config_cli
from .tree_cli import tree as tree_cli

__all__ = ["config_cli", "tree_cli"]
