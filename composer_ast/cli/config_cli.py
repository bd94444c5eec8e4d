"""
CLI commands for configuration generation and validation.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import click
import sys
from pathlib import Path
from typing import Optional

from ..core.config import generate_config, save_config, validate_config


@click.group()
def config():
    """Configuration management commands."""
    pass


@config.command()
@click.option(
    "--out",
    default="composer.json",
    help="Output config path (default: composer.json)",
)
@click.option(
    "--strict/--lenient",
    default=True,
    help="Reject children of unexpected category (default: strict)",
)
@click.option("--max-depth", type=int, help="Maximum raw tree depth (default: 256)")
@click.option("--undo-limit", type=int, help="Change log capacity (default: 100)")
@click.option("--log-level", help="Log level (default: WARNING)")
@click.option("--log-file", help="Log file path (default: stderr)")
def generate(
    out: str,
    strict: bool,
    max_depth: Optional[int],
    undo_limit: Optional[int],
    log_level: Optional[str],
    log_file: Optional[str],
) -> None:
    """Generate configuration file for composer-ast."""
    overrides = {
        "strict_structure": strict,
        "max_depth": max_depth,
        "undo_limit": undo_limit,
        "log_level": log_level,
        "log_file": log_file,
    }
    try:
        data = generate_config(
            **{key: value for key, value in overrides.items() if value is not None}
        )
        save_config(data, Path(out))
        click.echo(f"✅ Configuration generated: {out}")
    except (ValueError, OSError) as e:
        click.echo(f"❌ Error generating configuration: {e}", err=True)
        sys.exit(1)


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate configuration file."""
    is_valid, error_message, _ = validate_config(config_file)
    if is_valid:
        click.echo("✅ Validation OK")
    else:
        click.echo("❌ Validation failed:")
        click.echo(f"   - {error_message}")
        sys.exit(1)


if __name__ == "__main__":
    config()
