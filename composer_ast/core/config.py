"""
Configuration management for the AST composer.

Provides configuration schema, validation, loading and generation.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ComposerConfig(BaseModel):
    """Settings shared by tree building, mutation and the CLI."""

    model_config = {"extra": "forbid"}  # Reject unknown fields

    strict_structure: bool = Field(
        default=True,
        description="Reject children whose category the parent does not accept",
    )
    max_depth: int = Field(
        default=256, description="Deepest raw JSON nesting accepted by build_tree"
    )
    undo_limit: int = Field(
        default=100, description="Change log capacity (0 means unbounded)"
    )
    log_level: str = Field(default="WARNING", description="Logging level name")
    log_file: Optional[str] = Field(
        default=None, description="Optional path to a log file"
    )

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        """Validate max_depth is positive."""
        if v <= 0:
            raise ValueError(f"max_depth must be positive, got: {v}")
        return v

    @field_validator("undo_limit")
    @classmethod
    def validate_undo_limit(cls, v: int) -> int:
        """Validate undo_limit is not negative."""
        if v < 0:
            raise ValueError(f"undo_limit must be >= 0, got: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level name."""
        v_upper = v.strip().upper()
        if v_upper not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got: {v}"
            )
        return v_upper


def generate_config(**overrides: Any) -> Dict[str, Any]:
    """
    Generate configuration dictionary with defaults.

    Args:
        **overrides: Values replacing defaults

    Returns:
        Configuration dictionary (validated)
    """
    return ComposerConfig(**overrides).model_dump()


def validate_config(
    config_path: Path,
) -> Tuple[bool, Optional[str], Optional[ComposerConfig]]:
    """
    Validate configuration file.

    Args:
        config_path: Path to configuration file

    Returns:
        Tuple of (is_valid, error_message, config)
    """
    if not config_path.exists():
        return False, f"Configuration file not found: {config_path}", None
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return False, "Configuration must be a JSON object", None
        return True, None, ComposerConfig(**data)
    except json.JSONDecodeError as e:
        return False, f"Invalid JSON: {str(e)}", None
    except ValueError as e:
        return False, f"Validation error: {str(e)}", None


def load_config(config_path: Path) -> ComposerConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Path to configuration file

    Returns:
        ComposerConfig object

    Raises:
        ConfigurationError: If configuration is invalid
    """
    is_valid, error, config = validate_config(config_path)
    if not is_valid or config is None:
        raise ConfigurationError(
            error or "Invalid configuration", details={"path": str(config_path)}
        )
    return config


def save_config(config: Dict[str, Any], config_path: Path) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration dictionary
        config_path: Path to save configuration
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)
