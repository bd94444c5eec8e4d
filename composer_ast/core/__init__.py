"""
Core functionality for the AST composer.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from .config import ComposerConfig, load_config
from .exceptions import (
    ComposerError,
    ConfigurationError,
    FragmentParseError,
    InvalidMutationError,
    MalformedTreeError,
    UnrecognizedNodeTypeError,
)

__all__ = [
    "ComposerConfig",
    "load_config",
    "ComposerError",
    "ConfigurationError",
    "FragmentParseError",
    "InvalidMutationError",
    "MalformedTreeError",
    "UnrecognizedNodeTypeError",
]
