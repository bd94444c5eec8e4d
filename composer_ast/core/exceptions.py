"""
Base exception hierarchy for AST composer operations.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""


class ComposerError(Exception):
    """Base exception for AST composer operations."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            code: Optional error code for programmatic handling
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class UnrecognizedNodeTypeError(ComposerError):
    """Raised when the node factory has no class registered for a type tag."""

    def __init__(self, message: str, node_type: str = None, details: dict = None):
        """
        Initialize unrecognized node type error.

        Args:
            message: Error message
            node_type: Type tag that could not be mapped
            details: Optional additional details
        """
        super().__init__(message, code="UNRECOGNIZED_NODE_TYPE", details=details)
        self.node_type = node_type


class FragmentParseError(ComposerError):
    """Raised when a source fragment cannot be parsed."""

    def __init__(
        self,
        message: str,
        fragment: str = None,
        line: int = None,
        column: int = None,
        details: dict = None,
    ):
        """
        Initialize fragment parse error.

        Args:
            message: Error message
            fragment: Source text that failed to parse
            line: 1-based line of the failure (if known)
            column: 1-based column of the failure (if known)
            details: Optional additional details
        """
        super().__init__(message, code="FRAGMENT_PARSE_ERROR", details=details)
        self.fragment = fragment
        self.line = line
        self.column = column


class MalformedTreeError(ComposerError):
    """Raised when a raw node is missing a required structural field."""

    def __init__(
        self,
        message: str,
        node_type: str = None,
        field: str = None,
        details: dict = None,
    ):
        """
        Initialize malformed tree error.

        Args:
            message: Error message
            node_type: Type tag of the offending raw node (if known)
            field: Name of the missing or invalid field
            details: Optional additional details
        """
        super().__init__(message, code="MALFORMED_TREE", details=details)
        self.node_type = node_type
        self.field = field


class InvalidMutationError(ComposerError):
    """Raised when a tree mutation would break structural invariants."""

    def __init__(self, message: str, operation: str = None, details: dict = None):
        """
        Initialize invalid mutation error.

        Args:
            message: Error message
            operation: Optional mutation name (e.g., 'add_child')
            details: Optional additional details
        """
        super().__init__(message, code="INVALID_MUTATION", details=details)
        self.operation = operation


class ConfigurationError(ComposerError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str = None, details: dict = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that is invalid
            details: Optional additional details
        """
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.config_key = config_key
