"""
Custom exceptions for the decomposer package.
"""


class DecomposerError(Exception):
    """Base exception for all decomposer errors."""
    pass


class ValidationError(DecomposerError):
    """Raised when validation fails for a node, type name or input."""
    pass


class NotFoundError(DecomposerError):
    """Raised when a referenced node is not found in the hierarchy."""
    pass


class InvalidOperationError(DecomposerError):
    """Raised when a structural operation cannot be performed in the current state."""
    pass


class ConfigurationError(DecomposerError):
    """Raised when the type configuration or config file is malformed."""
    pass
