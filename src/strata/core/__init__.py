"""Core modules for strata - centralized definitions and utilities."""

from strata.core.errors import (
    ConfigurationError,
    ExitCode,
    InfrastructureError,
    ProviderError,
    StackCommandError,
    StackOperationError,
    StrataError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "StrataError",
    "ConfigurationError",
    "ProviderError",
    "ValidationError",
    "InfrastructureError",
    "StackCommandError",
    "StackOperationError",
    "main_with_error_handling",
    "format_error_message",
]
