"""
Unified error handling for strata.

This module provides the error taxonomy, exit codes, and error reporting
used by the orchestrator, the resource providers and the CLI.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Provider error (stack operation or secret store failure)
- 12: Validation error
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class StrataError(Exception):
    """Base exception for strata errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(StrataError):
    """Raised for invalid actions, missing environments and bad settings."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(StrataError):
    """Raised when an external service (control plane, secret store) fails."""

    exit_code = ExitCode.PROVIDER_ERROR


class ValidationError(StrataError):
    """Raised when resource inputs fail validation before apply."""

    exit_code = ExitCode.VALIDATION_ERROR


class InfrastructureError(ProviderError):
    """Failure of a single resource operation against an external store."""

    def __init__(self, resource: str, operation: str, cause: BaseException | None = None):
        reason = str(cause) if cause is not None and str(cause) else "Unknown error"
        super().__init__(
            f"Failed to {operation} {resource}: {reason}",
            details={"resource": resource, "operation": operation},
        )
        self.resource = resource
        self.operation = operation
        self.cause = cause


class StackCommandError(ProviderError):
    """Raised when a stack runtime command exits non-zero or times out."""

    def __init__(
        self,
        command: str,
        stack: str,
        returncode: int | None,
        stderr: str = "",
    ):
        if returncode is None:
            message = f"{command} timed out for stack {stack}"
        else:
            message = f"{command} failed for stack {stack} (exit {returncode})"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message, details={"command": command, "stack": stack})
        self.command = command
        self.stack = stack
        self.returncode = returncode
        self.stderr = stderr


class StackOperationError(ProviderError):
    """The first stack operation failure surfaced by an orchestrator run."""

    def __init__(self, layer: str, stack: str, action: str, cause: BaseException):
        super().__init__(
            f"{action} of stack {layer}/{stack} failed: {cause}",
            details={"layer": layer, "stack": stack, "action": action},
        )
        self.layer = layer
        self.stack = stack
        self.action = action
        self.cause = cause


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - StrataError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except StrataError as e:
                if log_errors:
                    cause = e.__cause__ or getattr(e, "cause", None)
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        cause=repr(cause) if cause is not None else None,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: StrataError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
