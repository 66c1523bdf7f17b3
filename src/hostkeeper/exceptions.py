"""
Hostkeeper custom exceptions and error handling utilities.

This module provides the exception hierarchy used across the project:
entry lookups that miss (``HostsEntryNotFoundError``), failed or cancelled
privileged writes, and configuration/validation problems.
"""

from __future__ import annotations

import logging
import subprocess
import traceback
from typing import Optional, Any, Dict


class HostkeeperError(Exception):
    """Base exception for all hostkeeper-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class HostkeeperConfigError(HostkeeperError):
    """Raised when there's an issue with hostkeeper configuration."""

    pass


class HostkeeperValidationError(HostkeeperError):
    """Raised when input validation fails."""

    pass


class HostkeeperTimeoutError(HostkeeperError):
    """Raised when shell commands time out."""

    pass


class HostsEntryNotFoundError(HostkeeperError):
    """Raised when a line number is out of range or no line matches an entry."""

    pass


class HostsReadError(HostkeeperError):
    """Raised when the hosts file or a backup cannot be read."""

    pass


class HostsWriteError(HostkeeperError):
    """Raised when persisting the hosts file fails."""

    pass


class HostsPermissionError(HostsWriteError):
    """Raised when the write is refused for lack of privileges."""

    pass


class HostsWriteCancelled(HostsWriteError):
    """Raised when the user dismisses the elevation prompt."""

    pass


class ErrorHandler:
    """Centralized error handling utilities."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def log_and_raise(
        self,
        exception_class: type[HostkeeperError],
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log an error and raise a hostkeeper exception."""
        error_details = details or {}

        if original_error:
            error_details["original_error"] = str(original_error)
            error_details["original_type"] = type(original_error).__name__

        self.logger.error(f"❌ {message}")
        if original_error:
            self.logger.debug(f"Original error: {original_error}")
            self.logger.debug(f"Traceback: {traceback.format_exc()}")

        raise exception_class(message, error_details) from original_error

    def handle_subprocess_error(
        self, cmd: list[str], error: Exception, operation: str = "command execution"
    ) -> None:
        """Translate subprocess failures into hostkeeper exceptions."""
        command = " ".join(cmd)
        if isinstance(error, subprocess.CalledProcessError):
            stderr = error.stderr if error.stderr else "No error output"
            details = {
                "command": command,
                "returncode": error.returncode,
                "stderr": stderr,
            }
            if "User canceled" in str(stderr) or "(-128)" in str(stderr):
                self.log_and_raise(
                    HostsWriteCancelled, "Operation cancelled by user", error, details
                )
            if "Permission denied" in str(stderr) or "Operation not permitted" in str(stderr):
                self.log_and_raise(
                    HostsPermissionError,
                    f"Permission denied during {operation}: {command}",
                    error,
                    details,
                )
            self.log_and_raise(
                HostsWriteError,
                f"Failed {operation}: {command}",
                error,
                details,
            )
        elif isinstance(error, subprocess.TimeoutExpired):
            details = {"command": command, "timeout": error.timeout}
            self.log_and_raise(
                HostkeeperTimeoutError,
                f"Command timed out after {error.timeout}s: {command}",
                error,
                details,
            )
        elif isinstance(error, PermissionError):
            self.log_and_raise(
                HostsPermissionError,
                f"Permission denied during {operation}: {command}",
                error,
                {"command": command},
            )
        else:
            self.log_and_raise(
                HostsWriteError,
                f"Unexpected error during {operation}",
                error,
                {"command": command},
            )


def validate_required_args(**kwargs) -> None:
    """Validate that required arguments are provided and not None/empty."""
    missing = []
    for name, value in kwargs.items():
        if value is None or (isinstance(value, (str, list, dict)) and not value):
            missing.append(name)

    if missing:
        raise HostkeeperValidationError(
            f"Missing required arguments: {', '.join(missing)}",
            {"missing_args": missing},
        )


def format_error_message(error: Exception, include_traceback: bool = False) -> str:
    """Format error messages consistently."""
    if isinstance(error, HostkeeperError):
        message = error.message
        if error.details:
            details = ", ".join(f"{k}={v}" for k, v in error.details.items())
            message += f" ({details})"
    else:
        message = f"{type(error).__name__}: {str(error)}"

    if include_traceback:
        message += f"\n{traceback.format_exc()}"

    return message
