# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the seed installer.

All exceptions inherit from SeedError for consistent error handling.
The CLI reports the message of the first SeedError raised and exits
with its exit_code.
"""

from typing import Optional


class SeedError(Exception):
    """Base exception for all seed errors."""

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        details: Optional[dict] = None
    ):
        """
        Initialize seed error.

        Args:
            message: Human-readable error message
            exit_code: Process exit status reported by the CLI
            details: Additional error details
        """
        self.message = message
        self.exit_code = exit_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for structured logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            "details": self.details
        }


class InvalidInputError(SeedError):
    """Command input is invalid (no package named, bad option combination)."""

    def __init__(self, message: str, option: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize invalid input error.

        Args:
            message: Validation error message
            option: Command option that failed validation
            details: Additional error details
        """
        super().__init__(message, exit_code=2, details=details)
        self.option = option


class NoInstallTargetError(SeedError):
    """No configured source accepts installs."""

    def __init__(self, message: str = "Cannot find install location", details: Optional[dict] = None):
        super().__init__(message, exit_code=1, details=details)


class NotFoundError(SeedError):
    """Package could not be resolved from the cache or any remote."""

    def __init__(self, package_id: str, details: Optional[dict] = None):
        """
        Initialize not found error.

        Args:
            package_id: Package identifier that could not be resolved
            details: Additional error details
        """
        super().__init__(f"{package_id} not found", exit_code=1, details=details)
        self.package_id = package_id


class FetchFailureError(SeedError):
    """Remote fetch failed or produced no local path."""

    def __init__(self, package_id: str, version: str, details: Optional[dict] = None):
        super().__init__(f"Could not fetch {package_id} ({version})", exit_code=1, details=details)
        self.package_id = package_id
        self.version = version


class InternalInconsistencyError(SeedError):
    """Internal state is inconsistent (resolver defect)."""


class InvalidPackageError(SeedError):
    """Staged package could not be loaded into a usable package."""

    def __init__(self, package_id: str, details: Optional[dict] = None):
        super().__init__(f"{package_id} is invalid", exit_code=1, details=details)
        self.package_id = package_id


class InstallFailureError(SeedError):
    """Destination rejected the package."""

    def __init__(self, message: str, package_id: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, exit_code=1, details=details)
        self.package_id = package_id


class CleanupFailureError(SeedError):
    """Remote could not reclaim a staged artifact."""

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, exit_code=1, details=details)
        self.path = path


class CircularDependencyError(SeedError):
    """Dependency graph contains a cycle."""

    def __init__(self, cycle: list, details: Optional[dict] = None):
        """
        Initialize circular dependency error.

        Args:
            cycle: Package keys forming the cycle, first key repeated at the end
            details: Additional error details
        """
        path = " -> ".join(cycle)
        super().__init__(f"Circular dependency detected: {path}", exit_code=1, details=details)
        self.cycle = cycle


class InvalidVersionError(SeedError):
    """Version string is not a semantic version."""

    def __init__(self, version: str, details: Optional[dict] = None):
        super().__init__(f"Invalid version: {version!r}", exit_code=2, details=details)
        self.version = version


class ConfigurationError(SeedError):
    """Configuration error."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_file: Configuration file path
            details: Additional error details
        """
        super().__init__(message, exit_code=78, details=details)
        self.config_file = config_file


def sanitize_error_for_user(error: Exception, include_type: bool = False) -> str:
    """
    Sanitize error messages for user display.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        Single-line error message without stack trace
    """
    error_msg = str(error).strip().splitlines()[0] if str(error).strip() else repr(error)

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
