"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Every exception carries the HTTP status code it maps to; the handlers
registered in ``app.main`` turn them into JSON error responses.

Usage:
    raise ValidationError("Missing required fields: username, password, role")
    raise UserNotFoundError(identifier="alice")
"""

from typing import Any, Dict, Optional
from fastapi import status


class UserManagerException(Exception):
    """
    Base exception class for the application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Validation Exceptions
# ==========================

class ValidationError(UserManagerException):
    """Raised when request fields are missing or invalid."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class InvalidPrivilegesError(ValidationError):
    """Raised when no supported privilege survives sanitizing."""

    def __init__(self, message: str = "Invalid or unsupported privileges"):
        super().__init__(message=message)


class InvalidRoleError(ValidationError):
    """Raised when a request names a role that is not defined."""

    def __init__(self, role: str):
        super().__init__(
            message="Invalid role specified",
            details={"role": role},
        )


# ==========================
# Resource Exceptions
# ==========================

class NotFoundError(UserManagerException):
    """Raised when a resource is not found."""

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        message = f"{resource} not found"
        details = {"resource": resource}
        if identifier:
            details["identifier"] = identifier
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class UserNotFoundError(NotFoundError):
    """Raised when a MySQL account is not found."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="User", identifier=identifier)


class RoleNotFoundError(NotFoundError):
    """Raised when a role is not defined in the registry."""

    def __init__(self, identifier: Optional[str] = None):
        super().__init__(resource="Role", identifier=identifier)


# ==========================
# Database Exceptions
# ==========================

class DatabaseError(UserManagerException):
    """Raised when the MySQL server rejects a statement or is unreachable."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"error": error} if error else {},
        )

