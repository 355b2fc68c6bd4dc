"""
Model Package Initialization
============================

Ensures models are properly registered when imported by the application.

Usage:
    from app.models import RoleAssignment, Role, Privilege
"""

from .role_assignment import RoleAssignment
from .role_enum import Role, Privilege

__all__ = [
    "RoleAssignment",
    "Role",
    "Privilege",
]
