"""
Role and Privilege Enumeration Module
=====================================

Defines the privilege vocabulary accepted by the API and the role labels
the inference engine can produce.

Security Purpose:
- Prevents arbitrary privilege injection into GRANT statements
- Keeps role labels consistent between assignment and inference
"""

from enum import Enum


class Privilege(str, Enum):
    """
    MySQL grant keywords accepted at input boundaries.
    """

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CREATE = "CREATE"
    DROP = "DROP"
    INDEX = "INDEX"
    ALTER = "ALTER"
    SHOW_VIEW = "SHOW VIEW"
    LOCK_TABLES = "LOCK TABLES"
    TRIGGER = "TRIGGER"
    EVENT = "EVENT"
    ALL_PRIVILEGES = "ALL PRIVILEGES"


VALID_PRIVILEGES: frozenset[str] = frozenset(p.value for p in Privilege)


class Role(str, Enum):
    """
    Role labels known to the system.

    The first four are assignable built-in roles; READ_ONLY and UNKNOWN
    are only ever produced by inference.
    """

    DATABASE_ADMIN = "database_admin"
    DEVELOPER = "developer"
    ANALYST = "analyst"
    BACKUP = "backup"
    READ_ONLY = "read_only"
    UNKNOWN = "unknown"


BUILTIN_ROLE_PRIVILEGES: dict[Role, tuple[Privilege, ...]] = {
    Role.DATABASE_ADMIN: (Privilege.ALL_PRIVILEGES,),
    Role.DEVELOPER: (Privilege.SELECT, Privilege.INSERT, Privilege.UPDATE, Privilege.CREATE),
    Role.ANALYST: (Privilege.SELECT, Privilege.SHOW_VIEW),
    Role.BACKUP: (
        Privilege.SELECT,
        Privilege.LOCK_TABLES,
        Privilege.SHOW_VIEW,
        Privilege.EVENT,
        Privilege.TRIGGER,
    ),
}

BUILTIN_ROLES: frozenset[str] = frozenset(r.value for r in BUILTIN_ROLE_PRIVILEGES)

# Width of role_assignments.role
ROLE_NAME_MAX_LENGTH = 64
