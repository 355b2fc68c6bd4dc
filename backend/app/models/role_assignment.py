"""
Role Assignment Model
=====================

Persistent form of a user-role override, used when the assignment store
runs with the database backend.

Database Indexes:
- Primary key: username
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.role_enum import ROLE_NAME_MAX_LENGTH


class RoleAssignment(Base):
    """
    Explicit role chosen by an administrator for a MySQL account.

    Keyed by the bare username, the same way the in-memory store is keyed,
    so accounts sharing a name across hosts share one override.

    Attributes:
        username: MySQL account name
        role: Assigned role name
        assigned_at: Time of the latest assignment
    """

    __tablename__ = "role_assignments"

    username: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )

    role: Mapped[str] = mapped_column(
        String(ROLE_NAME_MAX_LENGTH),
        nullable=False,
    )

    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RoleAssignment(username={self.username}, role={self.role})>"
