"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- In-memory fake of the MySQL account service
- Fresh role registry per test
- SQLite in-memory database for the SQL assignment store
- TestClient with dependency overrides
"""

import os
from typing import Generator, Iterable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ROLE_ASSIGNMENT_BACKEND"] = "memory"

from app.core.dependencies.services import get_account_service, get_role_registry
from app.core.exceptions import DatabaseError, InvalidPrivilegesError
from app.db.base import Base
from app.main import app as main_app
from app.models.role_assignment import RoleAssignment  # noqa: F401
from app.services.mysql_accounts import MySQLAccount, grant_target
from app.services.privileges import sanitize_privileges
from app.services.role_inference import RoleInferenceEngine
from app.services.role_registry import RoleRegistry


# =====================================
# Fake MySQL Account Service
# =====================================

SYSTEM_ACCOUNTS = ("root", "mysql.session", "mysql.sys", "debian-sys-maint")


class FakeAccountService:
    """
    In-memory stand-in for MySQLAccountService.

    Keeps SHOW GRANTS style strings per (username, host) and mimics the
    server errors the routes have to handle.
    """

    def __init__(self):
        self.accounts: dict[tuple[str, str], list[str]] = {}
        self.broken_grants: set[str] = set()
        self.rejected_grants: set[str] = set()
        self.created: list[tuple[str, str, str]] = []
        self.dropped: list[tuple[str, str]] = []

    def add_account(self, username: str, host: str = "localhost", grants: Iterable[str] = ()) -> None:
        self.accounts[(username, host)] = [
            f"GRANT USAGE ON *.* TO `{username}`@`{host}`",
            *grants,
        ]

    def _visible(self, include_empty_host: bool) -> list[MySQLAccount]:
        return sorted(
            (
                MySQLAccount(username=u, host=h)
                for (u, h) in self.accounts
                if u not in SYSTEM_ACCOUNTS and (h or include_empty_host)
            ),
            key=lambda a: a.username,
        )

    def list_accounts(self) -> list[MySQLAccount]:
        return self._visible(include_empty_host=False)

    def list_all_accounts(self) -> list[MySQLAccount]:
        return self._visible(include_empty_host=True)

    def show_grants(self, username: str, host: str) -> list[str]:
        if username in self.broken_grants:
            raise DatabaseError("Failed to fetch grants", error="(1141, 'There is no such grant defined')")
        return list(self.accounts[(username, host)])

    def find_host(self, username: str) -> Optional[str]:
        for (u, h) in self.accounts:
            if u == username:
                return h
        return None

    def create_user(self, username: str, password: str, host: str) -> None:
        if (username, host) in self.accounts:
            raise DatabaseError(
                "User creation failed",
                error=f"(1396, \"Operation CREATE USER failed for '{username}'@'{host}'\")",
            )
        self.created.append((username, password, host))
        self.add_account(username, host)

    def grant(self, privileges, username: str, host: str, dbname: str = "*") -> list[str]:
        tokens = sanitize_privileges(privileges)
        if not tokens:
            raise InvalidPrivilegesError()
        if username in self.rejected_grants or (username, host) not in self.accounts:
            raise DatabaseError("Grant failed", error="(1410, 'You are not allowed to create a user with GRANT')")
        self.accounts[(username, host)].append(
            f"GRANT {', '.join(tokens)} ON {grant_target(dbname)} TO `{username}`@`{host}`"
        )
        return tokens

    def drop_user(self, username: str, host: str) -> None:
        del self.accounts[(username, host)]
        self.dropped.append((username, host))


# =====================================
# Service Fixtures
# =====================================

@pytest.fixture
def registry() -> RoleRegistry:
    """Fresh registry with only the built-in roles."""
    return RoleRegistry()


@pytest.fixture
def inference_engine(registry: RoleRegistry) -> RoleInferenceEngine:
    return RoleInferenceEngine(registry)


@pytest.fixture
def account_service() -> FakeAccountService:
    return FakeAccountService()


@pytest.fixture
def client(registry: RoleRegistry, account_service: FakeAccountService) -> Generator[TestClient, None, None]:
    """
    Create a TestClient with the registry and account service overridden.

    Yields:
        TestClient instance
    """
    main_app.dependency_overrides[get_role_registry] = lambda: registry
    main_app.dependency_overrides[get_account_service] = lambda: account_service

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def session_factory() -> Generator[sessionmaker, None, None]:
    """
    Session factory on a fresh in-memory SQLite database.

    StaticPool keeps the single connection alive so every session sees
    the same tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
