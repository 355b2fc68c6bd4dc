"""
MySQL Account Service Module
============================

Issues MySQL's account-management statements on behalf of the routes:
- Listing accounts from mysql.user
- SHOW GRANTS for a single account
- CREATE USER / GRANT / DROP USER

Security Features:
- Account names, hosts and passwords are always bound parameters
- Database names are quoted as backtick identifiers
- Privilege keywords are inlined only after sanitizing against the
  supported vocabulary

Every driver failure is re-raised as DatabaseError with the server
message passed through. Nothing is retried.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import DatabaseError, InvalidPrivilegesError
from app.core.logging import get_logger, log_execution_time
from app.services.privileges import sanitize_privileges

# Initialize logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class MySQLAccount:
    """A row of mysql.user."""

    username: str
    host: str


def grant_target(dbname: str) -> str:
    """
    Render the ON clause target for a database name.

    ``*`` addresses every database; any other name is quoted as an
    identifier, e.g. ``shop`` becomes ```shop`.*``.
    """
    if dbname == "*":
        return "*.*"
    quoted = "`" + dbname.replace("`", "``") + "`"
    # text() reads colons as bind parameters and doubles percents itself.
    return quoted.replace(":", "\\:") + ".*"


def driver_message(exc: SQLAlchemyError) -> str:
    """Server/driver message carried by a SQLAlchemy exception."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class MySQLAccountService:
    """
    Account management on the connected MySQL server.

    Usage:
        service = MySQLAccountService(db)
        service.create_user("alice", "s3cret", "localhost")
        service.grant(["SELECT"], "alice", "localhost", dbname="shop")
    """

    def __init__(self, db: Session, system_accounts: Optional[Sequence[str]] = None):
        """
        Args:
            db: SQLAlchemy session bound to the MySQL server
            system_accounts: Account names hidden from listings
        """
        self.db = db
        self.system_accounts = list(
            system_accounts if system_accounts is not None else settings.system_accounts_list
        )

    # --------------------------
    # Queries
    # --------------------------

    @log_execution_time(logger, "list_accounts")
    def list_accounts(self) -> list[MySQLAccount]:
        """Non-system accounts with a host, ordered by user name."""
        statement = text(
            """
            SELECT User, Host
            FROM mysql.user
            WHERE User NOT IN :excluded
              AND Host IS NOT NULL AND Host != ''
            ORDER BY User
            """
        ).bindparams(bindparam("excluded", expanding=True))
        try:
            rows = self.db.execute(statement, {"excluded": self.system_accounts}).all()
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch users", exc) from exc
        return [MySQLAccount(username=row[0], host=row[1]) for row in rows]

    def list_all_accounts(self) -> list[MySQLAccount]:
        """Like list_accounts, but keeps accounts with an empty host."""
        statement = text(
            "SELECT User, Host FROM mysql.user WHERE User NOT IN :excluded ORDER BY User"
        ).bindparams(bindparam("excluded", expanding=True))
        try:
            rows = self.db.execute(statement, {"excluded": self.system_accounts}).all()
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch users", exc) from exc
        return [MySQLAccount(username=row[0], host=row[1]) for row in rows]

    @log_execution_time(logger, "show_grants")
    def show_grants(self, username: str, host: str) -> list[str]:
        """Grant strings reported by the server for one account."""
        try:
            rows = self.db.execute(
                text("SHOW GRANTS FOR :username@:host"),
                {"username": username, "host": host},
            ).all()
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch grants", exc) from exc
        return [row[0] for row in rows]

    def find_host(self, username: str) -> Optional[str]:
        """Host of the first account with this name, or None."""
        try:
            row = self.db.execute(
                text("SELECT Host FROM mysql.user WHERE User = :username"),
                {"username": username},
            ).first()
        except SQLAlchemyError as exc:
            raise self._fail("Failed to look up user", exc) from exc
        return row[0] if row else None

    # --------------------------
    # Statements
    # --------------------------

    def create_user(self, username: str, password: str, host: str) -> None:
        self._run(
            "User creation failed",
            "CREATE USER :username@:host IDENTIFIED BY :password",
            {"username": username, "host": host, "password": password},
        )
        logger.info("mysql_user_created", username=username, host=host)

    def grant(
        self,
        privileges: Sequence[str],
        username: str,
        host: str,
        dbname: str = "*",
    ) -> list[str]:
        """
        Grant privileges on a database (``*`` for all databases).

        Returns:
            The privilege tokens actually granted

        Raises:
            InvalidPrivilegesError: If nothing valid remains after sanitizing
            DatabaseError: If the server rejects the statement
        """
        tokens = sanitize_privileges(privileges)
        if not tokens:
            raise InvalidPrivilegesError()
        self._run(
            "Grant failed",
            f"GRANT {', '.join(tokens)} ON {grant_target(dbname)} TO :username@:host",
            {"username": username, "host": host},
        )
        logger.info("mysql_privileges_granted", username=username, host=host, dbname=dbname, privileges=tokens)
        return tokens

    def drop_user(self, username: str, host: str) -> None:
        self._run(
            "User deletion failed",
            "DROP USER :username@:host",
            {"username": username, "host": host},
        )
        logger.info("mysql_user_dropped", username=username, host=host)

    def _run(self, failure: str, sql: str, params: dict) -> None:
        try:
            self.db.execute(text(sql), params)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._fail(failure, exc) from exc

    @staticmethod
    def _fail(message: str, exc: SQLAlchemyError) -> DatabaseError:
        error = driver_message(exc)
        logger.error("mysql_statement_failed", message=message, error=error)
        return DatabaseError(message, error=error)
