"""
Alembic Environment Configuration
=================================

Connects Alembic with the application database settings and the
SQLAlchemy models metadata. Only needed when role assignments are
stored in the database (ROLE_ASSIGNMENT_BACKEND=database).
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from app.core.config import settings
from app.db.base import Base

# Import models so Alembic can detect them
from app.models.role_assignment import RoleAssignment  # noqa: F401


config = context.config

# Override database URL dynamically from config.py
config.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

if settings.targets_system_schema:
    raise RuntimeError(
        "Refusing to create role_assignments in a MySQL system schema; "
        "point DB_NAME or DATABASE_URL at an application schema"
    )

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    """
    Run migrations in offline mode.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """
    Run migrations in online mode.
    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
