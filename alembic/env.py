"""Alembic environment for the storefront schema.

The database URL comes from ``storefront.core.config.settings`` so migrations
and the running service always target the same ``POSTGRES_DSN``. A single
service owns the database, so the default ``alembic_version`` table is used.
"""
from sqlalchemy import engine_from_config, pool
from alembic import context
from storefront.core.config import settings
from storefront.db.session import Base
import storefront.db.models  # noqa: registers tables on Base.metadata

config = context.config
target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=settings.POSTGRES_DSN,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": settings.POSTGRES_DSN},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        # SQLite cannot ALTER most constraints in place
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
