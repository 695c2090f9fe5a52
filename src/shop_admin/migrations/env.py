from __future__ import annotations

from alembic import context
from sqlalchemy import create_engine, pool

config = context.config


def get_metadata():
    from shop_admin import models  # noqa: F401 (register tables)
    from shop_admin.core.database import Base

    return Base.metadata


def _database_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url:
        return url
    from shop_admin.core.config import get_settings

    return get_settings().database_url


def run_migrations_offline():
    """Run migrations in 'offline' mode."""
    context.configure(url=_database_url(), target_metadata=get_metadata(), literal_binds=True)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode."""
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=get_metadata())

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
