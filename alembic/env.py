"""Alembic environment for the users, sessions and preferences tables."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from users_api.core.config import settings
from users_api.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    """`alembic -x database_url=...` wins over DATABASE_URL from the environment."""
    return context.get_x_argument(as_dictionary=True).get("database_url") or settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Emit SQL for the migrations without a database connection."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single unpooled connection."""
    migration_engine = create_engine(get_url(), poolclass=pool.NullPool)
    with migration_engine.connect() as connection:
        # SQLite cannot ALTER most constraints in place.
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
