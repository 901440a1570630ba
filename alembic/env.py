"""
Alembic environment configuration
Handles database migrations with SQLAlchemy
Reference: https://alembic.sqlalchemy.org/en/latest/tutorial.html
"""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

# Importing the models package registers every table on Base.metadata
from storefront.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Migrations run on the sync driver: derive a psycopg2 URL from DATABASE_URL
# unless alembic.ini sets one explicitly
if not config.get_main_option("sqlalchemy.url"):
    from storefront.core.config import settings
    db_url = settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql+psycopg2://")
    # Escape % for ConfigParser interpolation
    config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (emit SQL without a connection)."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
