"""
Migration runner for the coin ledger schema.

The target database is DATABASE_URL from the service settings. It can
be overridden for a single run with ``alembic -x url=<url> upgrade head``,
which is how a scratch database gets migrated without touching .env.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from coin_ledger.config import get_settings
from coin_ledger.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    overrides = context.get_x_argument(as_dictionary=True)
    return overrides.get("url") or get_settings().DATABASE_URL


config.set_main_option("sqlalchemy.url", _database_url())


def _configure_options(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Write the migration SQL to stdout instead of executing it."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = config.get_main_option("sqlalchemy.url")
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with engine.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
