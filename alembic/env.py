"""Alembic environment: runs migrations against DATABASE_URL with a sync driver."""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from alembic import context

from joblinkhub.config import settings
from joblinkhub.db.base import Base
from joblinkhub.models import profile, record, user  # noqa: F401

# asyncpg -> psycopg2, aiosqlite -> pysqlite
SYNC_DRIVERS = {"postgresql": "postgresql+psycopg2", "sqlite": "sqlite+pysqlite"}

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_sync_url() -> str:
    url = make_url(settings.DATABASE_URL)
    backend = url.get_backend_name()
    if backend in SYNC_DRIVERS:
        url = url.set(drivername=SYNC_DRIVERS[backend])
    if backend == "postgresql" and "ssl" in url.query:
        # psycopg2 spells asyncpg's ssl=... as sslmode=...
        ssl = url.query["ssl"]
        url = url.difference_update_query(["ssl"]).update_query_dict(
            {"sslmode": "disable" if ssl == "false" else "require"}
        )
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = get_sync_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
