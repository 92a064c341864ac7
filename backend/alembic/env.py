import asyncio
import pathlib
import ssl
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from proposal_studio.core.config import ModeEnum, settings
from proposal_studio.models import *  # noqa: F401, F403  registers every table on SQLModel.metadata

# Alembic Config object
config = context.config

# Loggers come from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Every table model, for autogenerate
target_metadata = SQLModel.metadata

# Same DSN the app uses (asyncpg, or aiosqlite in tests)
db_url = str(settings.ASYNC_DATABASE_URI)


def run_migrations_offline() -> None:
    """Emit SQL without a database connection."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=db_url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    """Run migrations against a live async connection."""
    connect_args = {}

    # Hosted Postgres needs TLS; local and sqlite databases do not.
    if settings.MODE == ModeEnum.production and not db_url.startswith("sqlite"):
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_context

    connectable = create_async_engine(db_url, echo=True, connect_args=connect_args)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
