# alembic/env.py
from __future__ import annotations

import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

# --- Make sure we can import the app, and load .env ---
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))   # .../alembic
PROJECT_PARENT = os.path.dirname(PROJECT_ROOT)              # project root
if PROJECT_PARENT not in sys.path:
    sys.path.insert(0, PROJECT_PARENT)

from dotenv import load_dotenv  # noqa: E402

# IMPORTANT: do NOT override shell env vars
load_dotenv(override=False)

from app.core.settings import settings, with_driver  # noqa: E402
from app.db.models import Base          # noqa: E402

target_metadata = Base.metadata
config = context.config


def _choose_sync_url() -> str:
    """
    Priority:
    1) ALEMBIC_SYNC_URL
    2) DATABASE_URL (via settings)
    """
    v = os.getenv("ALEMBIC_SYNC_URL")
    if v:
        return with_driver(v, sync=True)
    return with_driver(settings.database_url, sync=True)


config.set_main_option("sqlalchemy.url", _choose_sync_url())


# ----------------------------
# Logging
# ----------------------------

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


# ----------------------------
# Migration runners
# ----------------------------

def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url"),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
