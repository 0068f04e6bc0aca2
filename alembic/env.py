"""Alembic environment for the UserHub schema.

The database URL always comes from ``DATABASE_URL`` via app settings, never from
alembic.ini. Batch mode is on so ALTERs work on SQLite.
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

from alembic import context

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

load_dotenv()

from app.config import get_settings
from app.database import Base, connect_args_for
from app.models.user import User  # noqa: F401  (registers the table on Base.metadata)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

database_url = get_settings().DATABASE_URL
migration_options = {"target_metadata": Base.metadata, "render_as_batch": True}

if context.is_offline_mode():
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_options,
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(database_url, poolclass=pool.NullPool, connect_args=connect_args_for(database_url))
    with engine.connect() as connection:
        context.configure(connection=connection, **migration_options)
        with context.begin_transaction():
            context.run_migrations()
