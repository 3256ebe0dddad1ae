from logging.config import fileConfig

from alembic import context

from backend.app.config import get_settings
from backend.app.db.engine import create_engine_from_settings
from backend.app.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Trip, place, itinerary and itinerary_item tables
target_metadata = Base.metadata

settings = get_settings()


def run_migrations_offline() -> None:
    """Emit migration SQL for the configured URL without connecting."""
    engine = create_engine_from_settings(settings)
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against the app's database (async URLs use their sync driver)."""
    connectable = create_engine_from_settings(settings)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
