"""Create every table on the configured database.

Intended for local development; deployed databases are managed with
``alembic upgrade head``.
"""

import asyncio

import structlog
from sqlalchemy import text

from hernest.database import engine
from hernest.middleware.logging import configure_logging
from hernest.models import metadata

logger = structlog.get_logger(__name__)


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    logger.info("database_initialized", tables=sorted(metadata.tables))


if __name__ == "__main__":
    configure_logging()
    asyncio.run(init_db())
