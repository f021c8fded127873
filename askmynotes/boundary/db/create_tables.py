"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, askmynotes.configs
System role: Database schema initialization

Usage:
    python -m askmynotes.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from askmynotes.boundary.db.base import Base
from askmynotes.boundary.db.connection import dispose_async_engine, get_async_engine

# Import all models to register them with Base.metadata
from askmynotes.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE TABLE is only issued for missing tables.

    Args:
        engine: Engine to use; defaults to the configured application engine
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": sorted(Base.metadata.tables)})


async def _main() -> None:
    await create_all_tables()
    await dispose_async_engine()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
