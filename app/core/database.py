import logging

from app.core.config import settings
from app.core.base import Base
from app.core.db import engine

# Every model has to be imported before create_all
import app.models  # noqa: F401

logger = logging.getLogger(__name__)


async def init_database():
    """Create missing tables (drops everything first when RESET_DATABASE is set)."""
    async with engine.begin() as conn:
        if settings.RESET_DATABASE:
            logger.warning("RESET_DATABASE=true, dropping all tables")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")
