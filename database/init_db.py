import logging
from typing import Optional

from sqlalchemy import text
from tenacity import retry, stop_after_attempt, wait_fixed, before_sleep_log

from database.database import configure_database

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_fixed(3),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def init_db(url: Optional[str] = None):
    """Bind the session factory, wait for the database and create missing tables."""
    engine = configure_database(url, create_tables=True)
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database initialized")
    return engine
