import logging
import time

from sqlalchemy.exc import OperationalError

from storefront.models.database import db

logger = logging.getLogger(__name__)


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Run a unit of database work, retrying when the store reports lock
    contention (``database is locked``, deadlocks).

    The session is rolled back before every retry, so ``func`` must be
    safe to run again from the start.
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning("Database busy, retrying in %.2fs (attempt %d/%d)", delay, attempt + 1, attempts)
            time.sleep(delay)
