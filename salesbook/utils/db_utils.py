"""
Database Utilities
Helper functions for database operations
"""

import logging
from contextlib import contextmanager

from salesbook.models import db

logger = logging.getLogger(__name__)


def init_database():
    """Create all tables that do not exist yet"""
    db.create_all()
    logger.info("Database tables created successfully")


@contextmanager
def atomic():
    """
    Run a block of writes as one transaction

    Commits when the block finishes, rolls back and re-raises if anything
    inside it fails, so no partial writes are left behind.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
