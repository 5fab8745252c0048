"""
Translation of driver failures into application errors.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import PyMongoError

from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def mongo_errors(operation: str) -> Iterator[None]:
    """Re-raise PyMongoError as DatabaseError, logging the driver detail."""
    try:
        yield
    except PyMongoError as e:
        logger.exception(f"MongoDB error during {operation}: {e}")
        raise DatabaseError(f"Database operation failed: {operation}", {"operation": operation}) from e
