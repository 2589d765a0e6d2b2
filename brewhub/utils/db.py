from contextlib import contextmanager
import logging
from models import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(message="DB transaction failed"):
    """Commit everything written inside the block, or nothing.

    On any error the session is rolled back and the exception re-raised so
    the caller can choose the response.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        logger.error("%s: %s", message, e, exc_info=True)
        db.session.rollback()
        raise
