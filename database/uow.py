import contextlib
import logging

from database.database import SessionLocal
from database.repository import InternshipRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def internship_uow():
    """Per-unit-of-work transaction scope.

    Yields an InternshipRepository bound to a fresh Session. Commits on
    success, rolls back on exception, always closes.

    Usage:
        with internship_uow() as repo:
            profile = repo.get_profile(user_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = SessionLocal()
    try:
        repo = InternshipRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
