import logging
from datetime import datetime, timezone
from typing import List, Optional, Any, Sequence

from sqlalchemy import select

from database.models import Internship
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class InternshipPostingRepository(BaseRepository):
    def get_posting(self, posting_id: Any) -> Optional[Internship]:
        stmt = select(Internship).where(Internship.id == as_uuid(posting_id))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_postings(
        self,
        posting_ids: Optional[Sequence[Any]] = None,
        user_id: Optional[Any] = None
    ) -> List[Internship]:
        """Load postings by id; an empty/None id list means all of the user's postings."""
        stmt = select(Internship)

        if posting_ids:
            stmt = stmt.where(Internship.id.in_([as_uuid(p) for p in posting_ids]))
        if user_id is not None:
            stmt = stmt.where(Internship.user_id == as_uuid(user_id))

        stmt = stmt.order_by(Internship.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def update_posting_score(self, posting_id: Any, score: float) -> bool:
        """Overwrite the posting's match score. Returns False if the posting is gone."""
        posting = self.get_posting(posting_id)
        if posting is None:
            logger.warning(f"Cannot store score, internship {posting_id} not found")
            return False

        posting.match_score = float(score)
        posting.scored_at = datetime.now(timezone.utc)
        self.db.flush()
        return True

    def get_top_postings(self, user_id: Any, limit: int = 20) -> List[Internship]:
        stmt = (
            select(Internship)
            .where(Internship.user_id == as_uuid(user_id))
            .order_by(Internship.match_score.desc().nullslast())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
