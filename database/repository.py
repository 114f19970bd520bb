import logging
from datetime import datetime
from typing import List, Optional, Any, Sequence

from sqlalchemy.orm import Session

from database.models import UserProfile, Internship, Application
from database.repositories import (
    ProfileRepository,
    InternshipPostingRepository,
    ApplicationRepository,
)

logger = logging.getLogger(__name__)


class InternshipRepository:
    """
    Facade over the per-table repositories, bound to one Session.

    This is the persistence surface the scoring and tracking core uses.
    """

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.postings = InternshipPostingRepository(db)
        self.applications = ApplicationRepository(db)

    # --- Profiles ---

    def get_profile(self, user_id: Any) -> Optional[UserProfile]:
        return self.profiles.get_profile(user_id)

    # --- Postings ---

    def get_postings(
        self,
        posting_ids: Optional[Sequence[Any]] = None,
        user_id: Optional[Any] = None
    ) -> List[Internship]:
        return self.postings.get_postings(posting_ids, user_id=user_id)

    def update_posting_score(self, posting_id: Any, score: float) -> bool:
        return self.postings.update_posting_score(posting_id, score)

    def get_top_postings(self, user_id: Any, limit: int = 20) -> List[Internship]:
        return self.postings.get_top_postings(user_id, limit=limit)

    # --- Applications ---

    def get_applications(self, user_id: Any, statuses: Optional[List[str]] = None) -> List[Application]:
        return self.applications.get_applications(user_id, statuses=statuses)

    def update_application_status(
        self,
        application_id: Any,
        status: str,
        note: Optional[str],
        timestamp: datetime,
        applied_on: Optional[datetime] = None
    ) -> Optional[Application]:
        return self.applications.update_application_status(
            application_id, status, note, timestamp, applied_on=applied_on
        )

    def save_cover_letter(self, user_id: Any, internship_id: Any, cover_letter: str) -> Application:
        return self.applications.save_cover_letter(user_id, internship_id, cover_letter)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
