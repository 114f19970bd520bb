import logging
from datetime import datetime, timezone
from typing import List, Optional, Any

from sqlalchemy import select

from database.models import Application, APPLICATION_STATUSES
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    def get_application(self, application_id: Any) -> Optional[Application]:
        stmt = select(Application).where(Application.id == as_uuid(application_id))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_applications(
        self,
        user_id: Any,
        statuses: Optional[List[str]] = None
    ) -> List[Application]:
        stmt = select(Application).where(Application.user_id == as_uuid(user_id))

        if statuses:
            stmt = stmt.where(Application.status.in_(statuses))

        stmt = stmt.order_by(Application.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def get_application_for_posting(self, user_id: Any, internship_id: Any) -> Optional[Application]:
        stmt = select(Application).where(
            Application.user_id == as_uuid(user_id),
            Application.internship_id == as_uuid(internship_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def update_application_status(
        self,
        application_id: Any,
        status: str,
        note: Optional[str],
        timestamp: datetime,
        applied_on: Optional[datetime] = None
    ) -> Optional[Application]:
        """Write status, notes and updated_at (and applied_on when given) in one flush."""
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Refusing to write unknown application status: {status!r}")

        application = self.get_application(application_id)
        if application is None:
            logger.warning(f"Cannot update status, application {application_id} not found")
            return None

        application.status = status
        application.updated_at = timestamp
        if note is not None:
            application.notes = note
        if applied_on is not None and application.applied_on is None:
            application.applied_on = applied_on

        self.db.flush()
        return application

    def save_cover_letter(self, user_id: Any, internship_id: Any, cover_letter: str) -> Application:
        """Attach a cover letter, creating a pending application when none exists."""
        now = datetime.now(timezone.utc)
        application = self.get_application_for_posting(user_id, internship_id)

        if application:
            # updated_at tracks status changes only
            application.cover_letter = cover_letter
        else:
            application = Application(
                user_id=as_uuid(user_id),
                internship_id=as_uuid(internship_id),
                status='pending',
                cover_letter=cover_letter,
                created_at=now,
                updated_at=now,
            )
            self.db.add(application)

        self.db.flush()
        return application
