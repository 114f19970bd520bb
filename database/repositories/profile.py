from typing import Any, Optional

from sqlalchemy import select

from database.models import UserProfile
from database.repositories.base import BaseRepository, as_uuid


class ProfileRepository(BaseRepository):
    def get_profile(self, user_id: Any) -> Optional[UserProfile]:
        stmt = select(UserProfile).where(UserProfile.id == as_uuid(user_id))
        return self.db.execute(stmt).scalar_one_or_none()
