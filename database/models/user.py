import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Text, TIMESTAMP, JSON, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserProfile(Base):
    """
    Applicant profile: the text sources that feed the profile embedding.

    Read-only from the scoring and tracking core.
    """
    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)

    github_url = Column(Text)
    linkedin_url = Column(Text)
    resume_url = Column(Text)
    resume_text = Column(Text)  # Extracted upstream by the upload path

    skills = Column(JSON, default=list)
    experience = Column(Text)
    education = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    internships = relationship("Internship", back_populates="owner", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="owner", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_users_email', 'email'),
    )
