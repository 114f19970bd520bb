import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Float, Date, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base
from .user import _utcnow


class Internship(Base):
    """
    A scraped internship posting owned by one user.

    match_score is recomputed on every scoring run and overwritten.
    """
    __tablename__ = 'internships'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=True)

    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text)
    link = Column(Text, nullable=False, default='')
    description = Column(Text)
    requirements = Column(Text)
    salary_range = Column(Text)
    posted_date = Column(Date)
    deadline = Column(Date)
    source_site = Column(Text)

    match_score = Column(Float)  # 0.0 - 1.0
    scored_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    owner = relationship("UserProfile", back_populates="internships")
    applications = relationship("Application", back_populates="internship", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_internships_user_id', 'user_id'),
        Index('idx_internships_match_score', 'match_score'),
        Index('idx_internships_created_at', 'created_at'),
    )
