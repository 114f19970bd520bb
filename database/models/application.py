import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, CheckConstraint, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base
from .user import _utcnow

APPLICATION_STATUSES = ('pending', 'submitted', 'reviewing', 'accepted', 'rejected')


class Application(Base):
    """
    Tracks one user's application to one internship.

    status is written by the reconciliation stage and by user edits.
    applied_on is set the first time status becomes 'submitted' and never cleared.
    """
    __tablename__ = 'applications'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    internship_id = Column(Uuid(as_uuid=True), ForeignKey('internships.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='pending')
    cover_letter = Column(Text)
    notes = Column(Text)
    applied_on = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow)

    owner = relationship("UserProfile", back_populates="applications")
    internship = relationship("Internship", back_populates="applications")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'submitted', 'reviewing', 'accepted', 'rejected')",
            name='ck_applications_status',
        ),
        Index('idx_applications_user_id', 'user_id'),
        Index('idx_applications_status', 'status'),
        Index('idx_applications_internship_id', 'internship_id'),
    )
