"""Data Transfer Objects for the matching pipeline.

DTOs carry profile and posting data outside of the Unit of Work context,
so ORM objects can be converted to plain Python objects that are safe to
use after the database session is closed (or from worker threads).
"""

from dataclasses import dataclass, field
from typing import List, Any, Optional


@dataclass
class ProfileDTO:
    """Applicant data used to build the profile text."""
    id: str
    name: str
    email: str = ""
    resume_text: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    experience: Optional[str] = None
    education: Optional[str] = None


@dataclass
class PostingDTO:
    """Internship posting data used to build the posting text."""
    id: str
    title: str
    company: str
    location: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    salary_range: Optional[str] = None
    link: Optional[str] = None


def profile_from_orm(profile: Any) -> ProfileDTO:
    """Extract a ProfileDTO from a UserProfile while the session is active."""
    return ProfileDTO(
        id=str(profile.id),
        name=profile.name,
        email=profile.email or "",
        resume_text=getattr(profile, 'resume_text', None),
        github_url=profile.github_url,
        linkedin_url=profile.linkedin_url,
        skills=list(profile.skills or []),
        experience=profile.experience,
        education=profile.education,
    )


def posting_from_orm(posting: Any) -> PostingDTO:
    """Extract a PostingDTO from an Internship while the session is active."""
    return PostingDTO(
        id=str(posting.id),
        title=posting.title,
        company=posting.company,
        location=posting.location,
        description=posting.description,
        requirements=posting.requirements,
        salary_range=posting.salary_range,
        link=posting.link,
    )
