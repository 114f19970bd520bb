"""
Text builders - render profiles and postings as the text sent to the
embedding and completion services.
"""
import re
from typing import Optional

from core.matcher.dto import ProfileDTO, PostingDTO

_GITHUB_USER_RE = re.compile(r"github\.com/([^/?#]+)")


def github_username(github_url: Optional[str]) -> Optional[str]:
    """Return the GitHub username from a profile URL, or None."""
    if not github_url:
        return None
    match = _GITHUB_USER_RE.search(github_url)
    return match.group(1) if match else None


def _github_line(github_url: Optional[str]) -> str:
    if not github_url:
        return "No GitHub profile provided"
    username = github_username(github_url)
    if not username:
        return "Invalid GitHub URL"
    return f"GitHub user {username} ({github_url})"


def build_profile_text(profile: ProfileDTO) -> str:
    """Combine everything known about the applicant into one text block."""
    lines = [
        f"Name: {profile.name}",
        f"Resume: {profile.resume_text or 'No resume provided'}",
        f"GitHub Profile: {_github_line(profile.github_url)}",
        f"LinkedIn: {profile.linkedin_url or 'Not provided'}",
        f"Skills: {', '.join(profile.skills) if profile.skills else 'Not specified'}",
        f"Experience: {profile.experience or 'Not specified'}",
        f"Education: {profile.education or 'Not specified'}",
    ]
    return "\n".join(lines)


def build_posting_text(posting: PostingDTO) -> str:
    """Render the posting fields that matter for matching."""
    lines = [
        f"Title: {posting.title}",
        f"Company: {posting.company}",
        f"Location: {posting.location or 'Not specified'}",
        f"Description: {posting.description or 'No description available'}",
        f"Requirements: {posting.requirements or 'No specific requirements listed'}",
        f"Salary Range: {posting.salary_range or 'Not specified'}",
    ]
    return "\n".join(lines)
