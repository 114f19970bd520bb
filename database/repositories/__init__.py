from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.internship import InternshipPostingRepository
from database.repositories.application import ApplicationRepository

__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'InternshipPostingRepository',
    'ApplicationRepository',
]
