from .base import Base
from .user import UserProfile
from .internship import Internship
from .application import Application, APPLICATION_STATUSES

__all__ = [
    'Base',
    'UserProfile',
    'Internship',
    'Application',
    'APPLICATION_STATUSES',
]
