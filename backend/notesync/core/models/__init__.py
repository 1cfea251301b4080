from .base import AppBaseModel, TimestampedModel
from .folder import Folder
from .note import Note
from .profile import Profile
from .tag import Tag

__all__ = [
    "AppBaseModel",
    "TimestampedModel",
    "Folder",
    "Note",
    "Profile",
    "Tag",
]
