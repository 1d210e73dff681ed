from .base import Base
from .user import User
from .file import File
from .favourite import Favourite
from .trash import Trash
from .share import FileShare, SharePermission
from .friendship import Friendship, FriendshipStatus
from .activity import Activity, ActivityType

__all__ = [
    "Base", "User", "File", "Favourite", "Trash",
    "FileShare", "SharePermission",
    "Friendship", "FriendshipStatus",
    "Activity", "ActivityType",
]
