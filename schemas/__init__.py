# schemas/__init__.py

from .user import (
    RegisterRequest, LoginRequest, ProfileUpdate,
    UserResponse, AuthResponse,
)

from .file import (
    FileCreate, FileUpdate, FileResponse, FileEnvelope,
    FavoriteToggleResponse, TrashToggleResponse,
)

from .favourite import FavouriteCreate, FavouriteBulkDelete
from .trash import TrashCreate, TrashBulkDelete, TrashBulkRestore
from .share import ShareCreate, ShareUpdate, ShareBulkAction, ShareBulkRemove
from .friendship import FriendRequestCreate
