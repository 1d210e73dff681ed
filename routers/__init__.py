from .auth import router as auth_router
from .file import router as file_router
from .favourite import router as favourite_router
from .trash import router as trash_router
from .share import router as share_router
from .friendship import router as friendship_router
from .activity import router as activity_router
from .profile import router as profile_router
from .admin import router as admin_router

routers = [
    auth_router,
    file_router,
    favourite_router,
    trash_router,
    share_router,
    friendship_router,
    activity_router,
    profile_router,
    admin_router,
]
