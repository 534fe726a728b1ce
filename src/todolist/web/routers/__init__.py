from todolist.web.routers.auth import router as auth_router
from todolist.web.routers.profile import router as profile_router
from todolist.web.routers.todos import router as todos_router

__all__ = [
    "auth_router",
    "profile_router",
    "todos_router",
]
