from .auth import router as auth_router
from .posts import router as posts_router
from .categories import router as categories_router
from .likes import router as likes_router

__all__ = [
    "auth_router",
    "posts_router",
    "categories_router",
    "likes_router",
]
