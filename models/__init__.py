from .user import User, UserPublic, RegisterRequest, LoginRequest
from .category import Category, CategoryPublic, CategoryCreate, CategoryUpdate
from .post import Post, PostPublic, PostCreate, PostUpdate
from .like import Like, LikePublic, LikeStatus
from .auth import Token, AuthResponse
from .response import BasicResponse

__all__ = [
    "User", "UserPublic", "RegisterRequest", "LoginRequest",
    "Category", "CategoryPublic", "CategoryCreate", "CategoryUpdate",
    "Post", "PostPublic", "PostCreate", "PostUpdate",
    "Like", "LikePublic", "LikeStatus",
    "Token", "AuthResponse",
    "BasicResponse",
]
