from pydantic import BaseModel

from .user import UserPublic


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPublic
