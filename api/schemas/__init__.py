from .auth import (
    AuthResponse,
    AvatarResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from .paper import (
    CommentRequest,
    CommentResponse,
    LikeResponse,
    OkResponse,
    PaperResponse,
)
from .announcement import EventRequest, NewsRequest

__all__ = [
    "AuthResponse",
    "AvatarResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    "CommentRequest",
    "CommentResponse",
    "LikeResponse",
    "OkResponse",
    "PaperResponse",
    "EventRequest",
    "NewsRequest",
]
