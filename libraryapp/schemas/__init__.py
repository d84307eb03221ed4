from .user import UserCreateRequest, UserResponse, UserUpdateRequest

__all__ = ["UserCreateRequest", "UserUpdateRequest", "UserResponse"]
