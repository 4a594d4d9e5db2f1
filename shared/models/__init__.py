"""
Models package - Pydantic models for data validation.
"""
from shared.models.users_model import (
    UsersModel,
    UserFields,
    UserPayload,
    Pagination,
    UserListResponse,
    MessageResponse,
)

__all__ = [
    "UsersModel",
    "UserFields",
    "UserPayload",
    "Pagination",
    "UserListResponse",
    "MessageResponse",
]
