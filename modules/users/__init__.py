"""
Users Module - JSON API for the User resource.

Structure:
- services/: Validation, persistence calls and tagged service errors
- http_handlers/: FastAPI routes for /api/users
"""
from modules.users.services.user_service import UserService
from modules.users.services.errors import ErrorKind, ServiceError
from modules.users.http_handlers.users import router as users_router

__all__ = [
    "UserService",
    "ErrorKind",
    "ServiceError",
    "users_router",
]
