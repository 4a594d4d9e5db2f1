"""
Users Services Package.
"""
from modules.users.services.errors import ErrorKind, ServiceError
from modules.users.services.user_service import UserService

__all__ = ["ErrorKind", "ServiceError", "UserService"]
