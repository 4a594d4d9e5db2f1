"""
Web Services Package.
"""
from modules.web.services.users_client import UsersApiClient
from modules.web.services.users_view import UsersView, UserForm, ViewStatus

__all__ = ["UsersApiClient", "UsersView", "UserForm", "ViewStatus"]
