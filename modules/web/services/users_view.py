"""
Users View - State behind the user management page.

Holds the user list, the pending form and the loading/error status.
Every transition is driven by the outcome of one API call.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import httpx

from modules.web.services.users_client import UsersApiClient
from shared.services.logger import get_logger


logger = get_logger(__name__)

# Transport errors, non-2xx responses and malformed bodies
API_ERRORS = (httpx.HTTPError, ValueError, KeyError)


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass
class UserForm:
    name: str = ""
    email: str = ""


@dataclass
class UsersView:
    """
    View state for the users page.

    - load(): fetch the list
    - submit(): validate locally, create, append on success
    - delete(): delete, remove locally on success
    Failures keep the list as it was and set a generic error message.
    """
    api: UsersApiClient
    users: list[dict] = field(default_factory=list)
    form: UserForm = field(default_factory=UserForm)
    status: ViewStatus = ViewStatus.IDLE
    error: str = ""

    def _fail(self, message: str) -> None:
        self.status = ViewStatus.ERROR
        self.error = message

    async def load(self) -> None:
        self.status = ViewStatus.LOADING
        try:
            self.users = await self.api.list_users()
        except API_ERRORS as e:
            logger.error(f"Failed to fetch users: {e}")
            self._fail("Failed to fetch users")
            return
        self.status = ViewStatus.IDLE

    async def submit(self, name: str, email: str) -> Optional[dict]:
        """Create a user; returns it on success, None otherwise."""
        self.form = UserForm(name=name, email=email)
        if not name.strip() or not email.strip():
            self._fail("Please fill in all fields")
            return None

        self.status = ViewStatus.LOADING
        try:
            user = await self.api.create_user(name, email)
        except API_ERRORS as e:
            logger.error(f"Failed to create user: {e}")
            self._fail("Failed to create user")
            return None

        self.users = [*self.users, user]
        self.form = UserForm()
        self.error = ""
        self.status = ViewStatus.IDLE
        return user

    async def delete(self, user_id: str) -> bool:
        try:
            await self.api.delete_user(user_id)
        except API_ERRORS as e:
            logger.error(f"Failed to delete user {user_id}: {e}")
            self._fail("Failed to delete user")
            return False

        self.users = [user for user in self.users if user.get("id") != user_id]
        return True
