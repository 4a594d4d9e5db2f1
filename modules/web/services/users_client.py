"""
Users API Client - Async HTTP client for the /api/users endpoints.
"""
from typing import Optional

import httpx

from shared.http.middleware import INTERNAL_TOKEN_HEADER


class UsersApiClient:
    """
    Thin wrapper over httpx.AsyncClient; raises httpx.HTTPError on failure.

    When internal_token is set every call carries it, so the app's rate
    limiter does not count the pages' own API calls against the server.
    """

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        internal_token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client
        self.headers = {INTERNAL_TOKEN_HEADER: internal_token} if internal_token else {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=10.0)
        return self._client

    async def list_users(self) -> list[dict]:
        response = await self.client.get("/api/users", headers=self.headers)
        response.raise_for_status()
        return response.json()["users"]

    async def create_user(self, name: str, email: str) -> dict:
        response = await self.client.post(
            "/api/users",
            json={"name": name, "email": email},
            headers=self.headers,
        )
        response.raise_for_status()
        return response.json()

    async def delete_user(self, user_id: str) -> None:
        response = await self.client.delete(f"/api/users/{user_id}", headers=self.headers)
        response.raise_for_status()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
