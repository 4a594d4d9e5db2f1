"""
Users HTTP Handler - JSON CRUD and search endpoints.

Handlers raise ServiceError; the app's error handlers turn it into
the matching status code and {"error": ...} body.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request

from modules.users.services.user_service import UserService
from shared.models.users_model import (
    MessageResponse,
    UserListResponse,
    UserPayload,
    UsersModel,
)


router = APIRouter(prefix="/api/users", tags=["Users"])


# --- Dependencies ---

def get_user_service(request: Request) -> UserService:
    """Dependency: the service bound to the app at startup."""
    return request.app.state.user_service


# --- Routes ---

@router.get("", response_model=UserListResponse)
async def list_users(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    user_service: UserService = Depends(get_user_service),
):
    """
    List users, newest first.

    - **page**: 1-based page number (default 1)
    - **limit**: page size (default 10)
    """
    return user_service.list_users(page=page, limit=limit)


@router.get("/search/{query}", response_model=list[UsersModel])
async def search_users(
    query: str,
    user_service: UserService = Depends(get_user_service),
):
    """Users whose name or email contains the query (case-insensitive)."""
    return user_service.search_users(query)


@router.get("/{user_id}", response_model=UsersModel)
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Get a single user."""
    return user_service.get_user(user_id)


@router.post("", response_model=UsersModel, status_code=201)
async def create_user(
    payload: Optional[UserPayload] = None,
    user_service: UserService = Depends(get_user_service),
):
    """Create a user from name and email."""
    payload = payload or UserPayload()
    return user_service.create_user(payload.name, payload.email)


@router.put("/{user_id}", response_model=UsersModel)
async def update_user(
    user_id: str,
    payload: Optional[UserPayload] = None,
    user_service: UserService = Depends(get_user_service),
):
    """Update name and/or email; omitted fields keep their value."""
    payload = payload or UserPayload()
    return user_service.update_user(user_id, name=payload.name, email=payload.email)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Delete a user."""
    user_service.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
