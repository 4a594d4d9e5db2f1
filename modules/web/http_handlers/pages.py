"""
Pages HTTP Handler - User management page for the HTMX interface.

The page talks to the JSON API over HTTP through UsersApiClient, the same
way a browser client would. The client carries the app's internal token, so
only the browser's own page request counts against its rate limit.
"""
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from modules.web.services.users_client import UsersApiClient
from modules.web.services.users_view import UsersView
from shared.services.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/web", tags=["Web Pages"])

# Templates
templates_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))


# --- Dependencies ---

def get_users_client(request: Request) -> UsersApiClient:
    """Dependency: API client bound to the app at startup."""
    return request.app.state.users_client


def get_users_view(api: UsersApiClient = Depends(get_users_client)) -> UsersView:
    """Dependency: fresh view state per request."""
    return UsersView(api=api)


# --- Pages ---

@router.get("/", response_class=HTMLResponse)
async def users_page(request: Request, view: UsersView = Depends(get_users_view)):
    """Full page: form, error box and user list."""
    await view.load()
    logger.info(f"Rendering users page with {len(view.users)} users")
    return templates.TemplateResponse(request, "users.html", {"view": view})


@router.post("/users", response_class=HTMLResponse)
async def add_user(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    view: UsersView = Depends(get_users_view),
):
    """Create a user; returns the new card plus out-of-band form and error updates."""
    user = await view.submit(name, email)
    return templates.TemplateResponse(
        request,
        "partials/user_created.html",
        {"view": view, "user": user},
    )


@router.delete("/users/{user_id}", response_class=HTMLResponse)
async def remove_user(
    request: Request,
    user_id: str,
    view: UsersView = Depends(get_users_view),
):
    """Delete a user; an empty body removes the card, a failure only updates the error box."""
    if await view.delete(user_id):
        return HTMLResponse("")

    response = templates.TemplateResponse(request, "partials/error.html", {"view": view, "oob": True})
    response.headers["HX-Reswap"] = "none"
    return response
