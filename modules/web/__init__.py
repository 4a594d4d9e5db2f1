"""
Web Module - HTMX-based user management page.

Structure:
- services/: API client and page view state
- http_handlers/: FastAPI routes for web pages
- templates/: Jinja2 HTML templates
"""
from modules.web.http_handlers.pages import router as pages_router

__all__ = ["pages_router"]
