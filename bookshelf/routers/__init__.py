"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* endpoints (registration, login), public
- books.py: /api/v1/books/* endpoints, bearer token required
- users.py: /api/v1/users/* endpoints, bearer token required

Each router is imported and registered in main.py.
"""

from bookshelf.routers.auth import router as auth_router
from bookshelf.routers.books import router as books_router
from bookshelf.routers.users import router as users_router

__all__ = [
    "auth_router",
    "books_router",
    "users_router",
]
