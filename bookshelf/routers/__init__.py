"""
API Routers Package

Router Structure:
- auth.py: /api/auth/* endpoints (register, login, logout, me)
- books.py: /api/books/* endpoints
- tags.py: /api/tags/* endpoints
- search.py: /api/search/* endpoints (Open Library catalog)

Each router is imported and registered in main.py.
"""

from bookshelf.routers.auth import router as auth_router
from bookshelf.routers.books import router as books_router
from bookshelf.routers.search import router as search_router
from bookshelf.routers.tags import router as tags_router

__all__ = [
    "auth_router",
    "books_router",
    "tags_router",
    "search_router",
]
