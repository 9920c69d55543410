"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (owner)
- User -> Tag: One-to-Many (owner)
- Book <-> Tag: Many-to-Many through BookTag (book_tags), same owner only

Import all models here so Alembic and create_tables() see every table.
"""

# The order matters for SQLAlchemy to resolve relationships
from bookshelf.models.user import User
from bookshelf.models.tag import DEFAULT_TAG_COLOR, BookTag, Tag
from bookshelf.models.book import Book, ReadingStatus

__all__ = [
    "User",
    "Book",
    "ReadingStatus",
    "Tag",
    "BookTag",
    "DEFAULT_TAG_COLOR",
]
