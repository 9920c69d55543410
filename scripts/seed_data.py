#!/usr/bin/env python3
"""
Database Seed Script

Creates a demo account with a few tags and books for local development.

USAGE:
    # From the project root with the virtualenv active
    python scripts/seed_data.py

    # Custom credentials
    DEMO_EMAIL=me@example.com DEMO_PASSWORD=a-long-password python scripts/seed_data.py

This script:
1. Creates the tables if they do not exist
2. Removes a previous demo account with the same email (its books and tags
   go with it)
3. Creates the demo user, tags and books through the regular services, so
   the same ownership and tag rules apply as for API requests
"""

import os
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookshelf.database import SessionLocal, create_tables, execute
from bookshelf.models import User
from bookshelf.schemas import BookCreate, TagCreate
from bookshelf.services.books import BookService
from bookshelf.services.security import hash_password
from bookshelf.services.tags import TagService

DEMO_EMAIL = os.environ.get("DEMO_EMAIL", "demo@example.com").lower()
DEMO_PASSWORD = os.environ.get("DEMO_PASSWORD", "bookshelf-demo")

TAGS = [
    {"name": "favorites", "color": "#ff0000"},
    {"name": "to-lend", "color": "#10b981"},
    {"name": "book-club"},
]

BOOKS = [
    {
        "title": "Dune",
        "authors": ["Frank Herbert"],
        "open_library_key": "/works/OL893415W",
        "publication_year": 1965,
        "isbn_13": "9780441172719",
        "genres": ["Science fiction"],
        "status": "completed",
        "rating": 5,
        "notes": "Re-read every few years.",
        "tags": ["favorites", "book-club"],
    },
    {
        "title": "Dune Messiah",
        "authors": ["Frank Herbert"],
        "publication_year": 1969,
        "genres": ["Science fiction"],
        "status": "in_progress",
        "tags": ["book-club"],
    },
    {
        "title": "Foundation",
        "authors": ["Isaac Asimov"],
        "publication_year": 1951,
        "isbn_13": "9780553293357",
        "genres": ["Science fiction"],
        "status": "unread",
        "tags": ["to-lend"],
    },
    {
        "title": "The Left Hand of Darkness",
        "authors": ["Ursula K. Le Guin"],
        "publication_year": 1969,
        "genres": ["Science fiction", "Feminist fiction"],
        "status": "completed",
        "rating": 4,
        "tags": ["favorites"],
    },
]


def clear_demo_user(db: Session) -> None:
    """Delete a previous demo account and everything it owns."""
    result = execute(db, delete(User).where(User.email == DEMO_EMAIL))
    db.commit()
    if result.rows_affected:
        print(f"Removed previous demo account {DEMO_EMAIL}.")


def create_demo_user(db: Session) -> User:
    print(f"Creating demo user {DEMO_EMAIL}...")
    user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_tags(db: Session, user: User) -> dict[str, int]:
    """Create the demo tags; returns tag ids by name."""
    print("Creating tags...")
    service = TagService(db)
    tag_ids = {}
    for data in TAGS:
        tag = service.create(user.id, TagCreate(**data))
        tag_ids[tag.name] = tag.id

    print(f"Created {len(tag_ids)} tags.")
    return tag_ids


def create_books(db: Session, user: User, tag_ids: dict[str, int]) -> int:
    print("Creating books...")
    service = BookService(db)
    for data in BOOKS:
        data = dict(data)
        data["tags"] = [tag_ids[name] for name in data.get("tags", [])]
        service.create(user.id, BookCreate(**data))

    print(f"Created {len(BOOKS)} books.")
    return len(BOOKS)


def seed_database() -> None:
    """Main function to seed the database."""
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        clear_demo_user(db)
        user = create_demo_user(db)
        tag_ids = create_tags(db, user)
        book_count = create_books(db, user, tag_ids)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - User: {DEMO_EMAIL}")
        print(f"  - Tags: {len(tag_ids)}")
        print(f"  - Books: {book_count}")
        print("\nLog in at http://localhost:3001/api/auth/login")
        print("API documentation at http://localhost:3001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
