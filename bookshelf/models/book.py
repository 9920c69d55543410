"""
Book Model

A book on one user's shelf. Every row has exactly one owner (user_id), set
at creation and never changed.

authors and genres are ordered lists of strings stored in JSON columns; the
JSON encoding happens in the column type, so the rest of the application
only ever sees Python lists.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base

if TYPE_CHECKING:
    from bookshelf.models.tag import BookTag
    from bookshelf.models.user import User


class ReadingStatus(str, Enum):
    """
    Reading progress of a book.

    - UNREAD: On the shelf, not started (default)
    - IN_PROGRESS: Currently reading
    - COMPLETED: Finished
    """
    UNREAD = "unread"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Book(Base):
    """
    Book model representing a book on a user's shelf.

    Table: books

    Fields:
    - title: Book title (required)
    - authors / genres: Ordered lists of names (JSON)
    - open_library_key: Catalog work key the book was added from
    - publication_year, isbn_13, cover_url: Optional catalog metadata
    - status: unread | in_progress | completed
    - rating: 1-5, optional
    - notes: Free text, optional

    Relationships:
    - owner: Many-to-One with User
    - tag_links: One-to-Many with BookTag (deleted with the book)

    Indexes:
    - user_id: Every lookup is owner-scoped
    - (user_id, status): Status filter on the shelf view

    Example:
        book = Book(
            user_id=1,
            title="Dune",
            authors=["Frank Herbert"],
            genres=["Science fiction"],
            status=ReadingStatus.UNREAD.value,
        )
    """

    __tablename__ = "books"
    __table_args__ = (
        Index("idx_books_user_status", "user_id", "status"),
    )

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        comment="Owning user"
    )

    # -------------------------------------------------------------------------
    # Catalog Fields
    # -------------------------------------------------------------------------
    open_library_key: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Open Library work key, e.g. /works/OL45804W"
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title"
    )

    authors: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered author names"
    )

    publication_year: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Year of first publication"
    )

    isbn_13: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="ISBN-13 (free form, as supplied)"
    )

    genres: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered genre/subject names"
    )

    cover_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cover image URL"
    )

    # -------------------------------------------------------------------------
    # Reading Fields
    # -------------------------------------------------------------------------
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReadingStatus.UNREAD.value,
        server_default=ReadingStatus.UNREAD.value,
        comment="unread, in_progress or completed"
    )

    rating: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Personal rating 1-5"
    )

    notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Personal notes"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the book was added to the shelf"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    owner: Mapped["User"] = relationship("User", back_populates="books")

    tag_links: Mapped[list["BookTag"]] = relationship(
        "BookTag",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, user_id={self.user_id}, title='{self.title}')"
