"""
Tag Models

Tag: a user-defined label with a colour. Names are unique per owner.

BookTag: the book_tags association (book_id, tag_id). It is mapped as a
class rather than a bare Table so the services can load the linked Tag
alongside each link in one query. Links are only ever created between a
book and a tag belonging to the same user; the services enforce this by
filtering tag ids through an owner-scoped query before inserting.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookshelf.database import Base

if TYPE_CHECKING:
    from bookshelf.models.book import Book
    from bookshelf.models.user import User

DEFAULT_TAG_COLOR = "#6366f1"


class Tag(Base):
    """
    Tag model representing a user's label.

    Table: tags

    Constraints:
    - UNIQUE(user_id, name)

    Example:
        tag = Tag(user_id=1, name="favorites", color="#ff0000")
    """

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        comment="Owning user"
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Tag name, unique per user"
    )

    color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        default=DEFAULT_TAG_COLOR,
        server_default=DEFAULT_TAG_COLOR,
        comment="Hex colour #RRGGBB"
    )

    owner: Mapped["User"] = relationship("User", back_populates="tags")

    book_links: Mapped[list["BookTag"]] = relationship(
        "BookTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Tag(id={self.id}, user_id={self.user_id}, name='{self.name}')"


class BookTag(Base):
    """
    Association between a book and a tag.

    Table: book_tags

    The composite primary key makes each (book_id, tag_id) pair unique.
    Both foreign keys cascade, so deleting a book or a tag removes its links.
    """

    __tablename__ = "book_tags"

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )

    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )

    book: Mapped["Book"] = relationship("Book", back_populates="tag_links")

    # Joined so a batch of links arrives with its tags in the same SELECT
    tag: Mapped["Tag"] = relationship("Tag", back_populates="book_links", lazy="joined")

    def __repr__(self) -> str:
        return f"BookTag(book_id={self.book_id}, tag_id={self.tag_id})"
