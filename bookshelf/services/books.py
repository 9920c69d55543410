"""
Books Service

Owner-scoped CRUD for the books on a user's shelf.

Ownership
=========
Every statement carries `Book.user_id == user_id` in its WHERE clause. A
book that belongs to someone else is never loaded and compared afterwards;
it simply does not match, and the caller gets NotFoundError.

Tags
====
- Tag ids supplied on create/update are filtered through an owner-scoped
  SELECT before any link is written. Ids the user does not own are dropped.
- On update, a present `tags` list replaces the book's links wholesale.
  The delete and the re-insert happen in the same transaction as the rest
  of the update and are committed once.
- Listing fetches the tags of all returned books in ONE query keyed by the
  book ids, then groups them per book.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import String, cast, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from bookshelf.database import execute, query_all, query_one
from bookshelf.exceptions import NotFoundError, ValidationError
from bookshelf.models import Book, BookTag, ReadingStatus, Tag
from bookshelf.schemas import BookCreate, BookResponse, BookUpdate, TagSummary

logger = logging.getLogger(__name__)

# List columns never hold NULL; a null in an update payload clears them
LIST_FIELDS = ("authors", "genres")


def parse_status(value: str | None) -> ReadingStatus | None:
    """
    Validate a status filter against the closed set of reading statuses.

    Raises:
        ValidationError: If the value is not unread, in_progress or completed
    """
    if value is None:
        return None
    try:
        return ReadingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ReadingStatus)
        raise ValidationError(f"Invalid status. Must be one of: {allowed}", field="status") from None


class BookService:
    """Book operations for one request's database session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def list_books(
        self,
        user_id: int,
        status: str | None = None,
        tag_id: int | None = None,
        q: str | None = None,
    ) -> list[BookResponse]:
        """
        List the user's books, newest first.

        Args:
            user_id: Owner
            status: Only books with this reading status
            tag_id: Only books linked to this tag
            q: Case-insensitive substring of the title or the authors

        Authors are matched against their stored JSON text, so q can also
        match the serialization itself: '[' matches every book and '", "'
        every book with two or more authors.

        Raises:
            ValidationError: If status is not a known reading status
        """
        reading_status = parse_status(status)

        stmt = select(Book).where(Book.user_id == user_id)

        if reading_status is not None:
            stmt = stmt.where(Book.status == reading_status.value)

        if tag_id is not None:
            stmt = stmt.join(BookTag, BookTag.book_id == Book.id).where(BookTag.tag_id == tag_id)

        if q:
            # autoescape makes % and _ in the search text match literally
            stmt = stmt.where(
                or_(
                    Book.title.icontains(q, autoescape=True),
                    cast(Book.authors, String).icontains(q, autoescape=True),
                )
            )

        stmt = stmt.order_by(Book.added_at.desc(), Book.id.desc())
        books = query_all(self.db, stmt)

        tags_by_book = self._tags_for_books(book.id for book in books)
        return [self._to_response(book, tags_by_book.get(book.id, [])) for book in books]

    def get(self, user_id: int, book_id: int) -> BookResponse:
        """
        Get one of the user's books.

        Raises:
            NotFoundError: If the book does not exist or is not the user's
        """
        book = self._get_owned(user_id, book_id)
        return self._to_response(book, self._tags_for_books([book.id]).get(book.id, []))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create(self, user_id: int, data: BookCreate) -> BookResponse:
        """
        Add a book to the user's shelf, linking any of the given tags the
        user owns.
        """
        fields = data.model_dump(exclude={"tags"})
        fields["status"] = data.status.value
        book = Book(user_id=user_id, **fields)

        try:
            self.db.add(book)
            self.db.flush()  # assigns book.id for the links
            self._link_tags(user_id, book.id, data.tags)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(book)
        logger.info(f"Book {book.id} created for user {user_id}")
        return self.get(user_id, book.id)

    def update(self, user_id: int, book_id: int, data: BookUpdate) -> BookResponse:
        """
        Apply a partial update. Only fields present in the payload change.

        Raises:
            NotFoundError: If the book does not exist or is not the user's
        """
        book = self._get_owned(user_id, book_id)

        changes = data.model_dump(exclude_unset=True)
        replace_tags = "tags" in changes
        tag_ids = changes.pop("tags", None) or []

        if "status" in changes:
            changes["status"] = data.status.value
        for field in LIST_FIELDS:
            if field in changes and changes[field] is None:
                changes[field] = []

        try:
            for field, value in changes.items():
                setattr(book, field, value)

            if replace_tags:
                execute(self.db, delete(BookTag).where(BookTag.book_id == book.id))
                self._link_tags(user_id, book.id, tag_ids)

            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(book)
        logger.info(f"Book {book_id} updated for user {user_id}")
        return self._to_response(book, self._tags_for_books([book.id]).get(book.id, []))

    def delete(self, user_id: int, book_id: int) -> None:
        """
        Delete one of the user's books; its tag links go with it.

        Raises:
            NotFoundError: If the book does not exist or is not the user's
        """
        try:
            result = execute(
                self.db,
                delete(Book).where(Book.id == book_id, Book.user_id == user_id),
            )
            if result.rows_affected == 0:
                self.db.rollback()
                raise NotFoundError("Book not found")
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Book {book_id} deleted for user {user_id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _get_owned(self, user_id: int, book_id: int) -> Book:
        stmt = select(Book).where(Book.id == book_id, Book.user_id == user_id)
        book = query_one(self.db, stmt)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def _link_tags(self, user_id: int, book_id: int, tag_ids: list[int]) -> None:
        """Link the book to those of tag_ids the user owns. Does not commit."""
        if not tag_ids:
            return

        owned = set(
            query_all(
                self.db,
                select(Tag.id).where(Tag.user_id == user_id, Tag.id.in_(tag_ids)),
            )
        )
        dropped = [tag_id for tag_id in tag_ids if tag_id not in owned]
        if dropped:
            logger.warning(f"Ignoring tag ids {dropped} not owned by user {user_id}")

        self.db.add_all(
            BookTag(book_id=book_id, tag_id=tag_id) for tag_id in tag_ids if tag_id in owned
        )
        self.db.flush()

    def _tags_for_books(self, book_ids: Iterable[int]) -> dict[int, list[TagSummary]]:
        """Fetch the tags of many books in one query, grouped by book id."""
        ids = list(book_ids)
        if not ids:
            return {}

        stmt = (
            select(BookTag)
            .join(BookTag.tag)
            .options(contains_eager(BookTag.tag))
            .where(BookTag.book_id.in_(ids))
            .order_by(Tag.name, Tag.id)
        )

        grouped: dict[int, list[TagSummary]] = defaultdict(list)
        for link in query_all(self.db, stmt):
            grouped[link.book_id].append(TagSummary.model_validate(link.tag))
        return grouped

    @staticmethod
    def _to_response(book: Book, tags: list[TagSummary]) -> BookResponse:
        return BookResponse.model_validate(book).model_copy(update={"tags": tags})
