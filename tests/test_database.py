"""
Tests for the Persistence Primitives

execute / query_one / query_all run SQLAlchemy constructs with bound
parameters; the SQLite engine enforces foreign keys so owner and
association cascades hold.
"""

from sqlalchemy import delete, func, insert, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from bookshelf.database import execute, query_all, query_one
from bookshelf.models import Book, BookTag, Tag, User


def add_user(db: Session, email: str = "reader@example.com") -> User:
    user = User(email=email, password_hash="x")
    db.add(user)
    db.commit()
    return user


class TestQueryPrimitives:
    def test_insert_reports_id(self, db_session: Session):
        user = add_user(db_session)

        result = execute(db_session, insert(Tag.__table__).values(user_id=user.id, name="favorites"))
        db_session.commit()

        assert result.rows_affected == 1
        assert result.inserted_id is not None
        tag = query_one(db_session, select(Tag).where(Tag.id == result.inserted_id))
        assert tag.name == "favorites"
        assert tag.color == "#6366f1"

    def test_update_and_delete_report_rows(self, db_session: Session):
        user = add_user(db_session)
        db_session.add_all([Tag(user_id=user.id, name=n) for n in ("a", "b", "c")])
        db_session.commit()

        updated = execute(
            db_session,
            update(Tag).where(Tag.user_id == user.id, Tag.name != "a").values(color="#000000"),
        )
        deleted = execute(db_session, delete(Tag).where(Tag.name == "missing"))

        assert updated.rows_affected == 2
        assert deleted.rows_affected == 0
        assert deleted.inserted_id is None

    def test_query_one_none(self, db_session: Session):
        assert query_one(db_session, select(User).where(User.id == 123)) is None

    def test_query_all_empty(self, db_session: Session):
        assert query_all(db_session, select(Book)) == []

    def test_parameters_are_bound(self, db_session: Session):
        add_user(db_session)
        hostile = "x' OR '1'='1"

        assert query_all(db_session, select(User).where(User.email == hostile)) == []


class TestJsonColumns:
    def test_lists_round_trip(self, db_session: Session):
        user = add_user(db_session)
        db_session.add(Book(user_id=user.id, title="Dune", authors=["A", "B"], genres=["sci-fi"]))
        db_session.commit()
        db_session.expire_all()

        book = query_one(db_session, select(Book))

        assert book.authors == ["A", "B"]
        assert book.genres == ["sci-fi"]

    def test_non_ascii_stored_unescaped(self, db_session: Session):
        user = add_user(db_session)
        db_session.add(Book(user_id=user.id, title="Solaris", authors=["Stanisław Lem"]))
        db_session.commit()

        raw = db_session.execute(text("SELECT authors FROM books")).scalar_one()

        assert "Stanisław" in raw


class TestCascades:
    def test_sqlite_foreign_keys_enabled(self, engine: Engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1

    def test_deleting_user_removes_books_and_tags(self, db_session: Session):
        user = add_user(db_session)
        book = Book(user_id=user.id, title="Dune")
        tag = Tag(user_id=user.id, name="favorites")
        db_session.add_all([book, tag])
        db_session.flush()
        db_session.add(BookTag(book_id=book.id, tag_id=tag.id))
        db_session.commit()

        execute(db_session, delete(User).where(User.id == user.id))
        db_session.commit()

        for model in (Book, Tag, BookTag):
            count = db_session.execute(select(func.count()).select_from(model)).scalar_one()
            assert count == 0
